import pytest

from conftest import decision_fields
from hiregate.extensions import db
from hiregate.models import CandidateAssessment, UserRole
from hiregate.models.enums import Role


def test_login_rejects_bad_password(client, make_user):
    user = make_user("recruiter")
    resp = client.post('/auth/login', data={"email": user.email, "password": "wrong-password"})
    assert resp.status_code == 401


def test_endpoints_require_login(client, make_assessment):
    a = make_assessment()
    assert client.get(f'/decisions/{a.id}').status_code == 401
    assert client.post(f'/decisions/{a.id}/hire').status_code == 401


def test_me_role(client, make_user, login):
    user = make_user("interviewer", "recruiter")
    login(user)
    body = client.get('/auth/me/role').get_json()
    assert body == {"role": "recruiter", "roles": ["interviewer", "recruiter"], "can_make_hiring_decisions": True}


def test_eligibility_view_distinguishes_score_and_permission(client, make_user, make_assessment, login):
    interviewer = make_user("interviewer")
    low = make_assessment(rating=3)
    high = make_assessment(rating=9)
    login(interviewer)

    low_view = client.get(f'/decisions/{low.id}').get_json()
    high_view = client.get(f'/decisions/{high.id}').get_json()

    assert low_view["state"] == "not_eligible"
    assert high_view["state"] == "awaiting_reviewer"
    assert low_view["message"] != high_view["message"]
    assert high_view["can_hire"] is False


def test_hire_endpoint_commits_for_current_user(client, make_user, make_assessment, login, sent_mail):
    recruiter = make_user("recruiter", name="Rita")
    a = make_assessment(rating=6)
    login(recruiter)

    resp = client.post(f'/decisions/{a.id}/hire', json={"decider_name": "Rita R."})

    assert resp.status_code == 200
    assert resp.get_json()["success"] is True
    assert decision_fields(a.id)["decision_by"] == recruiter.id
    # candidate offer + decider confirmation
    assert [m["to"] for m in sent_mail] == ["candidate@example.com", recruiter.email]

    again = client.post(f'/decisions/{a.id}/hire')
    assert again.status_code == 409
    assert again.get_json()["error"] == "already_decided"


def test_hire_endpoint_ignores_client_asserted_role(client, make_user, make_assessment, login, sent_mail):
    interviewer = make_user("interviewer")
    a = make_assessment(rating=9)
    login(interviewer)

    resp = client.post(f'/decisions/{a.id}/hire', json={"role": "admin", "eligible": True})

    assert resp.status_code == 403
    assert resp.get_json()["error"] == "unauthorized"
    assert decision_fields(a.id)["final_decision"] is None


def test_hire_endpoint_status_codes(client, make_user, make_assessment, login, sent_mail):
    admin = make_user("admin")
    low = make_assessment(rating=4)
    login(admin)

    assert client.post(f'/decisions/{low.id}/hire').status_code == 422
    assert client.post('/decisions/424242/hire').status_code == 404


def test_admin_grants_and_revokes_roles(client, make_user, login):
    admin = make_user("admin")
    target = make_user()
    login(admin)

    resp = client.post(f'/auth/users/{target.id}/roles', data={"role": "hiring_manager"})
    assert resp.status_code == 201
    assert UserRole.query.filter_by(user_id=target.id, role=Role.HIRING_MANAGER).count() == 1

    resp = client.delete(f'/auth/users/{target.id}/roles/hiring_manager')
    assert resp.status_code == 200
    assert UserRole.query.filter_by(user_id=target.id).count() == 0


def test_role_management_is_admin_only(client, make_user, login):
    manager = make_user("hiring_manager")
    target = make_user()
    login(manager)
    resp = client.post(f'/auth/users/{target.id}/roles', data={"role": "admin"})
    assert resp.status_code == 403


def _start_session(client, interview, email="bo@example.com"):
    resp = client.post('/sessions', json={
        "interview_id": interview.id, "candidate_name": "Bo", "candidate_email": email,
    })
    assert resp.status_code == 201
    return resp.get_json()


def test_session_lifecycle(client, interview, monkeypatch):
    from hiregate.jobs import feedback as feedback_job
    monkeypatch.setattr(feedback_job, "gen_feedback", lambda payload: {
        "rating": 6, "recommendation": "hold", "summary": "Fine.",
        "technicalSkills": 6, "communication": 6, "problemSolving": 6, "experience": 6,
        "strengths": [], "improvements": [],
    })

    started = _start_session(client, interview)
    assessment_id = started["assessment_id"]
    assert len(started["session_token"]) >= 32

    resp = client.post(f'/sessions/{assessment_id}/complete',
                       json={"transcript": "Q: hi A: hello", "session_token": started["session_token"]})
    assert resp.status_code == 202

    db.session.expire_all()
    stored = db.session.get(CandidateAssessment, assessment_id)
    assert stored.status == "completed"
    assert stored.rating == 6
    assert stored.final_decision is None

    again = client.post(f'/sessions/{assessment_id}/complete',
                        json={"transcript": "again"}, headers={"X-Session-Token": started["session_token"]})
    assert again.status_code == 409


def test_session_complete_requires_its_own_token(client, interview, monkeypatch):
    from hiregate.jobs import feedback as feedback_job
    monkeypatch.setattr(feedback_job, "gen_feedback", lambda payload: pytest.fail("gateway called"))

    victim = _start_session(client, interview)
    other = _start_session(client, interview, email="eve@example.com")
    url = f'/sessions/{victim["assessment_id"]}/complete'

    assert client.post(url, json={"transcript": "injected"}).status_code == 403
    assert client.post(url, json={"transcript": "injected", "session_token": "guess"}).status_code == 403
    assert client.post(url, json={"transcript": "injected",
                                  "session_token": other["session_token"]}).status_code == 403

    db.session.expire_all()
    stored = db.session.get(CandidateAssessment, victim["assessment_id"])
    assert stored.transcript is None
    assert stored.status == "in_progress"
    assert stored.rating is None


def test_session_without_token_cannot_be_completed(client, make_assessment):
    a = make_assessment(rating=None, status="in_progress")
    resp = client.post(f'/sessions/{a.id}/complete', json={"transcript": "text", "session_token": ""})
    assert resp.status_code == 403


def test_session_start_validation(client, interview):
    assert client.post('/sessions', json={"interview_id": interview.id}).status_code == 400
    resp = client.post('/sessions', json={"interview_id": 999, "candidate_name": "X", "candidate_email": "x@example.com"})
    assert resp.status_code == 404


INTERVIEW_FORM = {
    "position": "Data Engineer",
    "job_desc": "Own the ingestion pipelines.",
    "job_experience": "4",
    "tech_stack": "Python, Airflow",
    "duration_minutes": "25",
    "questions": "Describe a pipeline you rebuilt.\n\nHow do you backfill safely?\n",
}


def test_create_interview_and_start_a_session_on_it(client, make_user, login):
    interviewer = make_user("interviewer")
    login(interviewer)

    resp = client.post('/interviews', data=INTERVIEW_FORM)
    assert resp.status_code == 201
    created = resp.get_json()
    assert created["created_by"] == interviewer.id
    assert created["questions"] == ["Describe a pipeline you rebuilt.", "How do you backfill safely?"]
    assert created["job_experience"] == 4
    assert created["duration_minutes"] == 25

    listed = client.get('/interviews').get_json()["interviews"]
    assert [iv["id"] for iv in listed] == [created["id"]]

    resp = client.post('/sessions', json={
        "interview_id": created["id"], "candidate_name": "Bo", "candidate_email": "bo@example.com",
    })
    assert resp.status_code == 201


def test_create_interview_validates_form(client, make_user, login):
    login(make_user("recruiter"))
    resp = client.post('/interviews', data=dict(INTERVIEW_FORM, position="", questions="  \n "))
    assert resp.status_code == 400
    assert set(resp.get_json()["fields"]) >= {"position", "questions"}


def test_create_interview_requires_hiring_team_role(client, make_user, login):
    assert client.post('/interviews', data=INTERVIEW_FORM).status_code == 401
    login(make_user("candidate"))
    assert client.post('/interviews', data=INTERVIEW_FORM).status_code == 403


def test_interview_detail_lists_candidates_with_eligibility(client, interview, make_user, make_assessment, login):
    low = make_assessment(rating=3, candidate_email="low@example.com")
    high = make_assessment(rating=8, candidate_email="high@example.com")
    login(make_user("hiring_manager"))

    body = client.get(f'/interviews/{interview.id}').get_json()

    assert body["position"] == "Backend Engineer"
    states = {c["assessment_id"]: c["state"] for c in body["candidates"]}
    assert states == {low.id: "not_eligible", high.id: "actionable"}


def test_interview_detail_hidden_from_other_interviewers(client, interview, make_user, login):
    login(make_user("interviewer"))
    assert client.get(f'/interviews/{interview.id}').status_code == 403
    assert client.get('/interviews/424242').status_code == 404


def test_hire_endpoint_reports_store_outage_as_json(client, make_user, make_assessment, login, sent_mail, monkeypatch):
    from sqlalchemy.exc import OperationalError
    from hiregate.policy import decisions

    def locked(*args, **kwargs):
        raise OperationalError("UPDATE", {}, Exception("database is locked"))

    a = make_assessment(rating=8)
    login(make_user("recruiter"))
    monkeypatch.setattr(decisions, "claim_decision", locked)

    resp = client.post(f'/decisions/{a.id}/hire')

    assert resp.status_code == 503
    assert resp.get_json()["error"] == "store_unavailable"
