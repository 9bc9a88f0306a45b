import json
import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from config import TestConfig
from hiregate import create_app
from hiregate.extensions import db
from hiregate.models import CandidateAssessment, Interview, User, UserRole
from hiregate.models.enums import Role

PASSWORD = "correct-horse-battery"


@pytest.fixture
def app(tmp_path):
    class _Config(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{(tmp_path / 'test.db').as_posix()}"

    app = create_app(_Config)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sent_mail(monkeypatch):
    """Capture outbound email instead of calling SendGrid."""
    sent = []

    def fake_send(to_email, subject, html):
        sent.append({"to": to_email, "subject": subject, "html": html})
        return 202, {}

    monkeypatch.setattr('hiregate.jobs.notify.send_mail', fake_send)
    return sent


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make(*roles, email=None, name=None):
        counter["n"] += 1
        user = User(email=email or f"user{counter['n']}@example.com", name=name)
        user.set_password(PASSWORD)
        db.session.add(user)
        db.session.commit()
        for r in roles:
            db.session.add(UserRole(user_id=user.id, role=Role(r)))
        db.session.commit()
        return user

    return _make


@pytest.fixture
def interview(make_user):
    owner = make_user("recruiter", email="owner@example.com")
    iv = Interview(
        created_by=owner.id,
        position="Backend Engineer",
        job_desc="Build and run Python services.",
        job_experience=3,
        tech_stack="Python, Flask, PostgreSQL",
        questions=["Tell me about a service you scaled.", "How do you test database code?"],
        duration_minutes=20,
    )
    db.session.add(iv)
    db.session.commit()
    return iv


@pytest.fixture
def make_assessment(interview):
    def _make(rating=8.0, status="completed", ai_recommendation=None, feedback=None,
              final_decision=None, selection_status=None, decision_by=None,
              candidate_email="candidate@example.com"):
        a = CandidateAssessment(
            interview_id=interview.id,
            candidate_name="Ada Candidate",
            candidate_email=candidate_email,
            status=status,
            transcript="Interviewer: Hello. Candidate: Hi.",
            rating=rating,
            ai_recommendation=ai_recommendation,
            feedback_summary=json.dumps(feedback) if isinstance(feedback, dict) else feedback,
            final_decision=final_decision,
            selection_status=selection_status,
            decision_by=decision_by,
        )
        db.session.add(a)
        db.session.commit()
        return a

    return _make


@pytest.fixture
def login(client):
    def _login(user):
        resp = client.post('/auth/login', data={"email": user.email, "password": PASSWORD})
        assert resp.status_code == 200, resp.get_json()
        return resp

    return _login


def decision_fields(assessment_id):
    """Snapshot of the fields the committer may write, read fresh from the store."""
    db.session.expire_all()
    a = db.session.get(CandidateAssessment, assessment_id)
    return {
        "selection_status": a.selection_status,
        "final_decision": a.final_decision,
        "decision_by": a.decision_by,
        "decision_at": a.decision_at,
        "rating": a.rating,
        "status": a.status,
    }
