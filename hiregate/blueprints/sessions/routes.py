import secrets

from flask import current_app, jsonify, request, abort
from . import bp
from ...extensions import db, rq
from ...jobs.feedback import generate_feedback
from ...models.candidate_assessment import CandidateAssessment
from ...models.enums import AssessmentStatus
from ...models.interview import Interview


# Candidates are not logged in during a voice interview. Starting a session
# hands out a random token, and only its holder may complete the session.

def _session_token():
    body = request.get_json(silent=True) or {}
    return str(request.headers.get("X-Session-Token") or body.get("session_token") or "")


@bp.post("")
def start_session():
    body = request.get_json(silent=True) or {}
    interview_id = body.get("interview_id")
    name = (body.get("candidate_name") or "").strip()
    email = (body.get("candidate_email") or "").strip()
    if not interview_id:
        return jsonify({"error": "Missing interview_id"}), 400
    if not name or not email:
        return jsonify({"error": "Missing candidate_name or candidate_email"}), 400
    if db.session.get(Interview, interview_id) is None:
        return jsonify({"error": "Interview not found"}), 404

    a = CandidateAssessment(
        interview_id=interview_id,
        candidate_name=name,
        candidate_email=email,
        status=AssessmentStatus.IN_PROGRESS.value,
        session_token=secrets.token_urlsafe(32),
    )
    db.session.add(a)
    db.session.commit()
    current_app.logger.info('Created assessment %s for interview %s', a.id, interview_id)
    return jsonify({"assessment_id": a.id, "session_token": a.session_token}), 201


@bp.post("/<int:assessment_id>/complete")
def complete_session(assessment_id):
    a = db.session.get(CandidateAssessment, assessment_id)
    if a is None:
        abort(404)
    token = _session_token()
    if not a.session_token or not secrets.compare_digest(token.encode(), a.session_token.encode()):
        current_app.logger.warning('SECURITY BLOCK: session token mismatch for assessment %s', assessment_id)
        abort(403)
    if a.status != AssessmentStatus.IN_PROGRESS.value or a.transcript:
        return jsonify({"error": "Session already completed"}), 409

    body = request.get_json(silent=True) or {}
    transcript = (body.get("transcript") or "").strip()
    if not transcript:
        return jsonify({"error": "Missing transcript"}), 400
    a.transcript = transcript
    db.session.commit()

    rq.enqueue(generate_feedback, assessment_id, job_timeout=300)
    return jsonify({"assessment_id": assessment_id, "queued": True}), 202
