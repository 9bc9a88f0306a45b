import json

from flask import current_app, has_app_context
from sqlalchemy import update

from ..extensions import db
from ..models.candidate_assessment import CandidateAssessment
from ..models.enums import AssessmentStatus, Recommendation
from ..services.llm_gateway import FeedbackError, gen_feedback

SUMMARY_KEYS = ("technicalSkills", "communication", "problemSolving", "experience",
                "summary", "recommendation", "strengths", "improvements")


def _clamp_rating(value) -> float:
    try:
        rating = float(value)
    except (TypeError, ValueError):
        raise FeedbackError(f"rating is not a number: {value!r}")
    return max(0.0, min(10.0, rating))


def record_feedback(assessment_id: int, feedback: dict) -> bool:
    """Store the AI score once and mark the session completed.

    Only the AI fields and status are written; decision fields are never
    touched here. Returns False if the assessment was already scored.
    """
    rating = _clamp_rating(feedback.get("rating"))
    recommendation = feedback.get("recommendation")
    try:
        recommendation = Recommendation(recommendation).value
    except ValueError:
        recommendation = None
    summary = json.dumps({k: feedback.get(k) for k in SUMMARY_KEYS})

    stmt = (
        update(CandidateAssessment)
        .where(CandidateAssessment.id == assessment_id, CandidateAssessment.rating.is_(None))
        .values(
            rating=rating,
            feedback_summary=summary,
            ai_recommendation=recommendation,
            status=AssessmentStatus.COMPLETED.value,
        )
        .execution_options(synchronize_session=False)
    )
    result = db.session.execute(stmt)
    if result.rowcount != 1:
        db.session.rollback()
        current_app.logger.warning('Feedback for assessment %s ignored: already scored or missing', assessment_id)
        return False
    db.session.commit()
    current_app.logger.info('Feedback generated and saved for assessment %s (rating %s)', assessment_id, rating)
    return True


def _run_generate_feedback(assessment_id: int):
    assessment = db.session.get(CandidateAssessment, assessment_id)
    if not assessment:
        return None
    if assessment.rating is not None:
        return False
    if not assessment.transcript:
        raise FeedbackError("No transcript available for analysis")

    interview = assessment.interview
    payload = {
        "position": interview.position,
        "job_desc": interview.job_desc,
        "job_experience": interview.job_experience,
        "tech_stack": interview.tech_stack,
        "questions": interview.questions if isinstance(interview.questions, list) else [],
        "candidate_name": assessment.candidate_name,
        "transcript": assessment.transcript,
    }
    feedback = gen_feedback(payload)
    return record_feedback(assessment_id, feedback)


def generate_feedback(assessment_id: int):
    """Entrypoint that ensures execution inside a Flask app context for workers."""
    if has_app_context():
        return _run_generate_feedback(assessment_id)
    from .. import create_app
    app = create_app()
    with app.app_context():
        return _run_generate_feedback(assessment_id)
