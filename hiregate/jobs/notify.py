from flask import current_app, has_app_context, render_template

from ..extensions import db
from ..models.candidate_assessment import CandidateAssessment
from ..policy.eligibility import parse_feedback
from ..services.mail import send_mail


def send_offer_email(assessment, decider_name=None):
    """Email the offer to the candidate. Raises MailError on failure."""
    interview = assessment.interview
    feedback = parse_feedback(assessment.feedback_summary) or {}
    subject = f"Congratulations! You've Been Selected for {interview.position}"
    html = render_template('email/offer.html', assessment=assessment, interview=interview,
                           summary=feedback.get('summary'), decider_name=decider_name)
    status, _ = send_mail(assessment.candidate_email, subject, html)
    current_app.logger.info('Offer email sent to candidate %s (status %s)', assessment.candidate_email, status)
    return status


def _run_send_decision_confirmation(assessment_id: int, to_email: str):
    assessment = db.session.get(CandidateAssessment, assessment_id)
    if not assessment or not assessment.final_decision:
        return None
    interview = assessment.interview
    subject = f"Candidate Selected: {assessment.candidate_name} for {interview.position}"
    html = render_template('email/decision_confirmation.html', assessment=assessment, interview=interview)
    status, _ = send_mail(to_email, subject, html)
    current_app.logger.info('Confirmation email sent to decider %s', to_email)
    return status


def send_decision_confirmation(assessment_id: int, to_email: str):
    """Entrypoint that ensures execution inside a Flask app context for workers."""
    if has_app_context():
        return _run_send_decision_confirmation(assessment_id, to_email)
    from .. import create_app
    app = create_app()
    with app.app_context():
        return _run_send_decision_confirmation(assessment_id, to_email)
