"""One-way "hire" transition for a candidate assessment.

The decision itself is a single conditional UPDATE (final_decision IS NULL)
committed before any side effect runs. Whatever happens afterwards (offer
record, in-app notification, email) the decision stands; later failures are
reported to the caller but never roll it back.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db, rq
from ..jobs.notify import send_decision_confirmation, send_offer_email
from ..models.candidate_assessment import CandidateAssessment
from ..models.enums import FINAL_DECISION_HIRE, OFFER_SENT, SELECTION_SELECTED
from ..models.notification import Notification
from ..models.offer import Offer
from .eligibility import MIN_HIRE_SCORE, EligibilityState, evaluate
from .roles import can_make_hiring_decisions, resolve_role


class DecisionError(Exception):
    reason = "decision_failed"
    committed = False

    def __init__(self, message=None):
        super().__init__(message or self.reason)


class Unauthorized(DecisionError):
    reason = "unauthorized"


class RecordNotFound(DecisionError):
    reason = "record_not_found"


class AlreadyDecided(DecisionError):
    reason = "already_decided"


class NotEvaluable(DecisionError):
    reason = "not_evaluable"


class NotDecided(DecisionError):
    reason = "not_decided"


class BelowThreshold(DecisionError):
    reason = "below_threshold"


class StoreUnavailable(DecisionError):
    reason = "store_unavailable"


class OfferRecordFailed(DecisionError):
    reason = "offer_record_failed"
    committed = True


class NotificationFailed(DecisionError):
    reason = "notification_failed"
    committed = True


@dataclass(frozen=True)
class DeciderContact:
    name: Optional[str] = None
    email: Optional[str] = None


@dataclass
class DecisionResult:
    assessment_id: Any
    success: bool
    error: Optional[str] = None
    message: Optional[str] = None
    committed: bool = False
    offer_id: Optional[int] = None

    @classmethod
    def failed(cls, assessment_id, exc: DecisionError, offer_id=None):
        return cls(assessment_id=assessment_id, success=False, error=exc.reason,
                   message=str(exc), committed=exc.committed, offer_id=offer_id)

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "offer_id": self.offer_id}
        out = {"error": self.error, "message": self.message}
        if self.committed:
            out["committed"] = True
        return out


def _load_assessment(assessment_id) -> Optional[CandidateAssessment]:
    return db.session.get(CandidateAssessment, assessment_id)


def check_preconditions(assessment_id, decider_id) -> CandidateAssessment:
    """Re-derive authorization and eligibility from stored state.

    Raises the DecisionError subclass naming the first failed check.
    """
    role = resolve_role(decider_id)
    if not can_make_hiring_decisions(role):
        raise Unauthorized("Only recruiters, hiring managers, or admins can confirm hiring decisions")

    assessment = _load_assessment(assessment_id)
    if assessment is None:
        raise RecordNotFound(f"Candidate assessment {assessment_id} not found")

    eligibility = evaluate(assessment, can_make_hiring_decisions=True)
    if eligibility.state is EligibilityState.HIRED:
        raise AlreadyDecided("This candidate already has a final decision recorded. Cannot modify.")
    if eligibility.state is EligibilityState.NOT_EVALUABLE:
        raise NotEvaluable("The interview has not been scored yet")
    if eligibility.state is EligibilityState.NOT_ELIGIBLE:
        raise BelowThreshold(
            f"Candidate does not meet minimum score threshold "
            f"({eligibility.rating}/10 < {MIN_HIRE_SCORE}/10). Hiring blocked."
        )
    return assessment


def claim_decision(assessment_id, decider_id, decided_at=None) -> None:
    """Atomically record the hire. Raises AlreadyDecided if another call won."""
    decided_at = decided_at or datetime.now(timezone.utc)
    stmt = (
        update(CandidateAssessment)
        .where(
            CandidateAssessment.id == assessment_id,
            CandidateAssessment.final_decision.is_(None),
            CandidateAssessment.selection_status.is_(None),
            CandidateAssessment.rating >= MIN_HIRE_SCORE,
        )
        .values(
            selection_status=SELECTION_SELECTED,
            final_decision=FINAL_DECISION_HIRE,
            decision_by=decider_id,
            decision_at=decided_at,
        )
        .execution_options(synchronize_session=False)
    )
    result = db.session.execute(stmt)
    if result.rowcount != 1:
        db.session.rollback()
        raise AlreadyDecided("This candidate already has a final decision recorded. Cannot modify.")
    db.session.commit()


def _create_offer(assessment_id, interview_id) -> int:
    offer = Offer(candidate_id=assessment_id, interview_id=interview_id, status=OFFER_SENT)
    db.session.add(offer)
    db.session.commit()
    return offer.id


def _create_notification(email, position) -> None:
    db.session.add(Notification(
        user_email=email,
        title="You're Selected!",
        message=(f"Congratulations! You have been selected for the {position} position. "
                 "Our team will contact you soon with next steps."),
        type="selection",
        is_read=False,
    ))
    db.session.commit()


def commit_hire_decision(assessment_id, decider_id, decider_contact: Optional[DeciderContact] = None) -> DecisionResult:
    """Turn an eligible assessment into a final "hire" made by ``decider_id``.

    Nothing supplied by the caller besides the two ids is trusted: role,
    threshold and prior decision are all re-read from the store.
    """
    log = current_app.logger
    contact = decider_contact or DeciderContact()
    log.info('AUDIT: User %s initiating hiring decision for candidate %s', decider_id, assessment_id)

    try:
        assessment = check_preconditions(assessment_id, decider_id)
        log.info('AUDIT: Candidate %s passed score threshold check (%s/10 >= %s/10)',
                 assessment_id, assessment.rating, MIN_HIRE_SCORE)
        interview_id = assessment.interview_id
        candidate_email = assessment.candidate_email
        position = assessment.interview.position
        claim_decision(assessment_id, decider_id)
    except DecisionError as e:
        log.warning('SECURITY BLOCK: hiring decision by user %s on candidate %s refused: %s (%s)',
                    decider_id, assessment_id, e.reason, e)
        return DecisionResult.failed(assessment_id, e)
    except SQLAlchemyError:
        db.session.rollback()
        log.exception('Store error while deciding candidate %s; nothing was recorded', assessment_id)
        return DecisionResult.failed(assessment_id, StoreUnavailable(
            "The decision could not be recorded right now. Please try again."))

    log.info('AUDIT: User %s confirmed hire decision for candidate %s', decider_id, assessment_id)

    try:
        offer_id = _create_offer(assessment_id, interview_id)
    except SQLAlchemyError:
        db.session.rollback()
        log.exception('Error creating offer record for candidate %s', assessment_id)
        return DecisionResult.failed(assessment_id, OfferRecordFailed(
            "Decision recorded, but the offer record could not be created"))

    try:
        _create_notification(candidate_email, position)
    except SQLAlchemyError:
        db.session.rollback()
        log.exception('Error creating in-app notification for candidate %s', assessment_id)

    try:
        send_offer_email(_load_assessment(assessment_id), contact.name)
    except Exception:
        log.exception('Offer email to candidate %s failed', candidate_email)
        return DecisionResult.failed(assessment_id, NotificationFailed(
            "Decision recorded, but the candidate could not be emailed"), offer_id=offer_id)

    if contact.email:
        rq.enqueue(send_decision_confirmation, assessment_id, contact.email)

    return DecisionResult(assessment_id=assessment_id, success=True, committed=True, offer_id=offer_id,
                          message="Candidate selected and notifications sent successfully")


def resend_offer_email(assessment_id, decider_id, decider_contact: Optional[DeciderContact] = None) -> DecisionResult:
    """Retry the candidate email for an already committed hire.

    Never creates another offer record or touches the decision.
    """
    log = current_app.logger
    contact = decider_contact or DeciderContact()
    if not can_make_hiring_decisions(resolve_role(decider_id)):
        return DecisionResult.failed(assessment_id, Unauthorized(
            "Only recruiters, hiring managers, or admins can send offers"))
    try:
        assessment = _load_assessment(assessment_id)
        if assessment is None:
            return DecisionResult.failed(assessment_id, RecordNotFound(
                f"Candidate assessment {assessment_id} not found"))
        if assessment.final_decision != FINAL_DECISION_HIRE:
            return DecisionResult.failed(assessment_id, NotDecided(
                "No hire decision has been recorded for this candidate"))
        offer = Offer.query.filter_by(candidate_id=assessment_id).first()
    except SQLAlchemyError:
        db.session.rollback()
        log.exception('Store error while loading candidate %s for offer re-send', assessment_id)
        return DecisionResult.failed(assessment_id, StoreUnavailable(
            "The candidate record could not be loaded right now. Please try again."))

    try:
        send_offer_email(assessment, contact.name)
    except Exception:
        log.exception('Offer email retry to candidate %s failed', assessment.candidate_email)
        return DecisionResult.failed(assessment_id, NotificationFailed(
            "The candidate could not be emailed"), offer_id=offer.id if offer else None)
    log.info('AUDIT: User %s re-sent offer email for candidate %s', decider_id, assessment_id)
    return DecisionResult(assessment_id=assessment_id, success=True, committed=True,
                          offer_id=offer.id if offer else None, message="Offer email sent")
