from sqlalchemy.orm import validates

from ..extensions import db
from .base import TimestampMixin
from .enums import AssessmentStatus


class CandidateAssessment(db.Model, TimestampMixin):
    """One candidate's voice interview session, its AI score and the hiring decision."""

    __tablename__ = "candidate_assessments"

    id = db.Column(db.Integer, primary_key=True)
    interview_id = db.Column(db.Integer, db.ForeignKey("interviews.id"), nullable=False, index=True)

    # candidate identity (immutable once set)
    candidate_name = db.Column(db.String(120), nullable=False)
    candidate_email = db.Column(db.String(254), nullable=False, index=True)

    # session lifecycle: in_progress -> completed
    status = db.Column(db.String(20), nullable=False, default=AssessmentStatus.IN_PROGRESS.value, index=True)
    transcript = db.Column(db.Text)
    session_token = db.Column(db.String(64), unique=True, index=True)  # handed to the candidate at session start

    # written once by the feedback job
    rating = db.Column(db.Float)
    feedback_summary = db.Column(db.Text)  # JSON text from the feedback generator
    ai_recommendation = db.Column(db.String(20))  # hire/hold/reject, advisory only

    # written only by the decision committer, all in one UPDATE
    selection_status = db.Column(db.String(20))  # selected
    final_decision = db.Column(db.String(20))  # hire
    decision_by = db.Column(db.Integer, db.ForeignKey("users.id"))
    decision_at = db.Column(db.DateTime(timezone=True))

    decider = db.relationship("User", foreign_keys=[decision_by])

    @validates("candidate_name", "candidate_email")
    def _validate_identity(self, key, value):
        current = getattr(self, key)
        if current is not None and value != current:
            raise ValueError(f"{key} cannot be changed once set")
        return value

    @validates("status")
    def _validate_status(self, key, value):
        value = AssessmentStatus(value).value
        if self.status == AssessmentStatus.COMPLETED.value and value != self.status:
            raise ValueError("status cannot regress from completed")
        return value

    @validates("final_decision")
    def _validate_final_decision(self, key, value):
        if self.final_decision is not None and value != self.final_decision:
            raise ValueError("final_decision is write-once")
        return value

    @property
    def is_decided(self):
        return self.final_decision is not None

    def __repr__(self) -> str:
        return f"<CandidateAssessment id={self.id} candidate_name={self.candidate_name!r}>"
