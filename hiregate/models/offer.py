from ..extensions import db
from .enums import OFFER_SENT


class Offer(db.Model):
    __tablename__ = "offers"
    id = db.Column(db.Integer, primary_key=True)
    # one offer per candidate assessment
    candidate_id = db.Column(db.Integer, db.ForeignKey("candidate_assessments.id"), nullable=False, unique=True)
    interview_id = db.Column(db.Integer, db.ForeignKey("interviews.id"), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=OFFER_SENT)
    created_at = db.Column(db.DateTime, server_default=db.func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<Offer id={self.id} candidate_id={self.candidate_id} status={self.status}>"
