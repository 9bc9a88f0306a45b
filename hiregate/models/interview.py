from ..extensions import db
from .base import TimestampMixin

class Interview(db.Model, TimestampMixin):
    __tablename__ = "interviews"

    id = db.Column(db.Integer, primary_key=True)
    created_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    # job requisition
    position = db.Column(db.String(200), nullable=False)
    job_desc = db.Column(db.Text, nullable=False)
    job_experience = db.Column(db.Integer, default=0)
    tech_stack = db.Column(db.String(500))
    questions = db.Column(db.JSON)  # ["Tell me about...", ...]
    duration_minutes = db.Column(db.Integer)

    assessments = db.relationship("CandidateAssessment", backref="interview", lazy="select")

    def __repr__(self) -> str:
        return f"<Interview id={self.id} position={self.position!r}>"
