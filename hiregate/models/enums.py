import enum


class Role(str, enum.Enum):
    CANDIDATE = "candidate"
    INTERVIEWER = "interviewer"
    RECRUITER = "recruiter"
    HIRING_MANAGER = "hiring_manager"
    ADMIN = "admin"


class AssessmentStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Recommendation(str, enum.Enum):
    HIRE = "hire"
    HOLD = "hold"
    REJECT = "reject"


# only "hire" is ever persisted as a final decision
FINAL_DECISION_HIRE = "hire"
SELECTION_SELECTED = "selected"
OFFER_SENT = "sent"
