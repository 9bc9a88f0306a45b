from .user import User
from .user_role import UserRole
from .interview import Interview
from .candidate_assessment import CandidateAssessment
from .offer import Offer
from .notification import Notification
# base and enums are imported by the above as needed
