"""Hire eligibility for a candidate assessment.

Everything here is pure: it reads an assessment snapshot and the caller's
capability and never touches the database, so the same evaluation backs the
advisory view and the authoritative re-check in the decision committer.
"""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..models.enums import AssessmentStatus, Recommendation, SELECTION_SELECTED

MIN_HIRE_SCORE = 5
"""Minimum overall rating (0-10, inclusive) for a hire decision."""

STRONG_HIRE_SCORE = 7
"""Rating from which the AI fallback suggests "hire" and the badge reads Strong Hire."""

SKILL_OFFSETS = {
    "technicalSkills": 0.5,
    "communication": 0.0,
    "problemSolving": -0.5,
    "experience": 0.0,
}


class EligibilityState(str, enum.Enum):
    HIRED = "hired"
    NOT_EVALUABLE = "not_evaluable"
    NOT_ELIGIBLE = "not_eligible"
    AWAITING_REVIEWER = "awaiting_reviewer"
    ACTIONABLE = "actionable"


STATE_MESSAGES = {
    EligibilityState.HIRED: "Candidate hired. The decision is final.",
    EligibilityState.NOT_EVALUABLE: "The interview has not been scored yet.",
    EligibilityState.NOT_ELIGIBLE: f"Candidate does not meet the minimum score required for hiring (>={MIN_HIRE_SCORE}/10).",
    EligibilityState.AWAITING_REVIEWER: "Awaiting hiring decision. Only recruiters, hiring managers or admins can confirm hiring decisions.",
    EligibilityState.ACTIONABLE: "You have authority to make this hiring decision.",
}


@dataclass(frozen=True)
class Eligibility:
    state: EligibilityState
    rating: float
    ai_recommendation: Recommendation
    meets_minimum_score: bool

    @property
    def can_hire(self) -> bool:
        return self.state is EligibilityState.ACTIONABLE

    @property
    def message(self) -> str:
        return STATE_MESSAGES[self.state]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "can_hire": self.can_hire,
            "rating": self.rating,
            "ai_recommendation": self.ai_recommendation.value,
            "meets_minimum_score": self.meets_minimum_score,
            "message": self.message,
        }


def _rating(value) -> float:
    # an unscored assessment counts as 0
    if value is None:
        return 0.0
    return float(value)


def meets_minimum_score(rating) -> bool:
    return _rating(rating) >= MIN_HIRE_SCORE


def parse_feedback(raw) -> Optional[Dict[str, Any]]:
    """Parse the stored feedback payload; anything unusable means "no structured data"."""
    if not raw:
        return None
    if isinstance(raw, dict):
        return raw
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def _as_recommendation(value) -> Optional[Recommendation]:
    try:
        return Recommendation(value)
    except ValueError:
        return None


def derive_ai_recommendation(explicit, feedback: Optional[Dict[str, Any]], rating) -> Recommendation:
    rec = _as_recommendation(explicit)
    if rec is None and feedback:
        rec = _as_recommendation(feedback.get("recommendation"))
    if rec is not None:
        return rec
    r = _rating(rating)
    if r >= STRONG_HIRE_SCORE:
        return Recommendation.HIRE
    if r < MIN_HIRE_SCORE:
        return Recommendation.REJECT
    return Recommendation.HOLD


def is_hired(assessment) -> bool:
    return assessment.final_decision is not None or assessment.selection_status == SELECTION_SELECTED


def evaluate(assessment, can_make_hiring_decisions: bool) -> Eligibility:
    """Classify whether a hire may proceed on ``assessment``.

    First match wins: hired, not yet scored, below the minimum score,
    caller lacks the capability, actionable. The AI recommendation is
    reported but never takes part in the decision.
    """
    rating = _rating(assessment.rating)
    feedback = parse_feedback(assessment.feedback_summary)
    recommendation = derive_ai_recommendation(assessment.ai_recommendation, feedback, assessment.rating)
    meets = rating >= MIN_HIRE_SCORE

    if is_hired(assessment):
        state = EligibilityState.HIRED
    elif assessment.status != AssessmentStatus.COMPLETED.value:
        state = EligibilityState.NOT_EVALUABLE
    elif not meets:
        state = EligibilityState.NOT_ELIGIBLE
    elif not can_make_hiring_decisions:
        state = EligibilityState.AWAITING_REVIEWER
    else:
        state = EligibilityState.ACTIONABLE

    return Eligibility(state=state, rating=rating, ai_recommendation=recommendation, meets_minimum_score=meets)


# -- display helpers (presentation only) --------------------------------------

def _clamp(value: float, lo: float = 1.0, hi: float = 10.0) -> float:
    return min(hi, max(lo, value))


def skill_scores(rating, feedback: Optional[Dict[str, Any]] = None) -> Dict[str, float]:
    if feedback and all(feedback.get(k) is not None for k in SKILL_OFFSETS):
        try:
            return {k: float(feedback[k]) for k in SKILL_OFFSETS}
        except (TypeError, ValueError):
            pass
    base = _rating(rating)
    return {k: _clamp(base + offset) for k, offset in SKILL_OFFSETS.items()}


def score_badge(rating) -> str:
    r = _rating(rating)
    if r >= STRONG_HIRE_SCORE:
        return "Strong Hire"
    if r >= MIN_HIRE_SCORE:
        return "Borderline"
    return "Not Eligible"


def summary_text(candidate_name: str, rating, feedback: Optional[Dict[str, Any]], raw=None) -> str:
    if feedback and feedback.get("summary"):
        return feedback["summary"]
    if raw and not feedback:
        return raw
    r = _rating(rating)
    if r >= 8:
        return f"{candidate_name} demonstrated exceptional technical proficiency and problem-solving abilities."
    if r >= 6:
        return f"{candidate_name} showed good technical knowledge and communication skills."
    return f"{candidate_name} demonstrated foundational knowledge but may need additional experience."


def report(assessment, can_make_hiring_decisions: bool) -> Dict[str, Any]:
    """Eligibility plus the cosmetic fields a reviewer screen shows."""
    feedback = parse_feedback(assessment.feedback_summary)
    out = evaluate(assessment, can_make_hiring_decisions).to_dict()
    out.update({
        "assessment_id": assessment.id,
        "candidate_name": assessment.candidate_name,
        "badge": score_badge(assessment.rating),
        "skills": skill_scores(assessment.rating, feedback),
        "summary": summary_text(assessment.candidate_name, assessment.rating, feedback, assessment.feedback_summary),
        "strengths": (feedback or {}).get("strengths") or [],
        "improvements": (feedback or {}).get("improvements") or [],
        "decision_by": assessment.decision_by,
        "decision_at": assessment.decision_at.isoformat() if assessment.decision_at else None,
    })
    return out
