import json
from types import SimpleNamespace

import pytest

from hiregate.models.enums import Recommendation
from hiregate.policy.eligibility import (
    MIN_HIRE_SCORE,
    EligibilityState,
    derive_ai_recommendation,
    evaluate,
    parse_feedback,
    report,
    score_badge,
    skill_scores,
)


def _assessment(**overrides):
    fields = dict(
        id=1,
        candidate_name="Ada Candidate",
        rating=8.0,
        status="completed",
        final_decision=None,
        selection_status=None,
        ai_recommendation=None,
        feedback_summary=None,
        decision_by=None,
        decision_at=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_hired_takes_precedence_over_everything():
    a = _assessment(final_decision="hire", rating=2, status="in_progress")
    assert evaluate(a, can_make_hiring_decisions=False).state is EligibilityState.HIRED


def test_selected_without_final_decision_counts_as_hired():
    a = _assessment(selection_status="selected")
    assert evaluate(a, True).state is EligibilityState.HIRED


def test_in_progress_is_not_evaluable():
    a = _assessment(status="in_progress", rating=None)
    assert evaluate(a, True).state is EligibilityState.NOT_EVALUABLE


def test_below_threshold_is_distinct_from_missing_permission():
    low = evaluate(_assessment(rating=4.9), can_make_hiring_decisions=True)
    no_role = evaluate(_assessment(rating=9), can_make_hiring_decisions=False)
    assert low.state is EligibilityState.NOT_ELIGIBLE
    assert no_role.state is EligibilityState.AWAITING_REVIEWER
    assert low.message != no_role.message


def test_score_block_wins_over_missing_permission():
    a = _assessment(rating=3)
    assert evaluate(a, can_make_hiring_decisions=False).state is EligibilityState.NOT_ELIGIBLE


def test_minimum_score_is_inclusive():
    result = evaluate(_assessment(rating=float(MIN_HIRE_SCORE)), True)
    assert result.state is EligibilityState.ACTIONABLE
    assert result.can_hire


def test_null_rating_on_completed_record_is_not_eligible():
    assert evaluate(_assessment(rating=None), True).state is EligibilityState.NOT_ELIGIBLE


@pytest.mark.parametrize("suggestion", ["reject", "hold", "hire", None])
def test_ai_suggestion_never_gates(suggestion):
    a = _assessment(rating=8, ai_recommendation=suggestion)
    assert evaluate(a, True).state is EligibilityState.ACTIONABLE


def test_recommendation_prefers_explicit_field():
    feedback = {"recommendation": "hire"}
    assert derive_ai_recommendation("reject", feedback, 9) is Recommendation.REJECT


def test_recommendation_falls_back_to_feedback_payload():
    assert derive_ai_recommendation(None, {"recommendation": "hold"}, 9) is Recommendation.HOLD


@pytest.mark.parametrize("rating,expected", [
    (7, Recommendation.HIRE),
    (9.5, Recommendation.HIRE),
    (6.9, Recommendation.HOLD),
    (5, Recommendation.HOLD),
    (4.99, Recommendation.REJECT),
    (None, Recommendation.REJECT),
])
def test_recommendation_threshold_fallback(rating, expected):
    assert derive_ai_recommendation(None, None, rating) is expected


def test_unparseable_feedback_uses_threshold_fallback():
    a = _assessment(rating=7.5, feedback_summary="not json {")
    assert parse_feedback(a.feedback_summary) is None
    result = evaluate(a, True)
    assert result.ai_recommendation is Recommendation.HIRE
    assert result.state is EligibilityState.ACTIONABLE


def test_feedback_that_is_not_an_object_is_ignored():
    assert parse_feedback(json.dumps(["hire"])) is None
    assert parse_feedback("") is None


def test_invalid_recommendation_values_are_ignored():
    assert derive_ai_recommendation("strong yes", {"recommendation": 3}, 4) is Recommendation.REJECT


def test_skill_scores_derived_from_rating_and_clamped():
    assert skill_scores(6) == {
        "technicalSkills": 6.5,
        "communication": 6.0,
        "problemSolving": 5.5,
        "experience": 6.0,
    }
    high = skill_scores(10)
    assert high["technicalSkills"] == 10
    low = skill_scores(1)
    assert low["problemSolving"] == 1


def test_skill_scores_prefer_structured_feedback():
    feedback = {"technicalSkills": 9, "communication": 7, "problemSolving": 8, "experience": 6}
    assert skill_scores(2, feedback) == {k: float(v) for k, v in feedback.items()}


def test_score_badge():
    assert score_badge(7) == "Strong Hire"
    assert score_badge(5) == "Borderline"
    assert score_badge(4.5) == "Not Eligible"


def test_report_includes_display_fields():
    feedback = {"summary": "Solid answers.", "strengths": ["testing"], "improvements": []}
    out = report(_assessment(rating=6, feedback_summary=json.dumps(feedback)), False)
    assert out["state"] == "awaiting_reviewer"
    assert out["can_hire"] is False
    assert out["summary"] == "Solid answers."
    assert out["badge"] == "Borderline"
    assert out["strengths"] == ["testing"]
