from flask import jsonify, request, abort
from flask_login import login_required, current_user
from . import bp
from ...extensions import db
from ...models.candidate_assessment import CandidateAssessment
from ...policy.decisions import DeciderContact, commit_hire_decision, resend_offer_email
from ...policy.eligibility import report
from ...policy.roles import can_make_hiring_decisions, resolve_role

# HTTP status per decision failure reason
STATUS_BY_REASON = {
    "unauthorized": 403,
    "record_not_found": 404,
    "already_decided": 409,
    "not_evaluable": 422,
    "below_threshold": 422,
    "not_decided": 409,
    "store_unavailable": 503,
    "offer_record_failed": 500,
    "notification_failed": 502,
}


def _decider_contact():
    # only contact details come from the client; identity is the logged-in user
    body = request.get_json(silent=True) or {}
    return DeciderContact(
        name=body.get("decider_name") or current_user.display_name,
        email=body.get("decider_email") or current_user.email,
    )


def _respond(result):
    if result.success:
        return jsonify(result.to_dict()), 200
    return jsonify(result.to_dict()), STATUS_BY_REASON.get(result.error, 400)


@bp.get("/<int:assessment_id>")
@login_required
def eligibility(assessment_id):
    assessment = db.session.get(CandidateAssessment, assessment_id)
    if assessment is None:
        abort(404)
    role = resolve_role(current_user.id)
    return jsonify(report(assessment, can_make_hiring_decisions(role)))


@bp.post("/<int:assessment_id>/hire")
@login_required
def hire(assessment_id):
    result = commit_hire_decision(assessment_id, current_user.id, _decider_contact())
    return _respond(result)


@bp.post("/<int:assessment_id>/notify")
@login_required
def resend_offer(assessment_id):
    result = resend_offer_email(assessment_id, current_user.id, _decider_contact())
    return _respond(result)
