from flask import current_app, jsonify, abort
from flask_login import current_user
from . import bp
from .forms import InterviewForm
from ...extensions import db
from ...models.interview import Interview
from ...policy.eligibility import report
from ...policy.roles import Capability, can_make_hiring_decisions, resolve_role
from ...utils.decorators import capability_required


def _interview_dict(iv):
    return {
        "id": iv.id,
        "position": iv.position,
        "job_desc": iv.job_desc,
        "job_experience": iv.job_experience,
        "tech_stack": iv.tech_stack,
        "questions": iv.questions or [],
        "duration_minutes": iv.duration_minutes,
        "created_by": iv.created_by,
        "created_at": iv.created_at.isoformat() if iv.created_at else None,
    }


@bp.get("")
@capability_required(Capability.MANAGE_INTERVIEWS)
def list_interviews():
    interviews = (Interview.query
                  .filter_by(created_by=current_user.id)
                  .order_by(Interview.created_at.desc(), Interview.id.desc())
                  .all())
    return jsonify({"interviews": [_interview_dict(iv) for iv in interviews]})


@bp.post("")
@capability_required(Capability.MANAGE_INTERVIEWS)
def create_interview():
    form = InterviewForm()
    if not form.validate_on_submit():
        return jsonify({"error": "Invalid form", "fields": form.errors}), 400
    questions = form.question_list()

    iv = Interview(
        created_by=current_user.id,
        position=form.position.data.strip(),
        job_desc=form.job_desc.data.strip(),
        job_experience=form.job_experience.data or 0,
        tech_stack=(form.tech_stack.data or "").strip() or None,
        duration_minutes=form.duration_minutes.data or 30,
        questions=questions,
    )
    db.session.add(iv)
    db.session.commit()
    current_app.logger.info('User %s created interview %s (%s)', current_user.id, iv.id, iv.position)
    return jsonify(_interview_dict(iv)), 201


@bp.get("/<int:interview_id>")
@capability_required(Capability.MANAGE_INTERVIEWS)
def interview_detail(interview_id):
    iv = db.session.get(Interview, interview_id)
    if iv is None:
        abort(404)
    can_hire = can_make_hiring_decisions(resolve_role(current_user.id))
    # other people's interviews are visible to hiring decision makers only
    if iv.created_by != current_user.id and not can_hire:
        abort(403)
    out = _interview_dict(iv)
    out["candidates"] = [report(a, can_hire) for a in sorted(iv.assessments, key=lambda a: a.id)]
    return jsonify(out)
