from flask import current_app, jsonify, render_template, abort
from flask_login import login_user, logout_user, login_required, current_user
from . import bp
from ...extensions import db
from .forms import LoginForm, RoleForm
from ...models.enums import Role
from ...models.user import User
from ...policy.roles import assign_role, can_make_hiring_decisions, resolve_role, resolve_roles, revoke_role
from ...utils.decorators import admin_required


@bp.route("/login", methods=["GET", "POST"])
def login():
    form = LoginForm()
    if form.validate_on_submit():
        user = User.query.filter_by(email=form.email.data).first()
        if user and user.check_password(form.password.data):
            login_user(user)
            current_app.logger.info('User %s logged in', user.id)
            return jsonify({"id": user.id, "email": user.email})
        return jsonify({"error": "Invalid credentials"}), 401
    if form.is_submitted():
        return jsonify({"error": "Invalid form", "fields": form.errors}), 400
    return render_template("auth/login.html", form=form)


@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"success": True})


@bp.get("/me/role")
@login_required
def my_role():
    role = resolve_role(current_user.id)
    return jsonify({
        "role": role.value if role else None,
        "roles": sorted(r.value for r in resolve_roles(current_user.id)),
        "can_make_hiring_decisions": can_make_hiring_decisions(role),
    })


@bp.post("/users/<int:user_id>/roles")
@admin_required
def grant_role(user_id):
    if db.session.get(User, user_id) is None:
        abort(404)
    form = RoleForm()
    if not form.validate_on_submit():
        return jsonify({"error": "Invalid role", "fields": form.errors}), 400
    created = assign_role(user_id, Role(form.role.data))
    return jsonify({"user_id": user_id, "role": form.role.data, "created": created}), (201 if created else 200)


@bp.delete("/users/<int:user_id>/roles/<role>")
@admin_required
def remove_role(user_id, role):
    try:
        role = Role(role)
    except ValueError:
        abort(404)
    if not revoke_role(user_id, role):
        abort(404)
    return jsonify({"user_id": user_id, "role": role.value, "revoked": True})
