from functools import wraps
from flask import abort
from flask_login import current_user

from ..policy.roles import Capability, has_capability, resolve_role


def capability_required(capability):
    """Re-resolve the current user's role on every request and require ``capability``."""
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            if not current_user.is_authenticated:
                abort(401)
            if not has_capability(resolve_role(current_user.id), capability):
                abort(403)
            return view(*args, **kwargs)
        return wrapped
    return decorator


admin_required = capability_required(Capability.MANAGE_ROLES)
