"""Role resolution and hiring capabilities.

Roles have a fixed total order used to pick the "highest" role for display.
Authorization never compares ranks: each capability names the exact set of
roles that grant it, and is recomputed from a fresh lookup on every check.
"""

from __future__ import annotations

import enum
from typing import FrozenSet, Iterable, Optional

from flask import current_app
from sqlalchemy import case
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models.enums import Role
from ..models.user_role import UserRole

ROLE_PRIORITY = (
    Role.ADMIN,
    Role.HIRING_MANAGER,
    Role.RECRUITER,
    Role.INTERVIEWER,
    Role.CANDIDATE,
)
"""Highest first."""

_ROLE_RANK = {role: len(ROLE_PRIORITY) - idx for idx, role in enumerate(ROLE_PRIORITY)}


class Capability(str, enum.Enum):
    MAKE_HIRING_DECISIONS = "make_hiring_decisions"
    MANAGE_ROLES = "manage_roles"
    MANAGE_INTERVIEWS = "manage_interviews"


CAPABILITY_ROLES = {
    Capability.MAKE_HIRING_DECISIONS: frozenset({Role.RECRUITER, Role.HIRING_MANAGER, Role.ADMIN}),
    Capability.MANAGE_ROLES: frozenset({Role.ADMIN}),
    Capability.MANAGE_INTERVIEWS: frozenset({Role.INTERVIEWER, Role.RECRUITER, Role.HIRING_MANAGER, Role.ADMIN}),
}

# lookups that fail with these degrade to "no role"
_LOOKUP_ERRORS = (SQLAlchemyError, LookupError, ValueError)


def highest_role(roles: Iterable[Role]) -> Optional[Role]:
    held = set(roles)
    for role in ROLE_PRIORITY:
        if role in held:
            return role
    return None


def has_capability(role: Optional[Role], capability: Capability) -> bool:
    if role is None:
        return False
    return role in CAPABILITY_ROLES[capability]


def can_make_hiring_decisions(role: Optional[Role]) -> bool:
    return has_capability(role, Capability.MAKE_HIRING_DECISIONS)


def _lookup_highest_role(principal_id: int) -> Optional[Role]:
    rank = case(
        *[(UserRole.role == role, n) for role, n in _ROLE_RANK.items()],
        else_=0,
    )
    row = (
        db.session.query(UserRole.role)
        .filter(UserRole.user_id == principal_id)
        .order_by(rank.desc())
        .limit(1)
        .first()
    )
    return Role(row[0]) if row else None


def _lookup_any_role(principal_id: int) -> Optional[Role]:
    row = (
        db.session.query(UserRole.role)
        .filter_by(user_id=principal_id)
        .limit(1)
        .first()
    )
    return Role(row[0]) if row else None


def resolve_role(principal_id: Optional[int]) -> Optional[Role]:
    """Return the principal's highest-priority role, or None.

    The ordered lookup is tried first; if it errors the raw role-assignment
    table is read directly and any one assigned role is taken. Errors never
    propagate: a principal whose role cannot be read has no role.
    """
    if principal_id is None:
        return None
    try:
        return _lookup_highest_role(principal_id)
    except _LOOKUP_ERRORS:
        db.session.rollback()
        current_app.logger.exception('Error fetching role for user %s, trying role table directly', principal_id)

    try:
        return _lookup_any_role(principal_id)
    except _LOOKUP_ERRORS:
        db.session.rollback()
        current_app.logger.exception('Fallback role lookup failed for user %s', principal_id)
        return None


def resolve_roles(principal_id: Optional[int]) -> FrozenSet[Role]:
    if principal_id is None:
        return frozenset()
    try:
        rows = db.session.query(UserRole.role).filter_by(user_id=principal_id).all()
        return frozenset(Role(r[0]) for r in rows)
    except _LOOKUP_ERRORS:
        db.session.rollback()
        current_app.logger.exception('Error listing roles for user %s', principal_id)
        return frozenset()


def assign_role(user_id: int, role: Role) -> bool:
    """Grant ``role`` to ``user_id``. Returns False if it was already held."""
    role = Role(role)
    existing = UserRole.query.filter_by(user_id=user_id, role=role).first()
    if existing:
        return False
    db.session.add(UserRole(user_id=user_id, role=role))
    db.session.commit()
    current_app.logger.info('AUDIT: role %s granted to user %s', role.value, user_id)
    return True


def revoke_role(user_id: int, role: Role) -> bool:
    role = Role(role)
    deleted = UserRole.query.filter_by(user_id=user_id, role=role).delete()
    db.session.commit()
    if deleted:
        current_app.logger.info('AUDIT: role %s revoked from user %s', role.value, user_id)
    return bool(deleted)
