from ..extensions import db
from .base import TimestampMixin
from .enums import Role


class UserRole(db.Model, TimestampMixin):
    __tablename__ = "user_roles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    role = db.Column(
        db.Enum(Role, name="app_role", native_enum=False, length=30,
                values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    __table_args__ = (
        db.UniqueConstraint('user_id', 'role', name='uq_user_roles_user_role'),
    )

    def __repr__(self) -> str:
        return f"<UserRole user_id={self.user_id} role={self.role}>"
