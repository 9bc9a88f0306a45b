from ..extensions import db
from flask_login import UserMixin
from .base import TimestampMixin
from werkzeug.security import generate_password_hash, check_password_hash

class User(db.Model, UserMixin, TimestampMixin):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    name = db.Column(db.String(120))
    password_hash = db.Column(db.String(255), nullable=False)

    roles = db.relationship("UserRole", backref="user", lazy="select", cascade="all, delete-orphan")

    def set_password(self, raw):
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw):
        return check_password_hash(self.password_hash, raw)

    @property
    def display_name(self):
        return self.name or self.email

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
