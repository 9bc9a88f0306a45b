"""Initial schema: principals, roles, interviews, assessments, offers, notifications

Revision ID: 0001_initial
Revises: None
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

APP_ROLES = ("candidate", "interviewer", "recruiter", "hiring_manager", "admin")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(120)),
        sa.Column("password_hash", sa.String(255), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "user_roles",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("role", sa.Enum(*APP_ROLES, name="app_role", native_enum=False, length=30), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )
    op.create_index("ix_user_roles_user_id", "user_roles", ["user_id"])

    op.create_table(
        "interviews",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("created_by", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("position", sa.String(200), nullable=False),
        sa.Column("job_desc", sa.Text, nullable=False),
        sa.Column("job_experience", sa.Integer),
        sa.Column("tech_stack", sa.String(500)),
        sa.Column("questions", sa.JSON),
        sa.Column("duration_minutes", sa.Integer),
        *_timestamps(),
    )

    op.create_table(
        "candidate_assessments",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("interview_id", sa.Integer, sa.ForeignKey("interviews.id"), nullable=False),
        sa.Column("candidate_name", sa.String(120), nullable=False),
        sa.Column("candidate_email", sa.String(254), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("transcript", sa.Text),
        sa.Column("rating", sa.Float),
        sa.Column("feedback_summary", sa.Text),
        sa.Column("ai_recommendation", sa.String(20)),
        sa.Column("selection_status", sa.String(20)),
        sa.Column("final_decision", sa.String(20)),
        sa.Column("decision_by", sa.Integer, sa.ForeignKey("users.id")),
        sa.Column("decision_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index("ix_candidate_assessments_interview_id", "candidate_assessments", ["interview_id"])
    op.create_index("ix_candidate_assessments_candidate_email", "candidate_assessments", ["candidate_email"])
    op.create_index("ix_candidate_assessments_status", "candidate_assessments", ["status"])

    op.create_table(
        "offers",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("candidate_id", sa.Integer, sa.ForeignKey("candidate_assessments.id"), nullable=False, unique=True),
        sa.Column("interview_id", sa.Integer, sa.ForeignKey("interviews.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_email", sa.String(254), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("type", sa.String(50)),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_notifications_user_email", "notifications", ["user_email"])


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("offers")
    op.drop_table("candidate_assessments")
    op.drop_table("interviews")
    op.drop_table("user_roles")
    op.drop_table("users")
