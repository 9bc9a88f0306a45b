"""add session_token to candidate_assessments

Revision ID: 0002_assessment_session_token
Revises: 0001_initial
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0002_assessment_session_token'
down_revision = '0001_initial'
branch_labels = None
depends_on = None


def upgrade():
    op.add_column('candidate_assessments', sa.Column('session_token', sa.String(length=64), nullable=True))
    op.create_index('ix_candidate_assessments_session_token', 'candidate_assessments', ['session_token'], unique=True)


def downgrade():
    op.drop_index('ix_candidate_assessments_session_token', table_name='candidate_assessments')
    op.drop_column('candidate_assessments', 'session_token')
