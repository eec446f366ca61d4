"""create_catalog_tables

Revision ID: 7c1e2a9b4d30
Revises:
Create Date: 2026-10-19 10:12:04.118230

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7c1e2a9b4d30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PROGRAM_CATEGORY = ('beginner', 'intermediate', 'advanced', 'professional')
PROGRAM_SPECIALIZATION = (
    'batting', 'bowling', 'fielding', 'wicket-keeping', 'all-rounder', 'fitness', 'mental-coaching',
)
PROGRAM_DIFFICULTY = ('easy', 'medium', 'hard')


def upgrade() -> None:
    """Upgrade schema."""
    # users is owned by the identity service and must already exist
    op.create_table(
        'coaches',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('specializations', sa.JSON(), nullable=True),
        sa.Column('experience', sa.Integer(), server_default='0', nullable=False),
        sa.Column('availability', sa.JSON(), nullable=True),
        sa.Column('assigned_sessions', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('experience >= 0', name='ck_coaches_experience_non_negative'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )

    op.create_table(
        'coaching_programs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.Enum(*PROGRAM_CATEGORY, name='program_category_enum'), nullable=False),
        sa.Column('specialization', sa.Enum(*PROGRAM_SPECIALIZATION, name='program_specialization_enum'), nullable=False),
        sa.Column('difficulty', sa.Enum(*PROGRAM_DIFFICULTY, name='program_difficulty_enum'), nullable=False),
        sa.Column('coach_id', sa.Uuid(), nullable=False),
        sa.Column('duration', sa.JSON(), nullable=False),
        sa.Column('total_sessions', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('max_participants', sa.Integer(), nullable=False),
        sa.Column('current_enrollments', sa.Integer(), server_default='0', nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('benefits', sa.JSON(), nullable=True),
        sa.Column('requirements', sa.JSON(), nullable=True),
        sa.Column('materials', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            'current_enrollments >= 0 AND current_enrollments <= max_participants',
            name='ck_coaching_programs_enrollments_within_capacity',
        ),
        sa.CheckConstraint('max_participants > 0', name='ck_coaching_programs_max_participants_positive'),
        sa.CheckConstraint('total_sessions >= 0', name='ck_coaching_programs_total_sessions_non_negative'),
        sa.CheckConstraint('price >= 0', name='ck_coaching_programs_price_non_negative'),
        sa.CheckConstraint('end_date > start_date', name='ck_coaching_programs_end_after_start'),
        sa.ForeignKeyConstraint(['coach_id'], ['coaches.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_coaching_programs_category', 'coaching_programs', ['category'])
    op.create_index('ix_coaching_programs_specialization', 'coaching_programs', ['specialization'])
    op.create_index('ix_coaching_programs_difficulty', 'coaching_programs', ['difficulty'])
    op.create_index('ix_coaching_programs_coach_id', 'coaching_programs', ['coach_id'])
    op.create_index('ix_coaching_programs_created_at_id', 'coaching_programs', ['created_at', 'id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_coaching_programs_created_at_id', table_name='coaching_programs')
    op.drop_index('ix_coaching_programs_coach_id', table_name='coaching_programs')
    op.drop_index('ix_coaching_programs_difficulty', table_name='coaching_programs')
    op.drop_index('ix_coaching_programs_specialization', table_name='coaching_programs')
    op.drop_index('ix_coaching_programs_category', table_name='coaching_programs')
    op.drop_table('coaching_programs')
    op.drop_table('coaches')
    sa.Enum(name='program_difficulty_enum').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='program_specialization_enum').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='program_category_enum').drop(op.get_bind(), checkfirst=True)
