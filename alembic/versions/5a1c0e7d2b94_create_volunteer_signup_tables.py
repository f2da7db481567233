"""create volunteer, opportunity and signup tables

Revision ID: 5a1c0e7d2b94
Revises:
Create Date: 2026-10-18 14:20:11.402113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ENUM
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '5a1c0e7d2b94'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLModel persists enum member names, not values
ENUMS = {
    'opportunitystatus': ('OPEN', 'FILLED', 'CLOSED'),
    'urgency': ('NORMAL', 'HIGH', 'URGENT'),
    'signupstatus': ('PENDING', 'WAITLISTED', 'CONFIRMED', 'DECLINED', 'COMPLETED'),
}


def upgrade() -> None:
    """Upgrade schema."""
    for name, labels in ENUMS.items():
        ENUM(*labels, name=name).create(op.get_bind(), checkfirst=True)

    opportunity_status = ENUM(*ENUMS['opportunitystatus'], name='opportunitystatus', create_type=False)
    urgency = ENUM(*ENUMS['urgency'], name='urgency', create_type=False)
    signup_status = ENUM(*ENUMS['signupstatus'], name='signupstatus', create_type=False)

    op.create_table(
        'volunteer',
        sa.Column('id_volunteer', sa.Integer(), nullable=False),
        sa.Column('first_name', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('last_name', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('skills', sa.JSON(), nullable=False),
        sa.Column('preferred_ministries', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.PrimaryKeyConstraint('id_volunteer')
    )

    op.create_table(
        'opportunity',
        sa.Column('id_opportunity', sa.Integer(), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(length=3000), nullable=False),
        sa.Column('ministry', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('location', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_recurring', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('estimated_hours', sa.Float(), nullable=True),
        sa.Column('max_volunteers', sa.Integer(), nullable=True),
        sa.Column('status', opportunity_status, nullable=False),
        sa.Column('urgency', urgency, nullable=False),
        sa.Column('id_coordinator', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id_opportunity')
    )
    op.create_index(op.f('ix_opportunity_ministry'), 'opportunity', ['ministry'], unique=False)
    op.create_index(op.f('ix_opportunity_start_date'), 'opportunity', ['start_date'], unique=False)
    op.create_index(op.f('ix_opportunity_is_active'), 'opportunity', ['is_active'], unique=False)

    op.create_table(
        'opportunity_skill',
        sa.Column('id_opportunity', sa.Integer(), nullable=False),
        sa.Column('skill', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.ForeignKeyConstraint(['id_opportunity'], ['opportunity.id_opportunity'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id_opportunity', 'skill')
    )
    op.create_index(op.f('ix_opportunity_skill_skill'), 'opportunity_skill', ['skill'], unique=False)

    op.create_table(
        'signup',
        sa.Column('id_signup', sa.Integer(), nullable=False),
        sa.Column('id_volunteer', sa.Integer(), nullable=False),
        sa.Column('id_opportunity', sa.Integer(), nullable=False),
        sa.Column('scheduled_date', sa.Date(), nullable=True),
        sa.Column('scheduled_start_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('scheduled_end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('message', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('special_requests', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('estimated_hours', sa.Float(), nullable=True),
        sa.Column('status', signup_status, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('promoted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('confirmed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('confirmed_by', sa.Integer(), nullable=True),
        sa.Column('declined_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('declined_reason', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('actual_hours', sa.Float(), nullable=True),
        sa.Column('feedback', sqlmodel.sql.sqltypes.AutoString(length=2000), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['id_volunteer'], ['volunteer.id_volunteer']),
        sa.ForeignKeyConstraint(['id_opportunity'], ['opportunity.id_opportunity']),
        sa.PrimaryKeyConstraint('id_signup')
    )
    op.create_index(op.f('ix_signup_id_volunteer'), 'signup', ['id_volunteer'], unique=False)
    op.create_index('ix_signup_opportunity_status', 'signup', ['id_opportunity', 'status'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_signup_opportunity_status', table_name='signup')
    op.drop_index(op.f('ix_signup_id_volunteer'), table_name='signup')
    op.drop_table('signup')
    op.drop_index(op.f('ix_opportunity_skill_skill'), table_name='opportunity_skill')
    op.drop_table('opportunity_skill')
    op.drop_index(op.f('ix_opportunity_is_active'), table_name='opportunity')
    op.drop_index(op.f('ix_opportunity_start_date'), table_name='opportunity')
    op.drop_index(op.f('ix_opportunity_ministry'), table_name='opportunity')
    op.drop_table('opportunity')
    op.drop_table('volunteer')

    for name in ENUMS:
        ENUM(name=name).drop(op.get_bind(), checkfirst=True)
