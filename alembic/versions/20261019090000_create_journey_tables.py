"""create journey tables

Revision ID: 20261019090000
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019090000'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, journeys, links, shares, audit logs and badges."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    op.create_table(
        'journeys',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('starting_location', sa.String(), nullable=False),
        sa.Column('arrival_location', sa.String(), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('arrival_time', sa.DateTime(), nullable=False),
        sa.Column('transportation_type', sa.String(length=64), nullable=False),
        sa.Column('route_distance_km', sa.Numeric(10, 2), nullable=False),
        sa.Column('is_daily_goal_achieved', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'start_time', name='uq_journey_user_start'),
    )
    op.create_index(op.f('ix_journeys_user_id'), 'journeys', ['user_id'], unique=False)
    op.create_index(op.f('ix_journeys_start_time'), 'journeys', ['start_time'], unique=False)

    op.create_table(
        'journey_public_links',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('journey_id', sa.String(length=36), nullable=False),
        sa.Column('token', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('is_revoked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('revoked_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['journey_id'], ['journeys.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_journey_public_links_journey_id'), 'journey_public_links', ['journey_id'], unique=False)
    op.create_index(op.f('ix_journey_public_links_token'), 'journey_public_links', ['token'], unique=True)
    op.create_index(
        'uq_public_link_active_journey',
        'journey_public_links',
        ['journey_id'],
        unique=True,
        sqlite_where=sa.text('is_revoked = 0'),
        postgresql_where=sa.text('is_revoked = false'),
    )

    op.create_table(
        'journey_shares',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('journey_id', sa.String(length=36), nullable=False),
        sa.Column('shared_by_user_id', sa.String(length=36), nullable=False),
        sa.Column('receiving_user_id', sa.String(length=36), nullable=False),
        sa.Column('shared_at', sa.DateTime(), nullable=False),
        sa.Column('is_revoked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(['journey_id'], ['journeys.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_journey_shares_journey_id'), 'journey_shares', ['journey_id'], unique=False)
    op.create_index(op.f('ix_journey_shares_receiving_user_id'), 'journey_shares', ['receiving_user_id'], unique=False)
    op.create_index(
        'uq_share_active_recipient',
        'journey_shares',
        ['journey_id', 'receiving_user_id'],
        unique=True,
        sqlite_where=sa.text('is_revoked = 0'),
        postgresql_where=sa.text('is_revoked = false'),
    )

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('target_id', sa.String(length=36), nullable=False),
        sa.Column('action_type', sa.String(length=64), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_audit_logs_user_id'), 'audit_logs', ['user_id'], unique=False)
    op.create_index(op.f('ix_audit_logs_target_id'), 'audit_logs', ['target_id'], unique=False)

    op.create_table(
        'daily_goal_badges',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('total_distance_km', sa.Numeric(10, 2), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'date', name='uq_daily_goal_badge'),
    )
    op.create_index(op.f('ix_daily_goal_badges_user_id'), 'daily_goal_badges', ['user_id'], unique=False)


def downgrade() -> None:
    """Drop all journey tables."""
    op.drop_table('daily_goal_badges')
    op.drop_table('audit_logs')
    op.drop_index('uq_share_active_recipient', table_name='journey_shares')
    op.drop_table('journey_shares')
    op.drop_index('uq_public_link_active_journey', table_name='journey_public_links')
    op.drop_table('journey_public_links')
    op.drop_table('journeys')
    op.drop_table('users')
