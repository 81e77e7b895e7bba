"""Initial database schema

Revision ID: 001_initial
Revises:
Create Date: 2025-02-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # === USERS TABLE ===
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('role', sa.Enum('admin', 'manager', 'user', name='userrole'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('discord_id', sa.String(64), nullable=True),
        sa.Column('discord_username', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('discord_id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # === SCHEDULE ENTRIES TABLE ===
    op.create_table(
        'schedule_entries',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('date', sa.String(10), nullable=False),
        sa.Column('location', sa.Enum('office', 'remote', 'vacation', 'sick', 'dayoff', name='locationtype'), nullable=False),
        sa.Column('reason', sa.String(500), nullable=True),
        sa.Column('created_by', sa.Uuid(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'date', name='uq_schedule_entries_user_date')
    )
    op.create_index('ix_schedule_entries_user_id', 'schedule_entries', ['user_id'])

    # === SWAP REQUESTS TABLE ===
    op.create_table(
        'swap_requests',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('requester_id', sa.Uuid(), nullable=False),
        sa.Column('target_user_id', sa.Uuid(), nullable=False),
        sa.Column('requested_date', sa.String(10), nullable=False),
        sa.Column('reason', sa.String(500), nullable=False, server_default=''),
        sa.Column('status', sa.Enum('pending', 'approved', 'denied', 'cancelled', name='swapstatus'), nullable=False),
        sa.Column('response_reason', sa.String(500), nullable=False, server_default=''),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['requester_id'], ['users.id']),
        sa.ForeignKeyConstraint(['target_user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_swap_requests_requester_id', 'swap_requests', ['requester_id'])
    op.create_index('ix_swap_requests_target_user_id', 'swap_requests', ['target_user_id'])
    op.create_index('ix_swap_requests_status_created', 'swap_requests', ['status', 'created_at'])
    # Only one pending request per (requester, target, date)
    op.create_index(
        'uq_swap_requests_pending',
        'swap_requests',
        ['requester_id', 'target_user_id', 'requested_date'],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
        sqlite_where=sa.text("status = 'pending'"),
    )

    # === NOTIFICATIONS TABLE ===
    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.Enum('swap_request', 'swap_response', 'schedule_update', 'general', name='notificationtype'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.String(1000), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('related_id', sa.Uuid(), nullable=True),
        sa.Column('related_model', sa.Enum('SwapRequest', 'Schedule', name='relatedmodel'), nullable=True),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_notifications_created_at', 'notifications', ['created_at'])
    op.create_index('ix_notifications_user_read', 'notifications', ['user_id', 'is_read'])
    op.create_index('ix_notifications_related', 'notifications', ['related_model', 'related_id'])


def downgrade() -> None:
    # Drop tables in reverse order of creation (respecting foreign keys)
    op.drop_index('ix_notifications_related', 'notifications')
    op.drop_index('ix_notifications_user_read', 'notifications')
    op.drop_index('ix_notifications_created_at', 'notifications')
    op.drop_table('notifications')

    op.drop_index('uq_swap_requests_pending', 'swap_requests')
    op.drop_index('ix_swap_requests_status_created', 'swap_requests')
    op.drop_index('ix_swap_requests_target_user_id', 'swap_requests')
    op.drop_index('ix_swap_requests_requester_id', 'swap_requests')
    op.drop_table('swap_requests')

    op.drop_index('ix_schedule_entries_user_id', 'schedule_entries')
    op.drop_table('schedule_entries')

    op.drop_index('ix_users_email', 'users')
    op.drop_table('users')

    # Drop enum types
    op.execute('DROP TYPE IF EXISTS relatedmodel')
    op.execute('DROP TYPE IF EXISTS notificationtype')
    op.execute('DROP TYPE IF EXISTS swapstatus')
    op.execute('DROP TYPE IF EXISTS locationtype')
    op.execute('DROP TYPE IF EXISTS userrole')
