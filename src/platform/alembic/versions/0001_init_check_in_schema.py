"""init_check_in_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17

Schema:
- app_user: Attendees (ticket holders)
- event: Events; check-in window = event_date + check_in_window_hours (or the service default)
- booking: One ticket per booking, unique human-presentable ticket_id
- check_in_log: Append-only record of every committed check-in
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables with final schema."""

    # ========== STEP 1: Reference tables ==========

    op.create_table(
        'app_user',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('email', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('department', sa.String(length=255), nullable=True),
        sa.Column('roll_no', sa.String(length=64), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'event',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('event_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='published'),
        sa.Column('venue', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('check_in_window_hours', sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    # ========== STEP 2: Bookings ==========

    op.create_table(
        'booking',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('ticket_id', sa.String(length=128), nullable=False),
        sa.Column('event_id', sa.String(length=128), nullable=False),
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column(
            'booked_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.Column('checked_in_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('checked_in_by', sa.String(length=128), nullable=True),
        sa.Column('check_in_method', sa.String(length=20), nullable=True),
        sa.ForeignKeyConstraint(['event_id'], ['event.id']),
        sa.ForeignKeyConstraint(['user_id'], ['app_user.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "status IN ('confirmed', 'waitlisted', 'cancelled', 'checked_in')",
            name='ck_booking_status',
        ),
        # checked_in_at is set if and only if the booking is checked in
        sa.CheckConstraint(
            "(status = 'checked_in') = (checked_in_at IS NOT NULL)",
            name='ck_booking_checked_in_at',
        ),
    )
    op.create_index('ix_booking_ticket_id', 'booking', ['ticket_id'], unique=True)
    op.create_index('ix_booking_event_id_status', 'booking', ['event_id', 'status'])

    # ========== STEP 3: Check-in log ==========

    op.create_table(
        'check_in_log',
        sa.Column('id', UUID(as_uuid=True), nullable=False),  # UUID7
        sa.Column('booking_id', sa.String(length=128), nullable=False),
        sa.Column('event_id', sa.String(length=128), nullable=False),
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('checked_in_by', sa.String(length=128), nullable=False),
        sa.Column('method', sa.String(length=20), nullable=False),
        sa.Column('checked_in_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['booking_id'], ['booking.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_check_in_log_event_id', 'check_in_log', ['event_id'])


def downgrade() -> None:
    op.drop_index('ix_check_in_log_event_id', table_name='check_in_log')
    op.drop_table('check_in_log')
    op.drop_index('ix_booking_event_id_status', table_name='booking')
    op.drop_index('ix_booking_ticket_id', table_name='booking')
    op.drop_table('booking')
    op.drop_table('event')
    op.drop_table('app_user')
