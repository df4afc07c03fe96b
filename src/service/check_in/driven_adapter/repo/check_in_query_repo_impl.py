from typing import Dict

from src.platform.database.asyncpg_setting import asyncpg_connection
from src.platform.logging.loguru_io import Logger
from src.service.check_in.app.interface.i_check_in_query_repo import ICheckInQueryRepo
from src.service.check_in.domain.entity.booking_entity import Booking
from src.service.check_in.domain.entity.event_entity import EventEntity
from src.service.check_in.domain.entity.user_entity import UserEntity
from src.service.check_in.domain.enum.booking_status import BookingStatus
from src.service.check_in.driven_adapter.repo.check_in_row_mapper import (
    BOOKING_COLUMNS,
    row_to_booking,
    row_to_event,
    row_to_user,
)


class CheckInQueryRepoImpl(ICheckInQueryRepo):
    """PostgreSQL reads (asyncpg). Lookup keys arrive already sanitized and are always bound as parameters."""

    @Logger.io
    async def get_booking_by_id(self, *, booking_id: str) -> Booking | None:
        async with asyncpg_connection() as conn:
            row = await conn.fetchrow(
                f'SELECT {BOOKING_COLUMNS} FROM booking WHERE id = $1',
                booking_id,
            )
            return row_to_booking(row) if row else None

    @Logger.io
    async def get_booking_by_ticket_id(self, *, ticket_id: str) -> Booking | None:
        async with asyncpg_connection() as conn:
            row = await conn.fetchrow(
                f'SELECT {BOOKING_COLUMNS} FROM booking WHERE ticket_id = $1',
                ticket_id,
            )
            return row_to_booking(row) if row else None

    @Logger.io
    async def get_event_by_id(self, *, event_id: str) -> EventEntity | None:
        async with asyncpg_connection() as conn:
            row = await conn.fetchrow(
                """
                SELECT id, title, event_date, status, venue, check_in_window_hours
                FROM event
                WHERE id = $1
                """,
                event_id,
            )
            return row_to_event(row) if row else None

    @Logger.io
    async def get_user_by_id(self, *, user_id: str) -> UserEntity | None:
        async with asyncpg_connection() as conn:
            row = await conn.fetchrow(
                'SELECT id, name, email, department, roll_no FROM app_user WHERE id = $1',
                user_id,
            )
            return row_to_user(row) if row else None

    @Logger.io
    async def count_bookings_by_status(self, *, event_id: str) -> Dict[BookingStatus, int]:
        async with asyncpg_connection() as conn:
            rows = await conn.fetch(
                """
                SELECT status, COUNT(*) AS count
                FROM booking
                WHERE event_id = $1
                GROUP BY status
                """,
                event_id,
            )

        counts = {status: 0 for status in BookingStatus}
        for row in rows:
            counts[BookingStatus(row['status'])] += row['count']
        return counts
