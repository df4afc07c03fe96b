"""asyncpg Record -> domain entity conversion shared by the check-in repos"""

import asyncpg

from src.service.check_in.domain.entity.booking_entity import Booking
from src.service.check_in.domain.entity.event_entity import EventEntity
from src.service.check_in.domain.entity.user_entity import UserEntity


BOOKING_COLUMNS = """
    id, ticket_id, event_id, user_id, status, booked_at,
    checked_in_at, checked_in_by, check_in_method
"""


def row_to_booking(row: asyncpg.Record) -> Booking:
    return Booking(
        id=row['id'],
        ticket_id=row['ticket_id'],
        event_id=row['event_id'],
        user_id=row['user_id'],
        status=row['status'],
        booked_at=row['booked_at'],
        checked_in_at=row['checked_in_at'],
        checked_in_by=row['checked_in_by'],
        check_in_method=row['check_in_method'],
    )


def row_to_event(row: asyncpg.Record) -> EventEntity:
    return EventEntity(
        id=row['id'],
        title=row['title'],
        event_date=row['event_date'],
        status=row['status'],
        venue=row['venue'] or '',
        check_in_window_hours=row['check_in_window_hours'],
    )


def row_to_user(row: asyncpg.Record) -> UserEntity:
    return UserEntity(
        id=row['id'],
        name=row['name'] or '',
        email=row['email'] or '',
        department=row['department'],
        roll_no=row['roll_no'],
    )
