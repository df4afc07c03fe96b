"""
Test helpers for check-in tests

Builders for domain records and reusable repository doubles.
"""

from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Optional
from unittest.mock import AsyncMock

from src.service.check_in.app.dto.check_in_write_result import CheckInWriteResult
from src.service.check_in.domain.entity.booking_entity import Booking
from src.service.check_in.domain.entity.event_entity import EventEntity
from src.service.check_in.domain.entity.user_entity import UserEntity
from src.service.check_in.domain.enum.booking_status import BookingStatus
from src.service.check_in.domain.enum.check_in_method import CheckInMethod
from src.service.check_in.domain.value_object.resolved_ticket import ResolvedTicket
from src.service.check_in.driven_adapter.repo.in_memory_check_in_store import (
    InMemoryCheckInStore,
)


NOW = datetime(2026, 10, 17, 15, 4, tzinfo=timezone.utc)
OPERATOR_ID = 'staff-001'
EVENT_ID = 'E1'
OTHER_EVENT_ID = 'E2'
USER_ID = 'U1'

# Inserts a booking row for the current event (integration fixture)
BookingSeeder = Callable[..., Awaitable[None]]


def make_user(*, user_id: str = USER_ID, name: str = 'Asha Rao') -> UserEntity:
    return UserEntity(id=user_id, name=name, email=f'{user_id.lower()}@campus.test')


def make_event(
    *,
    event_id: str = EVENT_ID,
    title: str = 'Robotics Workshop',
    started_hours_ago: float = 1,
    check_in_window_hours: Optional[float] = None,
) -> EventEntity:
    return EventEntity(
        id=event_id,
        title=title,
        event_date=NOW - timedelta(hours=started_hours_ago),
        venue='Hall A',
        check_in_window_hours=check_in_window_hours,
    )


def make_booking(
    *,
    booking_id: str = 'B1',
    ticket_id: str = 'EVT-9982-XJ',
    event_id: str = EVENT_ID,
    user_id: str = USER_ID,
    status: BookingStatus = BookingStatus.CONFIRMED,
    checked_in_at: Optional[datetime] = None,
    checked_in_by: Optional[str] = None,
) -> Booking:
    if status == BookingStatus.CHECKED_IN and checked_in_at is None:
        checked_in_at = NOW - timedelta(minutes=30)
    return Booking(
        id=booking_id,
        ticket_id=ticket_id,
        event_id=event_id,
        user_id=user_id,
        status=status,
        booked_at=NOW - timedelta(days=3),
        checked_in_at=checked_in_at,
        checked_in_by=checked_in_by
        or ('staff-999' if status == BookingStatus.CHECKED_IN else None),
        check_in_method=CheckInMethod.QR_SCAN if status == BookingStatus.CHECKED_IN else None,
    )


def make_resolved(
    *,
    booking: Optional[Booking] = None,
    user: Optional[UserEntity] = None,
    event: Optional[EventEntity] = None,
) -> ResolvedTicket:
    return ResolvedTicket(
        booking=booking or make_booking(),
        user=user or make_user(),
        event=event or make_event(),
    )


def seeded_store(*bookings: Booking, events: tuple[EventEntity, ...] = ()) -> InMemoryCheckInStore:
    """In-memory store holding the default attendee, the default event and `bookings`."""
    store = InMemoryCheckInStore()
    store.add_user(make_user())
    store.add_event(make_event())
    store.add_event(make_event(event_id=OTHER_EVENT_ID, title='Hackathon Finals'))
    for event in events:
        store.add_event(event)
    for booking in bookings:
        store.add_booking(booking)
    return store


class RepositoryMocks:
    """
    Mock repositories container for testing use cases

    Every query method is an AsyncMock, so tests can assert whether a lookup
    was attempted at all.
    """

    def __init__(
        self,
        *,
        booking: Optional[Booking] = None,
        user: Optional[UserEntity] = None,
        event: Optional[EventEntity] = None,
        write_result: Optional[CheckInWriteResult] = None,
    ):
        self.query_repo = AsyncMock()
        self.query_repo.get_booking_by_id = AsyncMock(return_value=booking)
        self.query_repo.get_booking_by_ticket_id = AsyncMock(return_value=booking)
        self.query_repo.get_user_by_id = AsyncMock(return_value=user)
        self.query_repo.get_event_by_id = AsyncMock(return_value=event)
        self.query_repo.count_bookings_by_status = AsyncMock(
            return_value={status: 0 for status in BookingStatus}
        )

        self.command_repo = AsyncMock()
        self.command_repo.check_in_if_confirmed = AsyncMock(return_value=write_result)

    @property
    def lookup_attempted(self) -> bool:
        return (
            self.query_repo.get_booking_by_id.await_count
            + self.query_repo.get_booking_by_ticket_id.await_count
        ) > 0
