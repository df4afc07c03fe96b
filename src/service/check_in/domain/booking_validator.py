"""
Check-in eligibility rules.

A booking can match several failure conditions at once (cancelled AND for
another event, checked in AND past the window). The checks below run in a
fixed order and the first match wins, so the same booking always produces the
same outcome:

    1. not resolved          -> NotFound
    2. other event in scope  -> WrongEvent
    3. already checked in    -> AlreadyCheckedIn
    4. cancelled             -> Cancelled
    5. waitlisted            -> Waitlist
    6. window ended          -> Expired
    7. otherwise             -> Valid

Duplicate scans outrank expiry so staff still see who entered and when after
the event has technically ended.
"""

from datetime import datetime
from typing import Optional

import attrs

from src.service.check_in.domain.entity.booking_entity import Booking
from src.service.check_in.domain.entity.user_entity import UserEntity
from src.service.check_in.domain.enum.booking_status import BookingStatus
from src.service.check_in.domain.value_object.check_in_error import (
    AlreadyCheckedIn,
    Cancelled,
    CheckInError,
    Expired,
    NotFound,
    Waitlist,
    WrongEvent,
)
from src.service.check_in.domain.value_object.resolved_ticket import ResolvedTicket


@attrs.define(frozen=True)
class Valid:
    ticket: ResolvedTicket


def classify_booking_status(
    booking: Booking, *, user: Optional[UserEntity] = None
) -> Optional[CheckInError]:
    """Steps 3-5: the booking's own state, independent of event and clock."""
    if booking.status == BookingStatus.CHECKED_IN:
        return AlreadyCheckedIn(
            user_name=user.name if user else None,
            previous_scan_at=booking.checked_in_at,
        )
    if booking.status == BookingStatus.CANCELLED:
        return Cancelled()
    if booking.status == BookingStatus.WAITLISTED:
        return Waitlist()
    return None


def validate_for_check_in(
    resolution: Optional[ResolvedTicket],
    *,
    scoped_event_id: Optional[str],
    now: datetime,
    default_window_hours: float,
) -> Valid | CheckInError:
    if resolution is None:
        return NotFound()

    booking, user, event = resolution.booking, resolution.user, resolution.event

    if scoped_event_id and booking.event_id != scoped_event_id:
        return WrongEvent(event_id=event.id, event_title=event.title)

    if status_error := classify_booking_status(booking, user=user):
        return status_error

    window = event.check_in_window(default_hours=default_window_hours)
    if window.has_ended(now):
        return Expired(window_end=window.end)

    return Valid(ticket=resolution)
