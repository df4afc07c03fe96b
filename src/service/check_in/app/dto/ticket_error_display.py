"""
Operator-facing rendering of classified check-in failures.

Every failure gets a title, message and reason, plus optional context
(previous scan time, attendee, event match). Retry and manual entry are
offered for every kind.
"""

from datetime import datetime
from typing import Dict, Optional, Tuple, assert_never
import zoneinfo

import attrs

from src.service.check_in.domain.enum.check_in_error_kind import CheckInErrorKind
from src.service.check_in.domain.enum.session_state import OperatorAction
from src.service.check_in.domain.value_object.check_in_error import (
    AlreadyCheckedIn,
    AuthRequired,
    Cancelled,
    CheckInError,
    Expired,
    InfraTransient,
    InvalidFormat,
    NotFound,
    Waitlist,
    WrongEvent,
)


RECOVERY_ACTIONS: Tuple[OperatorAction, ...] = (
    OperatorAction.TRY_AGAIN,
    OperatorAction.MANUAL_ENTRY,
)


@attrs.define(frozen=True)
class TicketErrorDisplay:
    error_kind: CheckInErrorKind
    title: str
    message: str
    reason: str
    display_fields: Dict[str, str] = attrs.field(factory=dict)
    recovery_actions: Tuple[OperatorAction, ...] = RECOVERY_ACTIONS


def format_scan_time(value: datetime, *, tz: zoneinfo.ZoneInfo) -> str:
    """'Oct 17, 3:04 PM' in the gate's display timezone."""
    local = value.astimezone(tz)
    hour = local.strftime('%I').lstrip('0') or '12'
    return f'{local.strftime("%b")} {local.day}, {hour}:{local.strftime("%M %p")}'


def build_ticket_error_display(
    error: CheckInError, *, now: datetime, tz: zoneinfo.ZoneInfo
) -> TicketErrorDisplay:
    match error:
        case InvalidFormat():
            return TicketErrorDisplay(
                error_kind=error.kind,
                title='Invalid Format',
                message='The ticket ID format is not valid.',
                reason='Malformed ID',
                display_fields={'event_match': 'N/A'},
            )
        case NotFound():
            return TicketErrorDisplay(
                error_kind=error.kind,
                title='Ticket Not Found',
                message='This ticket does not exist in our system.',
                reason='Invalid Ticket ID',
                display_fields={'event_match': 'Not Found'},
            )
        case WrongEvent(event_title=event_title):
            return TicketErrorDisplay(
                error_kind=error.kind,
                title='Wrong Event',
                message='This ticket is for a different event.',
                reason='Event Mismatch',
                display_fields={'event_match': event_title or 'Wrong Session ID'},
            )
        case AlreadyCheckedIn(user_name=user_name, previous_scan_at=previous_scan_at):
            previous_scan = (
                format_scan_time(previous_scan_at, tz=tz)
                if previous_scan_at
                else f'Today at {format_scan_time(now, tz=tz).split(", ")[1]}'
            )
            fields = {'previous_scan': previous_scan, 'event_match': 'Valid'}
            if user_name:
                fields['user_name'] = user_name
            return TicketErrorDisplay(
                error_kind=error.kind,
                title='Already Checked In',
                message=f'{user_name or "This participant"} has already been checked in.',
                reason='Duplicate Entry',
                display_fields=fields,
            )
        case Cancelled():
            return TicketErrorDisplay(
                error_kind=error.kind,
                title='Booking Cancelled',
                message='This booking has been cancelled and is no longer valid.',
                reason='Cancelled Booking',
                display_fields={'event_match': 'N/A'},
            )
        case Waitlist():
            return TicketErrorDisplay(
                error_kind=error.kind,
                title='Waitlist Only',
                message='This participant is on the waitlist and has not been confirmed.',
                reason='Not Confirmed',
                display_fields={'event_match': 'Pending'},
            )
        case Expired(window_end=window_end):
            fields = {'event_match': 'Expired'}
            if window_end:
                fields['window_closed_at'] = format_scan_time(window_end, tz=tz)
            return TicketErrorDisplay(
                error_kind=error.kind,
                title='Ticket Expired',
                message='This event has already ended.',
                reason='Event Completed',
                display_fields=fields,
            )
        case AuthRequired():
            return TicketErrorDisplay(
                error_kind=error.kind,
                title='Sign-In Required',
                message='Authentication required - please log in again.',
                reason='No Operator Identity',
            )
        case InfraTransient():
            return TicketErrorDisplay(
                error_kind=error.kind,
                title='Check-In Unavailable',
                message='Could not reach the booking system. The ticket was not used; please try again.',
                reason='Connection Problem',
            )
        case _:
            assert_never(error)


def resolve_display_timezone(name: Optional[str]) -> zoneinfo.ZoneInfo:
    try:
        return zoneinfo.ZoneInfo(name or 'UTC')
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        return zoneinfo.ZoneInfo('UTC')
