from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from src.service.check_in.app.dto.check_in_result import CheckInFailure, CheckInResult
from src.service.check_in.app.dto.check_in_stats import CheckInStats


class ScanCheckInRequest(BaseModel):
    payload: str = Field(..., max_length=4096)  # decoded QR text, as delivered by the scanner
    event_id: Optional[str] = None  # scope the session to one event

    model_config = {
        'json_schema_extra': {
            'example': {
                'payload': '{"type":"EVENTEASE_TICKET","eventId":"E1","bookingId":"B1",'
                '"ticketId":"EVT-9982-XJ","userId":"U1","timestamp":1760713440000,'
                '"windowId":58690448,"signature":"3f1c0a9b2d4e5f60"}',
                'event_id': 'E1',
            }
        }
    }


class ManualCheckInRequest(BaseModel):
    ticket_id: str = Field(..., max_length=256)
    event_id: Optional[str] = None

    model_config = {'json_schema_extra': {'example': {'ticket_id': 'EVT-9982-XJ', 'event_id': 'E1'}}}


class BookingResponse(BaseModel):
    id: str
    ticket_id: str
    event_id: str
    user_id: str
    status: str
    checked_in_at: Optional[datetime] = None
    checked_in_by: Optional[str] = None
    check_in_method: Optional[str] = None


class AttendeeResponse(BaseModel):
    id: str
    name: str
    email: str
    department: Optional[str] = None
    roll_no: Optional[str] = None


class EventSummaryResponse(BaseModel):
    id: str
    title: str
    event_date: datetime
    venue: str


class CheckInResultResponse(BaseModel):
    """Either the success shape (booking, user, event) or the error shape."""

    state: Literal['success', 'error']
    booking: Optional[BookingResponse] = None
    user: Optional[AttendeeResponse] = None
    event: Optional[EventSummaryResponse] = None
    error_kind: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    reason: Optional[str] = None
    display_fields: Dict[str, str] = {}
    recovery_actions: List[str] = []

    @classmethod
    def from_result(cls, result: CheckInResult) -> 'CheckInResultResponse':
        if isinstance(result, CheckInFailure):
            return cls(
                state='error',
                error_kind=result.error_kind.value,
                title=result.title,
                message=result.message,
                reason=result.reason,
                display_fields=result.display_fields,
                recovery_actions=[action.value for action in result.display.recovery_actions],
            )

        booking, user, event = result.booking, result.user, result.event
        return cls(
            state='success',
            booking=BookingResponse(
                id=booking.id,
                ticket_id=booking.ticket_id,
                event_id=booking.event_id,
                user_id=booking.user_id,
                status=booking.status.value,
                checked_in_at=booking.checked_in_at,
                checked_in_by=booking.checked_in_by,
                check_in_method=booking.check_in_method.value if booking.check_in_method else None,
            ),
            user=AttendeeResponse(
                id=user.id,
                name=user.display_name,
                email=user.email,
                department=user.department,
                roll_no=user.roll_no,
            ),
            event=EventSummaryResponse(
                id=event.id, title=event.title, event_date=event.event_date, venue=event.venue
            ),
        )


class CheckInStatsResponse(BaseModel):
    event_id: str
    event_title: str
    total: int
    confirmed: int
    checked_in: int
    cancelled: int
    waitlisted: int
    check_in_rate: float

    @classmethod
    def from_stats(cls, stats: CheckInStats) -> 'CheckInStatsResponse':
        return cls(
            event_id=stats.event_id,
            event_title=stats.event_title,
            total=stats.total,
            confirmed=stats.confirmed,
            checked_in=stats.checked_in,
            cancelled=stats.cancelled,
            waitlisted=stats.waitlisted,
            check_in_rate=stats.check_in_rate,
        )
