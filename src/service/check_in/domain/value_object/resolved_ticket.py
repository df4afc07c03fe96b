import attrs

from src.service.check_in.domain.entity.booking_entity import Booking
from src.service.check_in.domain.entity.event_entity import EventEntity
from src.service.check_in.domain.entity.user_entity import UserEntity


@attrs.define(frozen=True)
class ResolvedTicket:
    """A scan that resolved to exactly one booking together with its attendee and event."""

    booking: Booking
    user: UserEntity
    event: EventEntity
