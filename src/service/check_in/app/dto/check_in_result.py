"""Result shapes handed to the presentation layer."""

from typing import ClassVar, Dict, TypeAlias

import attrs

from src.service.check_in.app.dto.ticket_error_display import TicketErrorDisplay
from src.service.check_in.domain.entity.booking_entity import Booking
from src.service.check_in.domain.entity.event_entity import EventEntity
from src.service.check_in.domain.entity.user_entity import UserEntity
from src.service.check_in.domain.enum.check_in_error_kind import CheckInErrorKind
from src.service.check_in.domain.enum.session_state import SessionState
from src.service.check_in.domain.value_object.check_in_error import CheckInError


@attrs.define(frozen=True)
class CheckInSuccess:
    state: ClassVar[SessionState] = SessionState.SUCCESS
    booking: Booking
    user: UserEntity
    event: EventEntity


@attrs.define(frozen=True)
class CheckInFailure:
    state: ClassVar[SessionState] = SessionState.ERROR
    error: CheckInError
    display: TicketErrorDisplay

    @property
    def error_kind(self) -> CheckInErrorKind:
        return self.error.kind

    @property
    def title(self) -> str:
        return self.display.title

    @property
    def message(self) -> str:
        return self.display.message

    @property
    def reason(self) -> str:
        return self.display.reason

    @property
    def display_fields(self) -> Dict[str, str]:
        return self.display.display_fields


CheckInResult: TypeAlias = CheckInSuccess | CheckInFailure
