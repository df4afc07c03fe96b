from datetime import datetime
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.check_in.domain.enum.booking_status import BookingStatus
from src.service.check_in.domain.enum.check_in_method import CheckInMethod
from src.service.check_in.domain.value_object.check_in_window import validate_aware_datetime


@attrs.define(frozen=True)
class Booking:
    id: str
    ticket_id: str
    event_id: str
    user_id: str
    status: BookingStatus = attrs.field(converter=BookingStatus)
    booked_at: Optional[datetime] = attrs.field(default=None, validator=validate_aware_datetime)
    checked_in_at: Optional[datetime] = attrs.field(
        default=None, validator=validate_aware_datetime
    )
    checked_in_by: Optional[str] = None
    check_in_method: Optional[CheckInMethod] = attrs.field(
        default=None, converter=attrs.converters.optional(CheckInMethod)
    )

    def __attrs_post_init__(self) -> None:
        # checked_in_at is set if and only if the booking is checked in
        if (self.checked_in_at is not None) != (self.status == BookingStatus.CHECKED_IN):
            raise DomainError(
                f'Booking {self.id} is inconsistent: status={self.status}, '
                f'checked_in_at={self.checked_in_at}'
            )

    @property
    def is_checked_in(self) -> bool:
        return self.status == BookingStatus.CHECKED_IN

    @Logger.io
    def mark_as_checked_in(
        self, *, operator_id: str, method: CheckInMethod, checked_in_at: datetime
    ) -> 'Booking':
        """
        Transition confirmed -> checked_in.

        Raises:
            DomainError: When the booking is not in the confirmed state
        """
        if self.status != BookingStatus.CONFIRMED:
            raise DomainError(f'Booking cannot be checked in from status {self.status}', 409)

        return attrs.evolve(
            self,
            status=BookingStatus.CHECKED_IN,
            checked_in_at=checked_in_at,
            checked_in_by=operator_id,
            check_in_method=method,
        )
