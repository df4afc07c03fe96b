"""Conditional check-in write result DTO."""

from enum import StrEnum
from typing import Optional

import attrs

from src.service.check_in.domain.entity.booking_entity import Booking


class CheckInWriteOutcome(StrEnum):
    COMMITTED = 'committed'
    CONFLICT = 'conflict'
    NOT_FOUND = 'not_found'


@attrs.define(frozen=True)
class CheckInWriteResult:
    """
    Outcome of the compare-and-set.

    booking is the updated record on COMMITTED, the record as found on
    CONFLICT, and None on NOT_FOUND.
    """

    outcome: CheckInWriteOutcome
    booking: Optional[Booking] = None

    @classmethod
    def committed(cls, booking: Booking) -> 'CheckInWriteResult':
        return cls(outcome=CheckInWriteOutcome.COMMITTED, booking=booking)

    @classmethod
    def conflict(cls, booking: Booking) -> 'CheckInWriteResult':
        return cls(outcome=CheckInWriteOutcome.CONFLICT, booking=booking)

    @classmethod
    def not_found(cls) -> 'CheckInWriteResult':
        return cls(outcome=CheckInWriteOutcome.NOT_FOUND)
