"""Booking Status Enum"""

from enum import StrEnum


class BookingStatus(StrEnum):
    CONFIRMED = 'confirmed'
    WAITLISTED = 'waitlisted'
    CANCELLED = 'cancelled'
    CHECKED_IN = 'checked_in'

    @classmethod
    def _missing_(cls, value: object) -> 'BookingStatus | None':
        # Older booking documents store 'waitlist' and mixed-case values
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized == 'waitlist':
                return cls.WAITLISTED
            for member in cls:
                if member.value == normalized:
                    return member
        return None
