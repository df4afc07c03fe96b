"""Check-In Error Kind Enum"""

from enum import StrEnum


class CheckInErrorKind(StrEnum):
    INVALID_FORMAT = 'invalid_format'
    NOT_FOUND = 'not_found'
    WRONG_EVENT = 'wrong_event'
    ALREADY_CHECKED_IN = 'already_checked_in'
    CANCELLED = 'cancelled'
    WAITLIST = 'waitlist'
    EXPIRED = 'expired'
    AUTH_REQUIRED = 'auth_required'
    INFRA_TRANSIENT = 'infra_transient'
