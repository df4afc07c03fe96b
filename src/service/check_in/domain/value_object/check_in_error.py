"""
Classified check-in failures.

One frozen variant per failure kind, each carrying only the fields its
display needs. `CheckInError` is the closed union of all variants; code that
branches on it should `match` over the variants and end with `assert_never`.
"""

from datetime import datetime
from typing import ClassVar, Optional, TypeAlias

import attrs

from src.service.check_in.domain.enum.check_in_error_kind import CheckInErrorKind


@attrs.define(frozen=True)
class InvalidFormat:
    kind: ClassVar[CheckInErrorKind] = CheckInErrorKind.INVALID_FORMAT
    detail: str = ''


@attrs.define(frozen=True)
class NotFound:
    kind: ClassVar[CheckInErrorKind] = CheckInErrorKind.NOT_FOUND
    lookup_key: str = ''


@attrs.define(frozen=True)
class WrongEvent:
    kind: ClassVar[CheckInErrorKind] = CheckInErrorKind.WRONG_EVENT
    event_id: str
    event_title: str


@attrs.define(frozen=True)
class AlreadyCheckedIn:
    kind: ClassVar[CheckInErrorKind] = CheckInErrorKind.ALREADY_CHECKED_IN
    user_name: Optional[str] = None
    previous_scan_at: Optional[datetime] = None


@attrs.define(frozen=True)
class Cancelled:
    kind: ClassVar[CheckInErrorKind] = CheckInErrorKind.CANCELLED


@attrs.define(frozen=True)
class Waitlist:
    kind: ClassVar[CheckInErrorKind] = CheckInErrorKind.WAITLIST


@attrs.define(frozen=True)
class Expired:
    kind: ClassVar[CheckInErrorKind] = CheckInErrorKind.EXPIRED
    window_end: Optional[datetime] = None


@attrs.define(frozen=True)
class AuthRequired:
    kind: ClassVar[CheckInErrorKind] = CheckInErrorKind.AUTH_REQUIRED


@attrs.define(frozen=True)
class InfraTransient:
    kind: ClassVar[CheckInErrorKind] = CheckInErrorKind.INFRA_TRANSIENT
    detail: str = ''


CheckInError: TypeAlias = (
    InvalidFormat
    | NotFound
    | WrongEvent
    | AlreadyCheckedIn
    | Cancelled
    | Waitlist
    | Expired
    | AuthRequired
    | InfraTransient
)
