from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError


QR_TICKET_TYPE = 'EVENTEASE_TICKET'


class InvalidQrPayloadError(DomainError):
    """The scan decoded to a JSON object that is not a usable ticket payload."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


@attrs.define(frozen=True)
class QrTicketPayload:
    event_id: Optional[str]
    booking_id: Optional[str]
    ticket_id: Optional[str]
    user_id: Optional[str]
    timestamp_ms: Optional[int] = None
    window_id: Optional[int] = None
    signature: Optional[str] = attrs.field(default=None, repr=False)
    type: str = QR_TICKET_TYPE

    @property
    def has_lookup_key(self) -> bool:
        return bool(self.ticket_id or self.booking_id)

    @property
    def is_signable(self) -> bool:
        return bool(self.event_id and self.ticket_id and self.user_id)
