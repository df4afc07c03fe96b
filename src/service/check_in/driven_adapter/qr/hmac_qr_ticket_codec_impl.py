"""
Signed QR ticket payloads.

A ticket QR is a JSON object of type EVENTEASE_TICKET whose signature is the
first 16 hex chars of HMAC-SHA256 over `eventId:ticketId:userId:windowId`,
where windowId is the index of the 30-second window the code was rendered in.
Codes stay valid for the current window plus a small buffer, and a code from
the previous window is accepted at a window boundary.
"""

from datetime import datetime
import hashlib
import hmac
from typing import Any, Dict, Optional

import orjson

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.check_in.app.interface.i_qr_ticket_codec import IQrTicketCodec
from src.service.check_in.domain.value_object.check_in_error import (
    CheckInError,
    Expired,
    InvalidFormat,
)
from src.service.check_in.domain.value_object.qr_ticket_payload import (
    QR_TICKET_TYPE,
    InvalidQrPayloadError,
    QrTicketPayload,
)


SIGNATURE_HEX_CHARS = 16
MS_PER_DAY = 24 * 60 * 60 * 1000


def _as_identifier(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return None


def _epoch_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


class HmacQrTicketCodecImpl(IQrTicketCodec):
    def __init__(
        self,
        *,
        secret_key: Optional[str] = None,
        signature_required: Optional[bool] = None,
        window_seconds: Optional[int] = None,
        buffer_windows: Optional[int] = None,
        max_age_days: Optional[int] = None,
    ) -> None:
        self._secret = (
            secret_key if secret_key is not None else settings.QR_SECRET_KEY.get_secret_value()
        ).encode()
        self.signature_required = (
            signature_required if signature_required is not None else settings.QR_SIGNATURE_REQUIRED
        )
        self.window_ms = (window_seconds or settings.QR_WINDOW_SECONDS) * 1000
        self.buffer_windows = (
            buffer_windows if buffer_windows is not None else settings.QR_BUFFER_WINDOWS
        )
        self.max_age_ms = (max_age_days or settings.QR_MAX_AGE_DAYS) * MS_PER_DAY

    def window_id_at(self, now: datetime) -> int:
        return _epoch_ms(now) // self.window_ms

    def sign(self, *, event_id: str, ticket_id: str, user_id: str, window_id: int) -> str:
        message = f'{event_id}:{ticket_id}:{user_id}:{window_id}'.encode()
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()[:SIGNATURE_HEX_CHARS]

    def encode(
        self, *, event_id: str, booking_id: str, ticket_id: str, user_id: str, now: datetime
    ) -> str:
        window_id = self.window_id_at(now)
        payload: Dict[str, Any] = {
            'type': QR_TICKET_TYPE,
            'eventId': event_id,
            'bookingId': booking_id,
            'ticketId': ticket_id,
            'userId': user_id,
            'timestamp': _epoch_ms(now),
            'windowId': window_id,
            'signature': self.sign(
                event_id=event_id, ticket_id=ticket_id, user_id=user_id, window_id=window_id
            ),
        }
        return orjson.dumps(payload).decode()

    def decode(self, raw: str) -> Optional[QrTicketPayload]:
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError:
            return None

        # Bare JSON scalars ("12345") are typed codes, not payloads
        if not isinstance(data, dict):
            return None

        payload_type = data.get('type', QR_TICKET_TYPE)
        if payload_type != QR_TICKET_TYPE:
            raise InvalidQrPayloadError(f'Unsupported QR payload type: {payload_type!r}')

        payload = QrTicketPayload(
            event_id=_as_identifier(data.get('eventId')),
            booking_id=_as_identifier(data.get('bookingId')),
            ticket_id=_as_identifier(data.get('ticketId')),
            user_id=_as_identifier(data.get('userId')),
            timestamp_ms=_as_int(data.get('timestamp')),
            window_id=_as_int(data.get('windowId')),
            signature=data.get('signature') if isinstance(data.get('signature'), str) else None,
        )
        if not payload.has_lookup_key:
            raise InvalidQrPayloadError('QR payload carries no booking or ticket identifier')
        return payload

    @Logger.io
    def verify(self, payload: QrTicketPayload, *, now: datetime) -> Optional[CheckInError]:
        if not self.signature_required:
            return None

        if not payload.is_signable or not payload.signature:
            return InvalidFormat(detail='Missing required ticket information')

        if payload.window_id is not None:
            qr_window = payload.window_id
        elif payload.timestamp_ms is not None:
            qr_window = payload.timestamp_ms // self.window_ms
        else:
            return InvalidFormat(detail='QR payload carries no time window')

        if self.window_id_at(now) - qr_window > self.buffer_windows:
            return Expired()

        candidates = (
            self.sign(
                event_id=payload.event_id,
                ticket_id=payload.ticket_id,
                user_id=payload.user_id,
                window_id=window_id,
            )
            for window_id in (qr_window, qr_window - 1)
        )
        presented = payload.signature.encode()
        if not any(hmac.compare_digest(presented, expected.encode()) for expected in candidates):
            Logger.base.warning(f'🔏 [QR] Signature mismatch for ticket {payload.ticket_id}')
            return InvalidFormat(detail='Invalid ticket signature')

        if payload.timestamp_ms is not None and _epoch_ms(now) - payload.timestamp_ms > self.max_age_ms:
            return Expired()

        return None
