from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.service.check_in.domain.value_object.check_in_error import CheckInError
from src.service.check_in.domain.value_object.qr_ticket_payload import QrTicketPayload


class IQrTicketCodec(ABC):
    @abstractmethod
    def encode(
        self, *, event_id: str, booking_id: str, ticket_id: str, user_id: str, now: datetime
    ) -> str:
        """Serialize and sign a ticket payload for rendering as a QR code"""
        pass

    @abstractmethod
    def decode(self, raw: str) -> Optional[QrTicketPayload]:
        """
        Returns:
            The payload, or None when `raw` is not a JSON object (a typed ticket code)

        Raises:
            InvalidQrPayloadError: JSON object of the wrong type or without any identifier
        """
        pass

    @abstractmethod
    def verify(self, payload: QrTicketPayload, *, now: datetime) -> Optional[CheckInError]:
        """
        Check signature and freshness.

        Returns:
            None when the payload is authentic and current, InvalidFormat on a
            bad or missing signature, Expired on a stale time window
        """
        pass
