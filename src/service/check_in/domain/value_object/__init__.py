from src.service.check_in.domain.value_object.check_in_window import CheckInWindow
from src.service.check_in.domain.value_object.qr_ticket_payload import (
    InvalidQrPayloadError,
    QrTicketPayload,
)


__all__ = ['CheckInWindow', 'InvalidQrPayloadError', 'QrTicketPayload']
