from datetime import datetime
from typing import Optional

from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.check_in.app.interface.i_check_in_query_repo import ICheckInQueryRepo
from src.service.check_in.app.interface.i_qr_ticket_codec import IQrTicketCodec
from src.service.check_in.domain.entity.booking_entity import Booking
from src.service.check_in.domain.value_object.check_in_error import (
    CheckInError,
    InvalidFormat,
    NotFound,
)
from src.service.check_in.domain.value_object.qr_ticket_payload import (
    InvalidQrPayloadError,
    QrTicketPayload,
)
from src.service.check_in.domain.value_object.resolved_ticket import ResolvedTicket
from src.service.check_in.domain.value_object.ticket_code import sanitize_lookup_key


class ResolveTicketUseCase:
    """
    Ticket Resolver - raw scan or typed code -> (Booking, User, Event)

    Flow:
    1. Decode the input as a QR payload; anything that is not a JSON object is a typed code
    2. Verify the QR signature / freshness (when enabled)
    3. Sanitize every identifier; a disallowed character ends the attempt before any lookup
    4. Look up the booking (booking id first, then ticket code)
    5. Load the attendee and event; a missing record means not found

    Pure read. Classified failures are returned, not raised; InfrastructureError
    from the repository propagates.
    """

    def __init__(self, *, query_repo: ICheckInQueryRepo, qr_codec: IQrTicketCodec) -> None:
        self.query_repo = query_repo
        self.qr_codec = qr_codec
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def resolve(self, *, raw_input: str, now: datetime) -> ResolvedTicket | CheckInError:
        with self.tracer.start_as_current_span('use_case.resolve_ticket'):
            if not isinstance(raw_input, str) or not raw_input.strip():
                return InvalidFormat(detail='Empty ticket input')

            try:
                payload = self.qr_codec.decode(raw_input)
            except InvalidQrPayloadError as e:
                return InvalidFormat(detail=e.message)

            if payload is None:
                code = sanitize_lookup_key(raw_input)
                if code is None:
                    return InvalidFormat(detail='Ticket code contains disallowed characters')
                booking = await self._find_by_typed_code(code)
                lookup_key = code
            else:
                if verification_error := self.qr_codec.verify(payload, now=now):
                    return verification_error
                outcome = await self._find_by_payload(payload)
                if not isinstance(outcome, tuple):
                    return outcome
                booking, lookup_key = outcome

            if booking is None:
                Logger.base.info(f'🔎 [RESOLVE] No booking for {lookup_key}')
                return NotFound(lookup_key=lookup_key)

            return await self._load_related(booking, lookup_key=lookup_key)

    async def _find_by_typed_code(self, code: str) -> Optional[Booking]:
        booking = await self.query_repo.get_booking_by_ticket_id(ticket_id=code)
        if booking is None:
            booking = await self.query_repo.get_booking_by_id(booking_id=code)
        return booking

    async def _find_by_payload(
        self, payload: QrTicketPayload
    ) -> tuple[Optional[Booking], str] | CheckInError:
        booking_id = sanitize_lookup_key(payload.booking_id) if payload.booking_id else None
        ticket_id = sanitize_lookup_key(payload.ticket_id) if payload.ticket_id else None

        # A present but unsanitizable identifier rejects the whole payload
        if (payload.booking_id and booking_id is None) or (payload.ticket_id and ticket_id is None):
            return InvalidFormat(detail='QR identifier contains disallowed characters')

        if booking_id:
            booking = await self.query_repo.get_booking_by_id(booking_id=booking_id)
            if booking is None and not ticket_id:
                return None, booking_id
            # Both identifiers present must point at the same booking
            if booking is not None and ticket_id and booking.ticket_id != ticket_id:
                return NotFound(lookup_key=booking_id)
            if booking is not None:
                return booking, booking_id

        # ticketId is the signed identifier; bookingId only narrows the lookup
        assert ticket_id is not None
        booking = await self.query_repo.get_booking_by_ticket_id(ticket_id=ticket_id)
        return booking, ticket_id

    async def _load_related(
        self, booking: Booking, *, lookup_key: str
    ) -> ResolvedTicket | CheckInError:
        user = await self.query_repo.get_user_by_id(user_id=booking.user_id)
        event = await self.query_repo.get_event_by_id(event_id=booking.event_id)
        if user is None or event is None:
            Logger.base.warning(
                f'⚠️ [RESOLVE] Booking {booking.id} references a missing '
                f'{"user" if user is None else "event"}'
            )
            return NotFound(lookup_key=lookup_key)
        return ResolvedTicket(booking=booking, user=user, event=event)
