"""
Unit tests for HmacQrTicketCodecImpl

Signed payload rules:
- signature = first 16 hex chars of HMAC-SHA256(eventId:ticketId:userId:windowId)
- current and previous window signatures are accepted
- windows more than 2 behind now are expired
"""

from datetime import timedelta

import orjson
import pytest

from src.service.check_in.domain.value_object.check_in_error import Expired, InvalidFormat
from src.service.check_in.domain.value_object.qr_ticket_payload import (
    QR_TICKET_TYPE,
    InvalidQrPayloadError,
)
from src.service.check_in.driven_adapter.qr.hmac_qr_ticket_codec_impl import (
    HmacQrTicketCodecImpl,
)
from test.service.check_in.helpers import NOW


def _encode(codec: HmacQrTicketCodecImpl, *, at=NOW) -> str:
    return codec.encode(
        event_id='E1', booking_id='B1', ticket_id='EVT-9982-XJ', user_id='U1', now=at
    )


class TestDecode:
    def test_round_trip_keeps_identifiers(self, qr_codec: HmacQrTicketCodecImpl) -> None:
        payload = qr_codec.decode(_encode(qr_codec))

        assert payload is not None
        assert (payload.event_id, payload.booking_id, payload.ticket_id, payload.user_id) == (
            'E1',
            'B1',
            'EVT-9982-XJ',
            'U1',
        )
        assert payload.type == QR_TICKET_TYPE
        assert payload.window_id == qr_codec.window_id_at(NOW)
        assert len(payload.signature or '') == 16

    @pytest.mark.parametrize('raw', ['EVT-9982-XJ', '12345', '"EVT-1"', '{not json', '[1, 2]'])
    def test_non_object_input_is_a_typed_code(
        self, qr_codec: HmacQrTicketCodecImpl, raw: str
    ) -> None:
        assert qr_codec.decode(raw) is None

    def test_foreign_qr_type_is_rejected(self, qr_codec: HmacQrTicketCodecImpl) -> None:
        raw = orjson.dumps({'type': 'WIFI_CONFIG', 'bookingId': 'B1'}).decode()

        with pytest.raises(InvalidQrPayloadError):
            qr_codec.decode(raw)

    def test_object_without_identifiers_is_rejected(
        self, qr_codec: HmacQrTicketCodecImpl
    ) -> None:
        raw = orjson.dumps({'type': QR_TICKET_TYPE, 'eventId': 'E1'}).decode()

        with pytest.raises(InvalidQrPayloadError):
            qr_codec.decode(raw)

    def test_numeric_identifiers_are_read_as_strings(
        self, qr_codec: HmacQrTicketCodecImpl
    ) -> None:
        payload = qr_codec.decode(orjson.dumps({'bookingId': 42}).decode())

        assert payload is not None
        assert payload.booking_id == '42'


class TestVerify:
    def test_fresh_payload_is_accepted(self, qr_codec: HmacQrTicketCodecImpl) -> None:
        payload = qr_codec.decode(_encode(qr_codec))

        assert qr_codec.verify(payload, now=NOW) is None

    def test_payload_within_buffer_windows_is_accepted(
        self, qr_codec: HmacQrTicketCodecImpl
    ) -> None:
        payload = qr_codec.decode(_encode(qr_codec, at=NOW - timedelta(seconds=60)))

        assert qr_codec.verify(payload, now=NOW) is None

    def test_payload_beyond_buffer_windows_is_expired(
        self, qr_codec: HmacQrTicketCodecImpl
    ) -> None:
        payload = qr_codec.decode(_encode(qr_codec, at=NOW - timedelta(minutes=5)))

        assert qr_codec.verify(payload, now=NOW) == Expired()

    def test_previous_window_signature_is_accepted(
        self, qr_codec: HmacQrTicketCodecImpl
    ) -> None:
        window_id = qr_codec.window_id_at(NOW)
        data = {
            'type': QR_TICKET_TYPE,
            'eventId': 'E1',
            'ticketId': 'EVT-9982-XJ',
            'userId': 'U1',
            'windowId': window_id,
            'signature': qr_codec.sign(
                event_id='E1', ticket_id='EVT-9982-XJ', user_id='U1', window_id=window_id - 1
            ),
        }
        payload = qr_codec.decode(orjson.dumps(data).decode())

        assert qr_codec.verify(payload, now=NOW) is None

    def test_tampered_ticket_id_fails_signature(self, qr_codec: HmacQrTicketCodecImpl) -> None:
        data = orjson.loads(_encode(qr_codec))
        data['ticketId'] = 'EVT-0001-AA'
        payload = qr_codec.decode(orjson.dumps(data).decode())

        assert isinstance(qr_codec.verify(payload, now=NOW), InvalidFormat)

    def test_payload_signed_with_other_key_fails(self, qr_codec: HmacQrTicketCodecImpl) -> None:
        forger = HmacQrTicketCodecImpl(secret_key='someone-else', signature_required=True)
        payload = qr_codec.decode(_encode(forger))

        assert isinstance(qr_codec.verify(payload, now=NOW), InvalidFormat)

    def test_unsigned_payload_fails_when_signature_required(
        self, qr_codec: HmacQrTicketCodecImpl
    ) -> None:
        payload = qr_codec.decode(orjson.dumps({'bookingId': 'B1'}).decode())

        assert isinstance(qr_codec.verify(payload, now=NOW), InvalidFormat)

    def test_unsigned_payload_passes_when_signature_optional(self) -> None:
        codec = HmacQrTicketCodecImpl(secret_key='k', signature_required=False)
        payload = codec.decode(orjson.dumps({'bookingId': 'B1'}).decode())

        assert codec.verify(payload, now=NOW) is None

    def test_non_ascii_signature_is_rejected_not_raised(
        self, qr_codec: HmacQrTicketCodecImpl
    ) -> None:
        data = orjson.loads(_encode(qr_codec))
        data['signature'] = 'ünïcødé-sïgnatür'
        payload = qr_codec.decode(orjson.dumps(data).decode())

        assert isinstance(qr_codec.verify(payload, now=NOW), InvalidFormat)
