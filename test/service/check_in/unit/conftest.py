"""
Conftest for pure unit tests - no external dependencies.
"""

import pytest

from src.service.check_in.driven_adapter.qr.hmac_qr_ticket_codec_impl import (
    HmacQrTicketCodecImpl,
)


@pytest.fixture
def qr_codec() -> HmacQrTicketCodecImpl:
    return HmacQrTicketCodecImpl(
        secret_key='unit-test-secret',
        signature_required=True,
        window_seconds=30,
        buffer_windows=2,
        max_age_days=365,
    )
