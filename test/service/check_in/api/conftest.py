from collections.abc import Iterator

from dependency_injector import providers
from fastapi.testclient import TestClient
import pytest

from src.platform.config.di import container
from src.service.check_in.app.command.check_in_attempt_use_case import CheckInAttemptUseCase
from src.service.check_in.app.command.commit_check_in_use_case import CommitCheckInUseCase
from src.service.check_in.app.command.resolve_ticket_use_case import ResolveTicketUseCase
from src.service.check_in.domain.enum.booking_status import BookingStatus
from src.service.check_in.domain.value_object.operator_identity import OperatorIdentity
from src.service.check_in.driven_adapter.qr.hmac_qr_ticket_codec_impl import (
    HmacQrTicketCodecImpl,
)
from src.service.check_in.driven_adapter.repo.in_memory_check_in_store import (
    InMemoryCheckInStore,
)
from src.service.check_in.driving_adapter.http_controller.auth.jwt_auth import JwtAuth
from test.service.check_in.helpers import NOW, OPERATOR_ID, make_booking, seeded_store
from test.test_main import app


@pytest.fixture
def store() -> InMemoryCheckInStore:
    return seeded_store(
        make_booking(),
        make_booking(booking_id='B2', ticket_id='EVT-2', status=BookingStatus.CANCELLED),
    )


@pytest.fixture
def qr_codec() -> HmacQrTicketCodecImpl:
    return HmacQrTicketCodecImpl(secret_key='api-test-secret', signature_required=True)


@pytest.fixture
def client(store: InMemoryCheckInStore, qr_codec: HmacQrTicketCodecImpl) -> Iterator[TestClient]:
    attempt_use_case = CheckInAttemptUseCase(
        resolve_ticket_use_case=ResolveTicketUseCase(query_repo=store, qr_codec=qr_codec),
        commit_check_in_use_case=CommitCheckInUseCase(command_repo=store, query_repo=store),
        timeout_seconds=1.0,
        transient_retries=1,
        window_hours=4,
        display_timezone='UTC',
        clock=lambda: NOW,
    )
    container.check_in_attempt_use_case.override(providers.Object(attempt_use_case))
    container.check_in_query_repo.override(providers.Object(store))

    with TestClient(app) as test_client:
        yield test_client

    container.check_in_attempt_use_case.reset_override()
    container.check_in_query_repo.reset_override()
    container.reset_singletons()


def _auth_headers(role: str, operator_id: str = OPERATOR_ID) -> dict[str, str]:
    token = JwtAuth().create_jwt_token(
        OperatorIdentity(id=operator_id, name='Gate Staff', role=role)
    )
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def staff_headers() -> dict[str, str]:
    return _auth_headers('admin')


@pytest.fixture
def student_headers() -> dict[str, str]:
    return _auth_headers('student', operator_id='student-42')
