"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.service.check_in.app.command.check_in_attempt_use_case import CheckInAttemptUseCase
from src.service.check_in.app.command.commit_check_in_use_case import CommitCheckInUseCase
from src.service.check_in.app.command.resolve_ticket_use_case import ResolveTicketUseCase
from src.service.check_in.driven_adapter.qr.hmac_qr_ticket_codec_impl import (
    HmacQrTicketCodecImpl,
)
from src.service.check_in.driven_adapter.repo.check_in_command_repo_impl import (
    CheckInCommandRepoImpl,
)
from src.service.check_in.driven_adapter.repo.check_in_query_repo_impl import (
    CheckInQueryRepoImpl,
)
from src.service.check_in.driven_adapter.repo.in_memory_check_in_store import (
    InMemoryCheckInStore,
)
from src.service.check_in.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Repositories (stateless asyncpg repos, or one shared in-memory store seeded by tests)
    in_memory_check_in_store = providers.Singleton(InMemoryCheckInStore)
    check_in_query_repo = providers.Selector(
        config_service.provided.CHECK_IN_REPO_BACKEND,
        postgres=providers.Singleton(CheckInQueryRepoImpl),
        memory=in_memory_check_in_store,
    )
    check_in_command_repo = providers.Selector(
        config_service.provided.CHECK_IN_REPO_BACKEND,
        postgres=providers.Singleton(CheckInCommandRepoImpl),
        memory=in_memory_check_in_store,
    )

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)

    # Signed QR payloads
    qr_ticket_codec = providers.Singleton(HmacQrTicketCodecImpl)

    # Check-in use cases (stateless, can be Singleton)
    resolve_ticket_use_case = providers.Singleton(
        ResolveTicketUseCase,
        query_repo=check_in_query_repo,
        qr_codec=qr_ticket_codec,
    )
    commit_check_in_use_case = providers.Singleton(
        CommitCheckInUseCase,
        command_repo=check_in_command_repo,
        query_repo=check_in_query_repo,
    )
    check_in_attempt_use_case = providers.Singleton(
        CheckInAttemptUseCase,
        resolve_ticket_use_case=resolve_ticket_use_case,
        commit_check_in_use_case=commit_check_in_use_case,
        timeout_seconds=config_service.provided.CHECK_IN_OPERATION_TIMEOUT_SECONDS,
        transient_retries=config_service.provided.CHECK_IN_TRANSIENT_RETRIES,
        window_hours=config_service.provided.CHECK_IN_WINDOW_HOURS,
        display_timezone=config_service.provided.DISPLAY_TIMEZONE,
    )


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
