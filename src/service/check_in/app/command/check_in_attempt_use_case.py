"""
One check-in attempt: resolve -> validate -> commit.

Each persistence round trip is bounded by a timeout. Timeouts and
infrastructure errors are retried a fixed number of times and then surface as
infra_transient, which the operator can retry by hand; they are never reported
as a business failure such as already_checked_in.
"""

from datetime import datetime, timezone
import time
from typing import Awaitable, Callable, Optional, TypeVar

import anyio
import attrs
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import InfrastructureError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.check_in_metrics import metrics
from src.service.check_in.app.command.commit_check_in_use_case import CommitCheckInUseCase
from src.service.check_in.app.command.resolve_ticket_use_case import ResolveTicketUseCase
from src.service.check_in.app.dto.check_in_result import (
    CheckInFailure,
    CheckInResult,
    CheckInSuccess,
)
from src.service.check_in.app.dto.ticket_error_display import (
    build_ticket_error_display,
    resolve_display_timezone,
)
from src.service.check_in.domain.booking_validator import Valid, validate_for_check_in
from src.service.check_in.domain.entity.booking_entity import Booking
from src.service.check_in.domain.enum.check_in_method import CheckInMethod
from src.service.check_in.domain.value_object.check_in_error import (
    AlreadyCheckedIn,
    CheckInError,
    InfraTransient,
)
from src.service.check_in.domain.value_object.resolved_ticket import ResolvedTicket


T = TypeVar('T')

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CheckInAttemptUseCase:
    def __init__(
        self,
        *,
        resolve_ticket_use_case: ResolveTicketUseCase,
        commit_check_in_use_case: CommitCheckInUseCase,
        timeout_seconds: Optional[float] = None,
        transient_retries: Optional[int] = None,
        window_hours: Optional[float] = None,
        display_timezone: Optional[str] = None,
        clock: Clock = utc_now,
    ) -> None:
        self.resolve_ticket_use_case = resolve_ticket_use_case
        self.commit_check_in_use_case = commit_check_in_use_case
        self.timeout_seconds = timeout_seconds or settings.CHECK_IN_OPERATION_TIMEOUT_SECONDS
        self.transient_retries = (
            transient_retries if transient_retries is not None else settings.CHECK_IN_TRANSIENT_RETRIES
        )
        self.window_hours = window_hours or settings.CHECK_IN_WINDOW_HOURS
        self.display_tz = resolve_display_timezone(display_timezone or settings.DISPLAY_TIMEZONE)
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def execute(
        self,
        *,
        raw_input: str,
        operator_id: Optional[str],
        method: CheckInMethod,
        scoped_event_id: Optional[str] = None,
    ) -> CheckInResult:
        started = time.perf_counter()
        with self.tracer.start_as_current_span(
            'use_case.check_in_attempt',
            attributes={
                'check_in.method': method.value,
                'check_in.scoped_event_id': scoped_event_id or '',
            },
        ) as span:
            outcome = await self._run(
                raw_input=raw_input,
                operator_id=operator_id,
                method=method,
                scoped_event_id=scoped_event_id,
            )

            if isinstance(outcome, CheckInSuccess):
                result: CheckInResult = outcome
                outcome_label = 'success'
            else:
                result = CheckInFailure(
                    error=outcome,
                    display=build_ticket_error_display(
                        outcome, now=self.clock(), tz=self.display_tz
                    ),
                )
                outcome_label = outcome.kind.value
                Logger.base.info(f'🚫 [CHECK-IN] {method} rejected: {outcome_label}')

            span.set_attribute('check_in.outcome', outcome_label)
            metrics.record_attempt(
                method=method.value,
                outcome=outcome_label,
                duration=time.perf_counter() - started,
            )
            return result

    async def _run(
        self,
        *,
        raw_input: str,
        operator_id: Optional[str],
        method: CheckInMethod,
        scoped_event_id: Optional[str],
    ) -> CheckInSuccess | CheckInError:
        resolution = await self._with_retry(
            'resolve',
            lambda _attempt: self.resolve_ticket_use_case.resolve(
                raw_input=raw_input, now=self.clock()
            ),
        )
        if not isinstance(resolution, ResolvedTicket):
            return resolution

        decision = validate_for_check_in(
            resolution,
            scoped_event_id=scoped_event_id,
            now=self.clock(),
            default_window_hours=self.window_hours,
        )
        if not isinstance(decision, Valid):
            return decision

        first_try_at = self.clock()
        committed = await self._with_retry(
            'commit',
            lambda attempt: self.commit_check_in_use_case.commit(
                booking_id=resolution.booking.id,
                operator_id=operator_id,
                method=method,
                now=self.clock(),
                recover_own_write_since=first_try_at if attempt > 1 else None,
            ),
        )

        if isinstance(committed, Booking):
            return CheckInSuccess(booking=committed, user=resolution.user, event=resolution.event)
        if isinstance(committed, AlreadyCheckedIn):
            metrics.record_commit_conflict()
            return attrs.evolve(committed, user_name=resolution.user.name or None)
        return committed

    async def _with_retry(
        self, operation: str, call: Callable[[int], Awaitable[T]]
    ) -> T | InfraTransient:
        """
        Run `call` under the operation timeout, retrying timeouts and
        InfrastructureError. `call` receives the 1-based attempt number.
        """
        detail = ''
        for attempt in range(1, self.transient_retries + 2):
            try:
                with anyio.fail_after(self.timeout_seconds):
                    return await call(attempt)
            except TimeoutError:
                detail = f'{operation} timed out after {self.timeout_seconds}s'
                metrics.record_transient_failure(operation=operation, reason='timeout')
            except InfrastructureError as e:
                detail = e.message
                metrics.record_transient_failure(operation=operation, reason='error')

            Logger.base.warning(
                f'⏳ [CHECK-IN] {operation} attempt {attempt}/{self.transient_retries + 1} '
                f'failed: {detail}'
            )

        return InfraTransient(detail=detail)
