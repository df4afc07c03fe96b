from datetime import datetime
from typing import Optional

from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.check_in.app.dto.check_in_write_result import CheckInWriteOutcome
from src.service.check_in.app.interface.i_check_in_command_repo import ICheckInCommandRepo
from src.service.check_in.app.interface.i_check_in_query_repo import ICheckInQueryRepo
from src.service.check_in.domain.booking_validator import classify_booking_status
from src.service.check_in.domain.entity.booking_entity import Booking
from src.service.check_in.domain.enum.check_in_method import CheckInMethod
from src.service.check_in.domain.value_object.check_in_error import (
    AlreadyCheckedIn,
    AuthRequired,
    CheckInError,
    NotFound,
)


class CommitCheckInUseCase:
    """
    Check-In Committer - exactly-once confirmed -> checked_in

    The transition is a single conditional write on the store. Losing the
    race is not an infrastructure problem: the booking is re-read and the
    conflict surfaces as the business error matching its current state,
    usually already_checked_in with the winner's timestamp.

    Conflicts are never retried here. InfrastructureError propagates to the
    caller, which owns the retry policy.
    """

    def __init__(
        self, *, command_repo: ICheckInCommandRepo, query_repo: ICheckInQueryRepo
    ) -> None:
        self.command_repo = command_repo
        self.query_repo = query_repo
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def commit(
        self,
        *,
        booking_id: str,
        operator_id: Optional[str],
        method: CheckInMethod,
        now: datetime,
        recover_own_write_since: Optional[datetime] = None,
    ) -> Booking | CheckInError:
        """
        Args:
            recover_own_write_since: Set on a retry after an infrastructure
                failure. A conflict caused by this operator's own earlier write
                (committed after this time, acknowledgement lost) is treated
                as success.
        """
        if not operator_id or not operator_id.strip():
            Logger.base.warning(f'🔒 [COMMIT] Refusing check-in of {booking_id}: no operator')
            return AuthRequired()

        with self.tracer.start_as_current_span(
            'use_case.commit_check_in',
            attributes={'booking.id': booking_id, 'check_in.method': method.value},
        ):
            result = await self.command_repo.check_in_if_confirmed(
                booking_id=booking_id,
                operator_id=operator_id,
                method=method,
                checked_in_at=now,
            )

            match result.outcome:
                case CheckInWriteOutcome.COMMITTED:
                    assert result.booking is not None
                    Logger.base.info(
                        f'✅ [COMMIT] Booking {booking_id} checked in by {operator_id} via {method}'
                    )
                    return result.booking
                case CheckInWriteOutcome.NOT_FOUND:
                    return NotFound(lookup_key=booking_id)
                case CheckInWriteOutcome.CONFLICT:
                    return await self._resolve_conflict(
                        booking_id=booking_id,
                        conflicting=result.booking,
                        operator_id=operator_id,
                        recover_own_write_since=recover_own_write_since,
                    )

    async def _resolve_conflict(
        self,
        *,
        booking_id: str,
        conflicting: Optional[Booking],
        operator_id: str,
        recover_own_write_since: Optional[datetime],
    ) -> Booking | CheckInError:
        current = await self.query_repo.get_booking_by_id(booking_id=booking_id) or conflicting
        if current is None:
            return NotFound(lookup_key=booking_id)

        if (
            recover_own_write_since is not None
            and current.is_checked_in
            and current.checked_in_by == operator_id
            and current.checked_in_at is not None
            and current.checked_in_at >= recover_own_write_since
        ):
            Logger.base.info(f'🔁 [COMMIT] Recovered own earlier write for booking {booking_id}')
            return current

        Logger.base.info(
            f'⚔️ [COMMIT] Conditional write lost for booking {booking_id} (now {current.status})'
        )
        return classify_booking_status(current) or AlreadyCheckedIn(
            previous_scan_at=current.checked_in_at
        )
