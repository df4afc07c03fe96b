"""
Check-In Command Repository Implementation (PostgreSQL)

The confirmed -> checked_in transition and its log entry are one CTE
statement. The UPDATE's `status = 'confirmed'` predicate is the
compare-and-set: PostgreSQL row locking lets exactly one of any number of
concurrent statements match, the others update zero rows.
"""

from datetime import datetime

import uuid_utils

from src.platform.database.asyncpg_setting import asyncpg_connection
from src.platform.logging.loguru_io import Logger
from src.service.check_in.app.dto.check_in_write_result import CheckInWriteResult
from src.service.check_in.app.interface.i_check_in_command_repo import ICheckInCommandRepo
from src.service.check_in.domain.enum.check_in_method import CheckInMethod
from src.service.check_in.driven_adapter.repo.check_in_row_mapper import (
    BOOKING_COLUMNS,
    row_to_booking,
)


class CheckInCommandRepoImpl(ICheckInCommandRepo):
    @Logger.io
    async def check_in_if_confirmed(
        self,
        *,
        booking_id: str,
        operator_id: str,
        method: CheckInMethod,
        checked_in_at: datetime,
    ) -> CheckInWriteResult:
        log_id = uuid_utils.uuid7()

        async with asyncpg_connection() as conn:
            row = await conn.fetchrow(
                f"""
                WITH checked_in AS (
                    UPDATE booking
                    SET status = 'checked_in',
                        checked_in_at = $3,
                        checked_in_by = $4,
                        check_in_method = $5
                    WHERE id = $2 AND status = 'confirmed'
                    RETURNING {BOOKING_COLUMNS}
                ),
                logged AS (
                    INSERT INTO check_in_log
                        (id, booking_id, event_id, user_id, checked_in_by, method, checked_in_at)
                    SELECT $1::uuid, id, event_id, user_id,
                           checked_in_by, check_in_method, checked_in_at
                    FROM checked_in
                )
                SELECT {BOOKING_COLUMNS} FROM checked_in
                """,
                log_id,
                booking_id,
                checked_in_at,
                operator_id,
                method.value,
            )
            if row:
                Logger.base.info(f'🎫 [CHECK-IN] booking {booking_id} -> checked_in (log {log_id})')
                return CheckInWriteResult.committed(row_to_booking(row))

            # Zero rows: either someone else won or the booking does not exist
            current = await conn.fetchrow(
                f'SELECT {BOOKING_COLUMNS} FROM booking WHERE id = $1',
                booking_id,
            )

        if current is None:
            return CheckInWriteResult.not_found()
        return CheckInWriteResult.conflict(row_to_booking(current))
