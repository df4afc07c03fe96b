"""
Check-In Command Repository Interface

Write side of the check-in store. The only mutation is the
confirmed -> checked_in transition.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from src.service.check_in.app.dto.check_in_write_result import CheckInWriteResult
from src.service.check_in.domain.enum.check_in_method import CheckInMethod


class ICheckInCommandRepo(ABC):
    @abstractmethod
    async def check_in_if_confirmed(
        self,
        *,
        booking_id: str,
        operator_id: str,
        method: CheckInMethod,
        checked_in_at: datetime,
    ) -> CheckInWriteResult:
        """
        Atomically set status=checked_in (with operator, method and time) and
        append a check-in log entry, only if the booking is still confirmed.

        Must be a single compare-and-set on the store, never a read followed
        by an unconditional write.

        Returns:
            COMMITTED with the updated booking, CONFLICT with the booking as
            it currently is, or NOT_FOUND

        Raises:
            InfrastructureError: network / timeout / store failure
        """
        pass
