from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.check_in.app.dto.check_in_stats import CheckInStats
from src.service.check_in.app.interface.i_check_in_query_repo import ICheckInQueryRepo
from src.service.check_in.domain.enum.booking_status import BookingStatus


class GetCheckInStatsUseCase:
    def __init__(self, check_in_query_repo: ICheckInQueryRepo) -> None:
        self.check_in_query_repo = check_in_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        check_in_query_repo: ICheckInQueryRepo = Depends(Provide[Container.check_in_query_repo]),
    ) -> Self:
        return cls(check_in_query_repo=check_in_query_repo)

    @Logger.io
    async def get_stats(self, event_id: str) -> CheckInStats:
        """Attendance counts for the scan page header"""
        event = await self.check_in_query_repo.get_event_by_id(event_id=event_id)
        if not event:
            raise NotFoundError('Event not found')

        counts = await self.check_in_query_repo.count_bookings_by_status(event_id=event_id)
        stats = CheckInStats(
            event_id=event.id,
            event_title=event.title,
            total=sum(counts.values()),
            confirmed=counts.get(BookingStatus.CONFIRMED, 0),
            checked_in=counts.get(BookingStatus.CHECKED_IN, 0),
            cancelled=counts.get(BookingStatus.CANCELLED, 0),
            waitlisted=counts.get(BookingStatus.WAITLISTED, 0),
        )

        Logger.base.info(
            f'📊 [STATS] Event {event_id}: {stats.checked_in}/{stats.total} checked in'
        )
        return stats
