"""
In-process check-in store.

Backs both repository interfaces for single-instance gates and local runs
(CHECK_IN_REPO_BACKEND=memory). The compare-and-set runs under an
asyncio.Lock, so concurrent check-ins of one booking from the same process
still commit at most once.
"""

import asyncio
from datetime import datetime
from typing import Dict, List, Optional

import attrs
import uuid_utils

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.check_in.app.dto.check_in_write_result import CheckInWriteResult
from src.service.check_in.app.interface.i_check_in_command_repo import ICheckInCommandRepo
from src.service.check_in.app.interface.i_check_in_query_repo import ICheckInQueryRepo
from src.service.check_in.domain.entity.booking_entity import Booking
from src.service.check_in.domain.entity.event_entity import EventEntity
from src.service.check_in.domain.entity.user_entity import UserEntity
from src.service.check_in.domain.enum.booking_status import BookingStatus
from src.service.check_in.domain.enum.check_in_method import CheckInMethod


@attrs.define(frozen=True)
class CheckInLogEntry:
    id: str
    booking_id: str
    event_id: str
    user_id: str
    checked_in_by: str
    method: CheckInMethod
    checked_in_at: datetime


class InMemoryCheckInStore(ICheckInQueryRepo, ICheckInCommandRepo):
    def __init__(self) -> None:
        self._bookings: Dict[str, Booking] = {}
        self._booking_ids_by_ticket: Dict[str, str] = {}
        self._events: Dict[str, EventEntity] = {}
        self._users: Dict[str, UserEntity] = {}
        self._lock = asyncio.Lock()
        self.check_in_logs: List[CheckInLogEntry] = []

    # ========== Seeding ==========

    def add_user(self, user: UserEntity) -> None:
        self._users[user.id] = user

    def add_event(self, event: EventEntity) -> None:
        self._events[event.id] = event

    def add_booking(self, booking: Booking) -> None:
        owner = self._booking_ids_by_ticket.get(booking.ticket_id)
        if owner is not None and owner != booking.id:
            raise DomainError(f'Ticket code {booking.ticket_id} already belongs to booking {owner}')
        self._bookings[booking.id] = booking
        self._booking_ids_by_ticket[booking.ticket_id] = booking.id

    # ========== Reads ==========

    async def get_booking_by_id(self, *, booking_id: str) -> Booking | None:
        return self._bookings.get(booking_id)

    async def get_booking_by_ticket_id(self, *, ticket_id: str) -> Booking | None:
        booking_id = self._booking_ids_by_ticket.get(ticket_id)
        return self._bookings.get(booking_id) if booking_id else None

    async def get_event_by_id(self, *, event_id: str) -> EventEntity | None:
        return self._events.get(event_id)

    async def get_user_by_id(self, *, user_id: str) -> UserEntity | None:
        return self._users.get(user_id)

    async def count_bookings_by_status(self, *, event_id: str) -> Dict[BookingStatus, int]:
        counts = {status: 0 for status in BookingStatus}
        for booking in self._bookings.values():
            if booking.event_id == event_id:
                counts[booking.status] += 1
        return counts

    # ========== Conditional write ==========

    @Logger.io
    async def check_in_if_confirmed(
        self,
        *,
        booking_id: str,
        operator_id: str,
        method: CheckInMethod,
        checked_in_at: datetime,
    ) -> CheckInWriteResult:
        async with self._lock:
            current: Optional[Booking] = self._bookings.get(booking_id)
            if current is None:
                return CheckInWriteResult.not_found()
            if current.status != BookingStatus.CONFIRMED:
                return CheckInWriteResult.conflict(current)

            updated = current.mark_as_checked_in(
                operator_id=operator_id, method=method, checked_in_at=checked_in_at
            )
            self._bookings[booking_id] = updated
            self.check_in_logs.append(
                CheckInLogEntry(
                    id=str(uuid_utils.uuid7()),
                    booking_id=updated.id,
                    event_id=updated.event_id,
                    user_id=updated.user_id,
                    checked_in_by=operator_id,
                    method=method,
                    checked_in_at=checked_in_at,
                )
            )
            return CheckInWriteResult.committed(updated)
