"""
Check-In Query Repository Interface

Read side of the check-in store: bookings by id or ticket code, and the
attendee / event records a booking points at.
"""

from abc import ABC, abstractmethod
from typing import Dict

from src.service.check_in.domain.entity.booking_entity import Booking
from src.service.check_in.domain.entity.event_entity import EventEntity
from src.service.check_in.domain.entity.user_entity import UserEntity
from src.service.check_in.domain.enum.booking_status import BookingStatus


class ICheckInQueryRepo(ABC):
    """
    All methods return None for a missing record and raise
    InfrastructureError when the store cannot be reached.
    """

    @abstractmethod
    async def get_booking_by_id(self, *, booking_id: str) -> Booking | None:
        pass

    @abstractmethod
    async def get_booking_by_ticket_id(self, *, ticket_id: str) -> Booking | None:
        """Secondary-index lookup on the human-presentable ticket code"""
        pass

    @abstractmethod
    async def get_event_by_id(self, *, event_id: str) -> EventEntity | None:
        pass

    @abstractmethod
    async def get_user_by_id(self, *, user_id: str) -> UserEntity | None:
        pass

    @abstractmethod
    async def count_bookings_by_status(self, *, event_id: str) -> Dict[BookingStatus, int]:
        """
        Count an event's bookings per status

        Returns:
            Mapping with an entry for every BookingStatus (zero when absent)
        """
        pass
