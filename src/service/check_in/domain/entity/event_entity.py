from datetime import datetime, timedelta
from typing import Optional

import attrs

from src.service.check_in.domain.enum.event_status import EventStatus
from src.service.check_in.domain.value_object.check_in_window import (
    CheckInWindow,
    validate_aware_datetime,
)


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise ValueError(f'Event {attribute.name} cannot be empty')


@attrs.define(frozen=True)
class EventEntity:
    id: str = attrs.field(validator=_validate_non_empty_string)
    title: str
    event_date: datetime = attrs.field(validator=validate_aware_datetime)
    status: EventStatus = attrs.field(default=EventStatus.PUBLISHED, converter=EventStatus)
    venue: str = ''
    # Events store no end time; None falls back to the configured window length
    check_in_window_hours: Optional[float] = None

    def check_in_window(self, *, default_hours: float) -> CheckInWindow:
        hours = self.check_in_window_hours or default_hours
        return CheckInWindow(start=self.event_date, end=self.event_date + timedelta(hours=hours))
