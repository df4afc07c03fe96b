from datetime import datetime
from typing import Optional

import attrs


def validate_aware_datetime(
    instance: object, attribute: attrs.Attribute, value: Optional[datetime]
) -> None:
    """Refuse naive timestamps; window checks compare them with an aware now."""
    if value is not None and (value.tzinfo is None or value.utcoffset() is None):
        raise ValueError(f'{type(instance).__name__}.{attribute.name} must be timezone-aware')


@attrs.define(frozen=True)
class CheckInWindow:
    """[start, end] interval during which an event's tickets may be checked in."""

    start: datetime = attrs.field(validator=validate_aware_datetime)
    end: datetime = attrs.field(validator=validate_aware_datetime)

    def has_ended(self, now: datetime) -> bool:
        return now > self.end
