import attrs


@attrs.define(frozen=True)
class CheckInStats:
    event_id: str
    event_title: str
    total: int
    confirmed: int
    checked_in: int
    cancelled: int
    waitlisted: int

    @property
    def check_in_rate(self) -> float:
        """Checked-in share of admissible (confirmed + checked-in) bookings"""
        admissible = self.confirmed + self.checked_in
        return round(self.checked_in / admissible, 4) if admissible else 0.0
