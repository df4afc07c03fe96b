"""
Unit tests for operator-facing failure rendering
"""

from datetime import datetime, timedelta, timezone
import zoneinfo

import pytest

from src.service.check_in.app.dto.ticket_error_display import (
    build_ticket_error_display,
    format_scan_time,
    resolve_display_timezone,
)
from src.service.check_in.domain.enum.check_in_error_kind import CheckInErrorKind
from src.service.check_in.domain.enum.session_state import OperatorAction
from src.service.check_in.domain.value_object.check_in_error import (
    AlreadyCheckedIn,
    AuthRequired,
    Cancelled,
    Expired,
    InfraTransient,
    InvalidFormat,
    NotFound,
    Waitlist,
    WrongEvent,
)
from test.service.check_in.helpers import NOW


UTC = zoneinfo.ZoneInfo('UTC')


class TestFormatScanTime:
    def test_afternoon(self) -> None:
        assert format_scan_time(NOW, tz=UTC) == 'Oct 17, 3:04 PM'

    def test_midnight_hour_is_twelve(self) -> None:
        value = datetime(2026, 1, 5, 0, 30, tzinfo=timezone.utc)
        assert format_scan_time(value, tz=UTC) == 'Jan 5, 12:30 AM'

    def test_converts_to_display_timezone(self) -> None:
        kolkata = zoneinfo.ZoneInfo('Asia/Kolkata')
        assert format_scan_time(NOW, tz=kolkata) == 'Oct 17, 8:34 PM'


class TestBuildTicketErrorDisplay:
    def test_already_checked_in_shows_previous_scan_and_attendee(self) -> None:
        error = AlreadyCheckedIn(user_name='Asha Rao', previous_scan_at=NOW - timedelta(hours=1))

        display = build_ticket_error_display(error, now=NOW, tz=UTC)

        assert display.error_kind == CheckInErrorKind.ALREADY_CHECKED_IN
        assert display.title == 'Already Checked In'
        assert display.message == 'Asha Rao has already been checked in.'
        assert display.display_fields['previous_scan'] == 'Oct 17, 2:04 PM'
        assert display.display_fields['user_name'] == 'Asha Rao'

    def test_already_checked_in_without_timestamp_falls_back_to_today(self) -> None:
        display = build_ticket_error_display(AlreadyCheckedIn(), now=NOW, tz=UTC)

        assert display.display_fields['previous_scan'] == 'Today at 3:04 PM'
        assert 'user_name' not in display.display_fields
        assert display.message == 'This participant has already been checked in.'

    def test_wrong_event_names_the_other_event(self) -> None:
        display = build_ticket_error_display(
            WrongEvent(event_id='E2', event_title='Hackathon Finals'), now=NOW, tz=UTC
        )

        assert display.display_fields == {'event_match': 'Hackathon Finals'}

    def test_expired_shows_when_window_closed(self) -> None:
        display = build_ticket_error_display(
            Expired(window_end=NOW - timedelta(hours=6)), now=NOW, tz=UTC
        )

        assert display.reason == 'Event Completed'
        assert display.display_fields['window_closed_at'] == 'Oct 17, 9:04 AM'

    @pytest.mark.parametrize(
        'error',
        [
            InvalidFormat(),
            NotFound(),
            WrongEvent(event_id='E2', event_title=''),
            AlreadyCheckedIn(),
            Cancelled(),
            Waitlist(),
            Expired(),
            AuthRequired(),
            InfraTransient(detail='timeout'),
        ],
    )
    def test_every_kind_offers_retry_and_manual_entry(self, error) -> None:
        display = build_ticket_error_display(error, now=NOW, tz=UTC)

        assert display.error_kind == error.kind
        assert display.title
        assert display.message
        assert display.recovery_actions == (OperatorAction.TRY_AGAIN, OperatorAction.MANUAL_ENTRY)


def test_unknown_display_timezone_falls_back_to_utc() -> None:
    assert resolve_display_timezone('Not/AZone') == UTC
    assert resolve_display_timezone(None) == UTC
