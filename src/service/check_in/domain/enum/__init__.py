from src.service.check_in.domain.enum.booking_status import BookingStatus
from src.service.check_in.domain.enum.check_in_error_kind import CheckInErrorKind
from src.service.check_in.domain.enum.check_in_method import CheckInMethod
from src.service.check_in.domain.enum.event_status import EventStatus
from src.service.check_in.domain.enum.operator_role import OperatorRole
from src.service.check_in.domain.enum.session_state import InputMode, OperatorAction, SessionState


__all__ = [
    'BookingStatus',
    'CheckInErrorKind',
    'CheckInMethod',
    'EventStatus',
    'InputMode',
    'OperatorAction',
    'OperatorRole',
    'SessionState',
]
