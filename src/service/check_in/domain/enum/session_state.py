"""Scanner session state machine enums"""

from enum import StrEnum


class SessionState(StrEnum):
    IDLE = 'idle'
    PROCESSING = 'processing'
    SUCCESS = 'success'
    ERROR = 'error'


class InputMode(StrEnum):
    CAMERA = 'camera'
    MANUAL = 'manual'


class OperatorAction(StrEnum):
    SCAN_NEXT = 'scan_next'
    TRY_AGAIN = 'try_again'
    MANUAL_ENTRY = 'manual_entry'
    DISMISS = 'dismiss'
