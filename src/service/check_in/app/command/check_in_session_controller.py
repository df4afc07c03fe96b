"""
Check-In Session Controller - one operator device's scan loop

    idle --scan / manual submit--> processing --result--> success | error
    success | error --scan_next / try_again / manual_entry / dismiss--> idle

Only one attempt is ever in flight. A scan that arrives while the session is
not idle is dropped, not queued; the scanner should poll
`is_ready_for_next_scan` and pause decoding until it is true again.

Business rules live in CheckInAttemptUseCase; this class only owns state.
"""

from typing import Optional

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.check_in_metrics import metrics
from src.service.check_in.app.command.check_in_attempt_use_case import CheckInAttemptUseCase
from src.service.check_in.app.dto.check_in_result import CheckInResult
from src.service.check_in.domain.enum.check_in_method import CheckInMethod
from src.service.check_in.domain.enum.session_state import InputMode, OperatorAction, SessionState


class CheckInSessionController:
    def __init__(
        self,
        *,
        attempt_use_case: CheckInAttemptUseCase,
        operator_id: Optional[str],
        scoped_event_id: Optional[str] = None,
        input_mode: InputMode = InputMode.CAMERA,
    ) -> None:
        self.attempt_use_case = attempt_use_case
        self.operator_id = operator_id
        self.scoped_event_id = scoped_event_id
        self._state = SessionState.IDLE
        self._input_mode = input_mode
        self._last_result: Optional[CheckInResult] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def input_mode(self) -> InputMode:
        return self._input_mode

    @property
    def last_result(self) -> Optional[CheckInResult]:
        return self._last_result

    @property
    def is_ready_for_next_scan(self) -> bool:
        return self._state == SessionState.IDLE

    async def submit_scan(self, decoded: str) -> Optional[CheckInResult]:
        """Camera path. Returns None when the scan was dropped."""
        return await self._submit(decoded, method=CheckInMethod.QR_SCAN)

    async def submit_manual_entry(self, ticket_code: str) -> Optional[CheckInResult]:
        """Text-submit path; enters processing directly like a scan."""
        return await self._submit(ticket_code, method=CheckInMethod.MANUAL_ENTRY)

    def acknowledge(self, action: OperatorAction) -> bool:
        """
        Leave success/error for idle, clearing the previous attempt.

        Returns:
            False when there is no result to acknowledge
        """
        if self._state not in (SessionState.SUCCESS, SessionState.ERROR):
            return False

        if action == OperatorAction.MANUAL_ENTRY:
            self._input_mode = InputMode.MANUAL
        elif action == OperatorAction.SCAN_NEXT:
            self._input_mode = InputMode.CAMERA

        self._last_result = None
        self._state = SessionState.IDLE
        return True

    def switch_input_mode(self, mode: InputMode) -> bool:
        if self._state == SessionState.PROCESSING:
            return False
        self._input_mode = mode
        return True

    async def _submit(self, raw_input: str, *, method: CheckInMethod) -> Optional[CheckInResult]:
        # The state flips before the first await, so a second submit from the
        # same loop always sees PROCESSING
        if self._state != SessionState.IDLE:
            Logger.base.debug(f'⏸️ [SESSION] Dropped {method} input while {self._state}')
            metrics.check_in_scans_ignored.inc()
            return None

        self._state = SessionState.PROCESSING
        self._last_result = None
        metrics.check_in_sessions_processing.inc()
        try:
            result = await self.attempt_use_case.execute(
                raw_input=raw_input,
                operator_id=self.operator_id,
                method=method,
                scoped_event_id=self.scoped_event_id,
            )
        except BaseException:
            self._state = SessionState.IDLE
            raise
        finally:
            metrics.check_in_sessions_processing.dec()

        self._last_result = result
        self._state = result.state
        return result
