from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.check_in.app.command.check_in_attempt_use_case import CheckInAttemptUseCase
from src.service.check_in.app.query.get_check_in_stats_use_case import GetCheckInStatsUseCase
from src.service.check_in.domain.enum.check_in_method import CheckInMethod
from src.service.check_in.domain.value_object.operator_identity import OperatorIdentity
from src.service.check_in.driving_adapter.http_controller.auth.jwt_auth import JwtAuth
from src.service.check_in.driving_adapter.http_controller.schema.check_in_schema import (
    CheckInResultResponse,
    CheckInStatsResponse,
    ManualCheckInRequest,
    ScanCheckInRequest,
)


# === API Router ===

router = APIRouter()

bearer_scheme = HTTPBearer(auto_error=False)


@inject
async def get_current_operator(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> OperatorIdentity:
    """Operator from the bearer token (stateless, no DB query); only staff roles may check in."""
    operator = jwt_auth.get_operator_from_jwt(credentials.credentials if credentials else None)
    if not operator.role.can_check_in:
        raise ForbiddenError('Only event staff can check in attendees')
    return operator


# Classified check-in failures are results, not HTTP errors: both routes
# answer 200 with state=error so the gate UI can render them.


@router.post('/scan', response_model=CheckInResultResponse, status_code=status.HTTP_200_OK)
@Logger.io
@inject
async def check_in_by_scan(
    request: ScanCheckInRequest,
    operator: OperatorIdentity = Depends(get_current_operator),
    use_case: CheckInAttemptUseCase = Depends(Provide[Container.check_in_attempt_use_case]),
) -> CheckInResultResponse:
    result = await use_case.execute(
        raw_input=request.payload,
        operator_id=operator.id,
        method=CheckInMethod.QR_SCAN,
        scoped_event_id=request.event_id,
    )
    return CheckInResultResponse.from_result(result)


@router.post('/manual', response_model=CheckInResultResponse, status_code=status.HTTP_200_OK)
@Logger.io
@inject
async def check_in_by_ticket_code(
    request: ManualCheckInRequest,
    operator: OperatorIdentity = Depends(get_current_operator),
    use_case: CheckInAttemptUseCase = Depends(Provide[Container.check_in_attempt_use_case]),
) -> CheckInResultResponse:
    result = await use_case.execute(
        raw_input=request.ticket_id,
        operator_id=operator.id,
        method=CheckInMethod.MANUAL_ENTRY,
        scoped_event_id=request.event_id,
    )
    return CheckInResultResponse.from_result(result)


@router.get('/event/{event_id}/stats', response_model=CheckInStatsResponse)
@Logger.io
async def get_event_check_in_stats(
    event_id: str,
    operator: OperatorIdentity = Depends(get_current_operator),
    use_case: GetCheckInStatsUseCase = Depends(GetCheckInStatsUseCase.depends),
) -> CheckInStatsResponse:
    stats = await use_case.get_stats(event_id)
    return CheckInStatsResponse.from_stats(stats)
