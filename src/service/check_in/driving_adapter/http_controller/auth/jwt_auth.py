"""
Operator Authentication (bearer JWT)

Stateless: the operator identity is rebuilt from the token payload without a
database query. Every failure is a 401, so a request without a verifiable
operator never reaches the committer.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from fastapi import HTTPException, status
import jwt

from src.platform.config.core_setting import settings
from src.service.check_in.domain.value_object.operator_identity import OperatorIdentity


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.token_expire_hours = 12  # one gate shift

    def create_jwt_token(self, operator: OperatorIdentity) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': operator.id,
            'exp': now + timedelta(hours=self.token_expire_hours),
            'iat': now,
            'name': operator.name,
            'role': operator.role.value,
        }

        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid token')

    def get_operator_from_jwt(self, token: Optional[str]) -> OperatorIdentity:
        if not token:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Not authenticated')

        payload = self.decode_jwt_token(token)

        operator_id = payload.get('sub')
        role = payload.get('role')
        if not isinstance(operator_id, str) or not operator_id.strip() or not role:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid token')

        try:
            return OperatorIdentity(id=operator_id, name=payload.get('name') or '', role=role)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid token')
