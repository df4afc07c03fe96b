"""Operator Role Enum"""

from enum import StrEnum


class OperatorRole(StrEnum):
    STUDENT = 'student'
    ADMIN = 'admin'
    SUPER_ADMIN = 'super_admin'

    @property
    def can_check_in(self) -> bool:
        return self in (OperatorRole.ADMIN, OperatorRole.SUPER_ADMIN)
