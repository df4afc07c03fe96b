import attrs

from src.service.check_in.domain.enum.operator_role import OperatorRole


@attrs.define(frozen=True)
class OperatorIdentity:
    """Gate-staff member performing check-ins, as asserted by their token."""

    id: str
    name: str
    role: OperatorRole = attrs.field(converter=OperatorRole)
