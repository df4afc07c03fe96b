from typing import Optional

import attrs


@attrs.define(frozen=True)
class UserEntity:
    id: str
    name: str = ''
    email: str = ''
    department: Optional[str] = None
    roll_no: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or 'This participant'
