"""
Contact Entity - A directory member the current user may message.
"""

from dataclasses import dataclass
from typing import Optional

from orgchat.domain.value_objects.role import Role


@dataclass(frozen=True)
class Contact:
    id: str
    name: str
    email: str  # identity key within the directory
    role: Role
    domain: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email

    @property
    def role_label(self) -> str:
        return self.role.label
