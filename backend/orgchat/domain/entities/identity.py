"""
Identity Entity - The signed-in member, as yielded by the auth provider.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from orgchat.domain.value_objects.role import Role
from orgchat.domain.value_objects.user_email import UserEmail


@dataclass(frozen=True)
class Identity:
    id: str
    email: str
    role: Role
    domain: Optional[str] = None

    def __post_init__(self):
        UserEmail(self.email)
        if not isinstance(self.role, Role):
            object.__setattr__(self, "role", Role.parse(self.role))

    @classmethod
    def from_auth(cls, user: Mapping[str, Any]) -> Identity:
        """Build from the auth provider's `{id, email, role, domain}` mapping."""
        return cls(
            id=str(user["id"]),
            email=user["email"],
            role=Role.parse(user["role"]),
            domain=user.get("domain") or None,
        )
