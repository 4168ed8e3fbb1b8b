"""
Role Value Object - Closed set of organization roles.
"""

from enum import Enum


class Role(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    WORKER = "worker"

    @classmethod
    def parse(cls, value: "str | Role") -> "Role":
        """Parse a role string, accepting the legacy "superadmin" spelling."""
        if isinstance(value, Role):
            return value
        normalized = (value or "").strip().lower()
        if normalized == "superadmin":
            return cls.SUPER_ADMIN
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Invalid role: {value}") from None

    @property
    def table(self) -> str:
        """Directory table holding members of this role."""
        return self.value

    @property
    def label(self) -> str:
        return _LABELS[self]

    def __str__(self) -> str:
        return self.value


_LABELS = {
    Role.SUPER_ADMIN: "Super Admin",
    Role.ADMIN: "Admin",
    Role.WORKER: "Worker",
}
