"""
UserEmail Value Object - A participant address as stored on member and message rows.

The address is kept verbatim since rows are matched by exact string; only its
shape is checked here.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserEmail:
    value: str

    def __post_init__(self):
        if not self.value or any(ch.isspace() for ch in self.value):
            raise ValueError(f"Invalid user email: {self.value!r}")
        local, sep, domain = self.value.rpartition("@")
        if not sep or not local or not domain:
            raise ValueError(f"Invalid user email: {self.value!r}")

    @property
    def local_part(self) -> str:
        return self.value.rpartition("@")[0]

    @property
    def domain_part(self) -> str:
        """Host part, lower-cased; the local part keeps its case."""
        return self.value.rpartition("@")[2].lower()

    def __str__(self) -> str:
        return self.value
