"""
ConversationKey Value Object - Order-independent identity of a direct conversation.
"""

from __future__ import annotations

from dataclasses import dataclass

SEPARATOR = "|"


@dataclass(frozen=True)
class ConversationKey:
    # Participants are held separately; SEPARATOR may legally appear in an email local part
    first: str
    second: str

    def __post_init__(self):
        if not self.first or not self.second:
            raise ValueError(f"Invalid conversation key: {self.first!r}, {self.second!r}")
        if self.first > self.second:
            raise ValueError(f"Conversation key is not sorted: {self.first}, {self.second}")

    @classmethod
    def for_pair(cls, first_email: str, second_email: str) -> ConversationKey:
        """Same two participants always map to the same key, whoever initiates."""
        if not first_email or not second_email:
            raise ValueError("Both participant emails are required")
        return cls(*sorted([first_email, second_email]))

    @property
    def value(self) -> str:
        """Flat form used for channel names and cache keys."""
        return f"{self.first}{SEPARATOR}{self.second}"

    @property
    def participants(self) -> tuple[str, str]:
        return self.first, self.second

    def includes(self, email: str) -> bool:
        return email in self.participants

    def __str__(self) -> str:
        return self.value
