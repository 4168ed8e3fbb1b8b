"""Domain entities."""

from orgchat.domain.entities.identity import Identity
from orgchat.domain.entities.contact import Contact
from orgchat.domain.entities.message import (
    Message,
    MessageDraft,
    MessageExtras,
)

__all__ = [
    "Identity",
    "Contact",
    "Message",
    "MessageDraft",
    "MessageExtras",
]
