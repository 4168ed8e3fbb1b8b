"""
Message Store Port - Persistence boundary for message rows.
Implementation: orgchat/infrastructure/persistence/prisma_message_store.py
"""

from abc import ABC, abstractmethod
from typing import Any

from orgchat.domain.entities.message import Message, MessageDraft


class MessageStore(ABC):
    @abstractmethod
    async def query_pair(self, first_email: str, second_email: str) -> list[Message]:
        """All messages between the two members, either direction, oldest first."""
        ...

    @abstractmethod
    async def insert(self, draft: MessageDraft) -> Message:
        """Persist a new message; the store assigns `id` and `created_at`."""
        ...

    @abstractmethod
    async def update(self, message_id: str, patch: dict[str, Any]) -> None:
        """Apply an edit (`message`) or soft delete (`is_deleted`) patch."""
        ...
