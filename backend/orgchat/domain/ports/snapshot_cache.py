"""
Snapshot Cache Port - Last successfully loaded history of a conversation.
Implementation: orgchat/infrastructure/cache/redis_snapshot_cache.py
"""

from abc import ABC, abstractmethod
from typing import Optional

from orgchat.domain.entities.message import Message
from orgchat.domain.value_objects.conversation_key import ConversationKey


class ConversationSnapshotCache(ABC):
    @abstractmethod
    async def read(
        self, owner_email: str, key: ConversationKey
    ) -> Optional[list[Message]]: ...

    @abstractmethod
    async def write(
        self, owner_email: str, key: ConversationKey, messages: list[Message]
    ) -> None: ...
