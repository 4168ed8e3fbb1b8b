"""
Change Feed Port - Live insert/update/delete events for message rows.
Implementation: orgchat/infrastructure/realtime/redis_change_feed.py
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from orgchat.domain.entities.message import Message
from orgchat.domain.value_objects.conversation_key import ConversationKey

MessageCallback = Callable[[Message], None]
DeleteCallback = Callable[[str], None]


class ChangeKind(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    kind: ChangeKind
    new: Optional[Message] = None  # INSERT / UPDATE
    old_id: Optional[str] = None  # DELETE

    @property
    def conversation_key(self) -> Optional[ConversationKey]:
        return self.new.conversation_key if self.new else None


class Subscription(ABC):
    """Handle returned by ChangeFeed.subscribe; passed back to unsubscribe."""

    key: ConversationKey

    @property
    @abstractmethod
    def closed(self) -> bool: ...


class ChangeFeed(ABC):
    @abstractmethod
    async def subscribe(
        self,
        key: ConversationKey,
        on_insert: MessageCallback,
        on_update: MessageCallback,
        on_delete: DeleteCallback,
    ) -> Subscription:
        """Returns once the subscription handshake has completed."""
        ...

    @abstractmethod
    async def unsubscribe(self, subscription: Subscription) -> None:
        """After this returns no callback of the subscription fires again."""
        ...

    @abstractmethod
    async def publish(self, event: ChangeEvent, key: ConversationKey) -> None: ...
