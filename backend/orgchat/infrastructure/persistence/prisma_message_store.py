"""
Prisma Message Store Implementation.

Prisma Message Model (from prisma/schema.prisma):
    model Message {
        id               String   @id @default(uuid())
        sender_email     String
        receiver_email   String
        sender_role      String
        message          String
        is_deleted       Boolean  @default(false)
        is_forwarded     Boolean  @default(false)
        reply_to_message String?
        reply_to_sender  String?
        client_id        String?
        created_at       DateTime @default(now())
        @@map("messages")
    }

Writes are published to the change feed (when one is wired in) after the row
is committed, so every subscriber of the pair's channel sees them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from orgchat.application.dto.message import MessageRecord
from orgchat.domain.entities.message import Message, MessageDraft
from orgchat.domain.exceptions import (
    HistoryLoadError,
    MutationPersistError,
    SendPersistError,
)
from orgchat.domain.ports.change_feed import ChangeEvent, ChangeFeed, ChangeKind
from orgchat.domain.ports.message_store import MessageStore

if TYPE_CHECKING:
    from prisma import Prisma

logger = logging.getLogger(__name__)

# Columns a patch may touch after creation
MUTABLE_FIELDS = frozenset({"message", "is_deleted"})


class PrismaMessageStore(MessageStore):
    """
    Prisma implementation of MessageStore.

    Handles persistence of Message entities to PostgreSQL via Prisma.
    """

    def __init__(self, prisma: Prisma, change_feed: Optional[ChangeFeed] = None):
        """
        Args:
            prisma: Connected Prisma client (injected by DI container)
            change_feed: Where committed writes are announced; None disables it
        """
        self._prisma = prisma
        self._change_feed = change_feed

    def _to_entity(self, record: Any) -> Message:
        return MessageRecord.model_validate(record).to_entity()

    async def query_pair(self, first_email: str, second_email: str) -> list[Message]:
        try:
            records = await self._prisma.message.find_many(
                where={
                    "OR": [
                        {"sender_email": first_email, "receiver_email": second_email},
                        {"sender_email": second_email, "receiver_email": first_email},
                    ]
                },
                order={"created_at": "asc"},
            )
        except Exception as e:
            raise HistoryLoadError(f"Failed to query messages: {e}", cause=e) from e
        return [self._to_entity(r) for r in records]

    async def insert(self, draft: MessageDraft) -> Message:
        try:
            record = await self._prisma.message.create(
                data={
                    "sender_email": draft.sender_email,
                    "receiver_email": draft.receiver_email,
                    "sender_role": draft.sender_role.value,
                    "message": draft.message,
                    "is_deleted": draft.is_deleted,
                    "is_forwarded": draft.is_forwarded,
                    "reply_to_message": draft.reply_to_message,
                    "reply_to_sender": draft.reply_to_sender,
                    "client_id": draft.client_id,
                }
            )
        except Exception as e:
            raise SendPersistError(f"Failed to insert message: {e}", cause=e) from e

        message = self._to_entity(record)
        await self._announce(ChangeEvent(kind=ChangeKind.INSERT, new=message))
        return message

    async def update(self, message_id: str, patch: dict[str, Any]) -> None:
        unknown = set(patch) - MUTABLE_FIELDS
        if unknown or not patch:
            raise MutationPersistError(f"Invalid patch fields: {sorted(unknown) or 'empty'}")
        try:
            record = await self._prisma.message.update(where={"id": message_id}, data=patch)
        except Exception as e:
            raise MutationPersistError(f"Failed to update message {message_id}: {e}", cause=e) from e
        if record is None:
            raise MutationPersistError(f"Message {message_id} not found")

        await self._announce(ChangeEvent(kind=ChangeKind.UPDATE, new=self._to_entity(record)))

    async def _announce(self, event: ChangeEvent) -> None:
        if self._change_feed is None:
            return
        # The row is committed; a lost announcement must not fail the write
        try:
            await self._change_feed.publish(event, event.conversation_key)
        except Exception as e:
            logger.warning(f"[PrismaMessageStore] Could not publish {event.kind.value}: {e}")
