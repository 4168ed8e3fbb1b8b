"""
ForwardMessage Command - Send a copy of a message to another contact.

Forwarding is not optimistic: nothing is added to the local list. When the
target happens to be the open conversation the realtime INSERT renders it.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from orgchat.application.common.interfaces import Command, CommandHandler
from orgchat.domain.entities.contact import Contact
from orgchat.domain.entities.identity import Identity
from orgchat.domain.entities.message import Message, MessageDraft, new_client_id
from orgchat.domain.exceptions import SendPersistError
from orgchat.domain.ports.message_store import MessageStore
from orgchat.domain.services.permission_matrix import can_message
from orgchat.observability.metrics import MUTATIONS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ForwardMessageCommand(Command[Optional[Message]]):
    message: Message
    target: Contact


class ForwardMessageHandler(CommandHandler[Optional[Message]]):
    def __init__(self, identity: Identity, store: MessageStore):
        self._identity = identity
        self._store = store

    async def execute(self, command: ForwardMessageCommand) -> Optional[Message]:
        source, target = command.message, command.target
        if source.is_deleted:
            return self._rejected(source, "message is deleted")
        if not can_message(self._identity, target):
            return self._rejected(source, f"not allowed to message {target.email}")

        draft = MessageDraft(
            sender_email=self._identity.email,
            receiver_email=target.email,
            sender_role=self._identity.role,
            message=source.message,
            client_id=new_client_id(),
            is_forwarded=True,
        )
        try:
            record = await self._store.insert(draft)
        except Exception as e:
            error = e if isinstance(e, SendPersistError) else SendPersistError(str(e), cause=e)
            logger.error(f"[forward] Persist failed for {source.id}: {error.message}")
            MUTATIONS.labels(operation="forward", outcome="failed").inc()
            return None

        logger.info(f"[forward] {source.id} forwarded to {target.email} as {record.id}")
        MUTATIONS.labels(operation="forward", outcome="persisted").inc()
        return record

    def _rejected(self, source: Message, reason: str) -> None:
        logger.info(f"[forward] Rejected {source.id}: {reason}")
        MUTATIONS.labels(operation="forward", outcome="rejected").inc()
        return None
