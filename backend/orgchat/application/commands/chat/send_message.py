"""
SendMessage Command - Optimistic send.

Handler:
1. Reject an empty body or a missing receiver
2. Append a placeholder to the message list right away
3. Persist the draft (carrying the placeholder id as client_id)
4. Success: swap the placeholder for the stored record
5. Failure: drop the placeholder and report the error (no retry)

The realtime echo of the same insert may land before step 4; both paths go
through timeline functions that converge on a single entry.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from orgchat.application.common.interfaces import Command, CommandHandler
from orgchat.application.services.message_list import MessageList
from orgchat.domain.entities.identity import Identity
from orgchat.domain.entities.message import Message, MessageExtras
from orgchat.domain.exceptions import DomainValidationError, SendPersistError
from orgchat.domain.ports.message_store import MessageStore
from orgchat.domain.services.timeline import (
    confirm_placeholder,
    insert_ordered,
    remove_message,
)
from orgchat.observability.metrics import MESSAGES_SENT, PENDING_PLACEHOLDERS

logger = logging.getLogger(__name__)


@dataclass
class SendMessageResult:
    sent: bool
    message: Optional[Message] = None
    error: Optional[Exception] = None


@dataclass(frozen=True)
class SendMessageCommand(Command[SendMessageResult]):
    body: str
    receiver_email: Optional[str]
    extras: Optional[MessageExtras] = None


class OptimisticMessagePipeline(CommandHandler[SendMessageResult]):
    def __init__(self, identity: Identity, store: MessageStore, messages: MessageList):
        self._identity = identity
        self._store = store
        self._messages = messages

    async def execute(self, command: SendMessageCommand) -> SendMessageResult:
        body = (command.body or "").strip()
        if not body:
            return self._rejected("Message body cannot be empty.")
        if not command.receiver_email:
            return self._rejected("No contact selected.")

        placeholder = Message.create_optimistic(
            sender_email=self._identity.email,
            receiver_email=command.receiver_email,
            sender_role=self._identity.role,
            body=body,
            extras=command.extras,
        )
        self._messages.apply(lambda prev: insert_ordered(prev, placeholder))

        PENDING_PLACEHOLDERS.inc()
        try:
            record = await self._store.insert(placeholder.to_draft())
        except Exception as e:
            error = e if isinstance(e, SendPersistError) else SendPersistError(str(e), cause=e)
            logger.error(
                f"[send] Persist failed for {placeholder.id}, rolling back: {error.message}"
            )
            self._messages.apply(lambda prev: remove_message(prev, placeholder.id))
            MESSAGES_SENT.labels(outcome="rolled_back").inc()
            return SendMessageResult(sent=False, error=error)
        finally:
            PENDING_PLACEHOLDERS.dec()

        self._messages.apply(lambda prev: confirm_placeholder(prev, placeholder.id, record))
        MESSAGES_SENT.labels(outcome="confirmed").inc()
        logger.debug(f"[send] {placeholder.id} confirmed as {record.id}")
        return SendMessageResult(sent=True, message=placeholder.merged_with(record))

    def _rejected(self, reason: str) -> SendMessageResult:
        MESSAGES_SENT.labels(outcome="rejected").inc()
        return SendMessageResult(sent=False, error=DomainValidationError(reason))
