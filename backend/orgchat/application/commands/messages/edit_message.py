"""
EditMessage Command - Replace the body of one of the caller's messages.

The new body is applied locally first. If persisting it fails the local edit
stays in place and the message is flagged `unsynced`.
"""

import logging
from dataclasses import dataclass

from orgchat.application.commands.messages.guards import mutation_rejection
from orgchat.application.common.interfaces import Command, CommandHandler
from orgchat.application.services.message_list import MessageList
from orgchat.domain.entities.identity import Identity
from orgchat.domain.exceptions import MutationPersistError
from orgchat.domain.ports.message_store import MessageStore
from orgchat.domain.services.timeline import patch_message
from orgchat.observability.metrics import MUTATIONS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditMessageCommand(Command[bool]):
    message_id: str
    new_body: str


class EditMessageHandler(CommandHandler[bool]):
    def __init__(self, identity: Identity, store: MessageStore, messages: MessageList):
        self._identity = identity
        self._store = store
        self._messages = messages

    async def execute(self, command: EditMessageCommand) -> bool:
        body = (command.new_body or "").strip()
        current = self._messages.find(command.message_id)

        reason = mutation_rejection(current, self._identity)
        if reason is None and not body:
            reason = "new body is empty"
        if reason is None and body == current.message:
            reason = "body is unchanged"
        if reason is not None:
            logger.info(f"[edit] Rejected {command.message_id}: {reason}")
            MUTATIONS.labels(operation="edit", outcome="rejected").inc()
            return False

        self._messages.apply(
            lambda prev: patch_message(prev, command.message_id, lambda m: m.edited(body))
        )
        try:
            await self._store.update(command.message_id, {"message": body})
        except Exception as e:
            error = e if isinstance(e, MutationPersistError) else MutationPersistError(str(e), cause=e)
            logger.error(f"[edit] Persist failed for {command.message_id}: {error.message}")
            self._messages.apply(
                lambda prev: patch_message(prev, command.message_id, lambda m: m.mark_unsynced())
            )
            MUTATIONS.labels(operation="edit", outcome="unsynced").inc()
            return False

        MUTATIONS.labels(operation="edit", outcome="persisted").inc()
        return True
