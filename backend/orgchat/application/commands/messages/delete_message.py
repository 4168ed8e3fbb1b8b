"""
DeleteMessage Command - Soft delete one of the caller's messages.

The row is kept with `is_deleted=True`; it stays in the conversation at its
original position and renders as a deleted-message notice.
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
class DeleteMessageCommand(Command[bool]):
    message_id: str


class DeleteMessageHandler(CommandHandler[bool]):
    def __init__(self, identity: Identity, store: MessageStore, messages: MessageList):
        self._identity = identity
        self._store = store
        self._messages = messages

    async def execute(self, command: DeleteMessageCommand) -> bool:
        reason = mutation_rejection(self._messages.find(command.message_id), self._identity)
        if reason is not None:
            logger.info(f"[delete] Rejected {command.message_id}: {reason}")
            MUTATIONS.labels(operation="delete", outcome="rejected").inc()
            return False

        self._messages.apply(
            lambda prev: patch_message(prev, command.message_id, lambda m: m.soft_deleted())
        )
        try:
            await self._store.update(command.message_id, {"is_deleted": True})
        except Exception as e:
            error = e if isinstance(e, MutationPersistError) else MutationPersistError(str(e), cause=e)
            logger.error(f"[delete] Persist failed for {command.message_id}: {error.message}")
            self._messages.apply(
                lambda prev: patch_message(prev, command.message_id, lambda m: m.mark_unsynced())
            )
            MUTATIONS.labels(operation="delete", outcome="unsynced").inc()
            return False

        MUTATIONS.labels(operation="delete", outcome="persisted").inc()
        return True
