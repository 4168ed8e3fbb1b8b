"""
ConversationStore - History of the selected conversation.

Selection is split in two steps so that a contact switch takes effect before
any await:
    begin(contact)  -> synchronous: new ticket, empty list
    load(contact)   -> fetch, then apply only if the ticket is still current

A fetch for contact C that resolves after the user moved on to D is dropped.
"""

import logging
import time
from typing import Optional

from orgchat.application.queries.chat.load_conversation import (
    LoadConversationHandler,
    LoadConversationQuery,
)
from orgchat.application.services.message_list import MessageList
from orgchat.domain.entities.identity import Identity
from orgchat.domain.entities.message import Message
from orgchat.domain.exceptions import HistoryLoadError
from orgchat.domain.ports.snapshot_cache import ConversationSnapshotCache
from orgchat.domain.services.timeline import conversation_view, merge_history
from orgchat.domain.value_objects.conversation_key import ConversationKey
from orgchat.observability.metrics import HISTORY_LOAD_LATENCY

logger = logging.getLogger(__name__)


class ConversationStore:
    def __init__(
        self,
        identity: Identity,
        history: LoadConversationHandler,
        messages: MessageList,
        snapshots: Optional[ConversationSnapshotCache] = None,
        use_snapshot_fallback: bool = False,
    ):
        self._identity = identity
        self._history = history
        self._messages = messages
        self._snapshots = snapshots
        self._use_snapshot_fallback = use_snapshot_fallback
        self._contact_email: Optional[str] = None
        self._ticket = 0
        self._loading = False

    @property
    def contact_email(self) -> Optional[str]:
        return self._contact_email

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def ticket(self) -> int:
        return self._ticket

    def begin(self, contact_email: Optional[str]) -> int:
        """Select a contact and invalidate any fetch still in flight."""
        self._ticket += 1
        self._contact_email = contact_email
        self._loading = contact_email is not None
        self._messages.reset()
        return self._ticket

    async def load(self, contact_email: Optional[str] = None) -> bool:
        """
        Load the full history with the contact into the message list.

        Returns:
            True if the fetched history was applied; False if it failed or
            was superseded by another selection
        """
        contact = contact_email or self._contact_email
        if contact is None:
            return False
        if contact != self._contact_email:
            self.begin(contact)

        ticket = self._ticket
        owner = self._identity.email
        started = time.perf_counter()
        try:
            history = await self._history.execute(LoadConversationQuery(owner, contact))
        except HistoryLoadError as e:
            if ticket != self._ticket:
                HISTORY_LOAD_LATENCY.labels(outcome="discarded").observe(time.perf_counter() - started)
                return False
            logger.error(f"[ConversationStore] {e.message}")
            fallback = await self._fallback(owner, contact)
            if ticket == self._ticket:
                # Keep pending sends and live inserts that landed during the fetch
                self._messages.apply(
                    lambda prev: merge_history(fallback, conversation_view(prev, owner, contact))
                )
                self._loading = False
            HISTORY_LOAD_LATENCY.labels(outcome="failed").observe(time.perf_counter() - started)
            return False

        if ticket != self._ticket:
            logger.info(f"[ConversationStore] Discarding stale history for {contact}")
            HISTORY_LOAD_LATENCY.labels(outcome="discarded").observe(time.perf_counter() - started)
            return False

        # Realtime inserts and pending sends may have landed during the fetch
        self._messages.apply(
            lambda prev: merge_history(history, conversation_view(prev, owner, contact))
        )
        self._loading = False
        HISTORY_LOAD_LATENCY.labels(outcome="loaded").observe(time.perf_counter() - started)
        logger.info(f"[ConversationStore] Loaded {len(history)} messages with {contact}")

        await self._write_snapshot(owner, contact, history)
        return True

    async def _fallback(self, owner: str, contact: str) -> list[Message]:
        if not (self._use_snapshot_fallback and self._snapshots):
            return []
        try:
            cached = await self._snapshots.read(owner, ConversationKey.for_pair(owner, contact))
        except Exception as e:
            logger.warning(f"[ConversationStore] Snapshot read failed: {e}")
            return []
        if cached:
            logger.info(f"[ConversationStore] Serving {len(cached)} cached messages with {contact}")
        return list(cached or [])

    async def _write_snapshot(self, owner: str, contact: str, history: list[Message]) -> None:
        if self._snapshots is None:
            return
        try:
            await self._snapshots.write(owner, ConversationKey.for_pair(owner, contact), history)
        except Exception as e:
            logger.warning(f"[ConversationStore] Snapshot write failed: {e}")
