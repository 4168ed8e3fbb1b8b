"""
RealtimeChannelManager - One live change-feed subscription per selected contact.

State machine:
    DETACHED -> SUBSCRIBING(contact) -> ACTIVE(contact) -> DETACHED

Every switch bumps a generation counter before its first await. Callbacks
are bound to the generation that created them and drop events once it is no
longer current, so a late event from the previous channel never reaches the
new conversation. The lock serializes teardown and subscribe.
"""

import asyncio
import logging
from enum import Enum
from functools import partial
from typing import Optional

from orgchat.application.services.message_list import MessageList
from orgchat.domain.entities.identity import Identity
from orgchat.domain.entities.message import Message
from orgchat.domain.exceptions import SubscriptionError
from orgchat.domain.ports.change_feed import ChangeFeed, ChangeKind, Subscription
from orgchat.domain.services.timeline import (
    insert_strategy,
    merge_record,
    reconcile_insert,
    remove_message,
)
from orgchat.domain.value_objects.conversation_key import ConversationKey
from orgchat.observability.metrics import (
    ACTIVE_CHANNELS,
    INSERT_RECONCILIATIONS,
    REALTIME_EVENTS,
)

logger = logging.getLogger(__name__)


class ChannelState(str, Enum):
    DETACHED = "detached"
    SUBSCRIBING = "subscribing"
    ACTIVE = "active"


class RealtimeChannelManager:
    def __init__(self, identity: Identity, feed: ChangeFeed, messages: MessageList):
        self._identity = identity
        self._feed = feed
        self._messages = messages
        self._lock = asyncio.Lock()
        self._generation = 0
        self._state = ChannelState.DETACHED
        self._contact_email: Optional[str] = None
        self._subscription: Optional[Subscription] = None

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def contact_email(self) -> Optional[str]:
        return self._contact_email

    @property
    def generation(self) -> int:
        return self._generation

    async def switch(self, contact_email: Optional[str]) -> bool:
        """
        Tear down the current channel and, if a contact is given, open theirs.

        Returns:
            True if the requested state was reached; False if the subscribe
            failed or another switch superseded this one
        """
        self._generation += 1
        generation = self._generation

        async with self._lock:
            await self._teardown()
            if generation != self._generation:
                return False
            if contact_email is None:
                return True
            return await self._attach(contact_email, generation)

    async def detach(self) -> None:
        await self.switch(None)

    async def _teardown(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            try:
                await self._feed.unsubscribe(subscription)
            except Exception as e:
                logger.warning(f"[Realtime] Unsubscribe from {subscription.key} failed: {e}")
            finally:
                ACTIVE_CHANNELS.dec()
            logger.debug(f"[Realtime] Left {subscription.key}")
        self._state = ChannelState.DETACHED
        self._contact_email = None

    async def _attach(self, contact_email: str, generation: int) -> bool:
        key = ConversationKey.for_pair(self._identity.email, contact_email)
        self._state = ChannelState.SUBSCRIBING
        self._contact_email = contact_email
        try:
            subscription = await self._feed.subscribe(
                key,
                on_insert=partial(self._on_insert, generation, contact_email),
                on_update=partial(self._on_update, generation),
                on_delete=partial(self._on_delete, generation),
            )
        except Exception as e:
            error = e if isinstance(e, SubscriptionError) else SubscriptionError(str(e), cause=e)
            logger.error(f"[Realtime] Subscribe to {key} failed: {error.message}")
            self._state = ChannelState.DETACHED
            self._contact_email = None
            return False

        if generation != self._generation:
            # Superseded during the handshake
            try:
                await self._feed.unsubscribe(subscription)
            except Exception as e:
                logger.warning(f"[Realtime] Unsubscribe from {key} failed: {e}")
            self._state = ChannelState.DETACHED
            self._contact_email = None
            return False

        self._subscription = subscription
        self._state = ChannelState.ACTIVE
        ACTIVE_CHANNELS.inc()
        logger.info(f"[Realtime] Listening on {key}")
        return True

    # ==================== CALLBACKS ====================

    def _is_current(self, generation: int, kind: ChangeKind) -> bool:
        if generation != self._generation:
            REALTIME_EVENTS.labels(kind=kind.value, outcome="stale").inc()
            return False
        return True

    def _on_insert(self, generation: int, contact_email: str, record: Message) -> None:
        if not self._is_current(generation, ChangeKind.INSERT):
            return
        if not record.is_between(self._identity.email, contact_email):
            REALTIME_EVENTS.labels(kind="INSERT", outcome="ignored").inc()
            return
        strategy = insert_strategy(self._messages.snapshot, record)
        self._messages.apply(lambda prev: reconcile_insert(prev, record))
        INSERT_RECONCILIATIONS.labels(strategy=strategy.value).inc()
        REALTIME_EVENTS.labels(kind="INSERT", outcome="applied").inc()

    def _on_update(self, generation: int, record: Message) -> None:
        if not self._is_current(generation, ChangeKind.UPDATE):
            return
        self._messages.apply(lambda prev: merge_record(prev, record))
        REALTIME_EVENTS.labels(kind="UPDATE", outcome="applied").inc()

    def _on_delete(self, generation: int, message_id: str) -> None:
        if not self._is_current(generation, ChangeKind.DELETE):
            return
        self._messages.apply(lambda prev: remove_message(prev, message_id))
        REALTIME_EVENTS.labels(kind="DELETE", outcome="applied").inc()
