"""
ChatSession - Everything one signed-in member needs to chat.

Holds the identity, the resolved contacts, the selected contact and the
message list, and routes user actions to the resolver, conversation store,
realtime channel, send pipeline and mutation service.

Usage:
    session = ChatSession(identity, resolver, get_self, store, channel,
                          pipeline, mutations, messages)
    await session.start()
    await session.select_contact(session.contacts[0])
    await session.send("hello")
    ...
    await session.close()
"""

import asyncio
import logging
from datetime import date, tzinfo
from typing import Callable, Optional

from orgchat.application.commands.chat.send_message import (
    OptimisticMessagePipeline,
    SendMessageCommand,
    SendMessageResult,
)
from orgchat.application.queries.contacts import (
    ContactResolver,
    GetSelfHandler,
    GetSelfQuery,
    ResolveContactsQuery,
)
from orgchat.application.services.conversation_store import ConversationStore
from orgchat.application.services.message_list import Listener, MessageList
from orgchat.application.services.message_mutation_service import MessageMutationService
from orgchat.application.services.realtime_channel import (
    ChannelState,
    RealtimeChannelManager,
)
from orgchat.config.logging_config import set_correlation_id
from orgchat.domain.entities.contact import Contact
from orgchat.domain.entities.identity import Identity
from orgchat.domain.entities.message import Message
from orgchat.domain.exceptions import DomainValidationError
from orgchat.domain.services.contact_listing import filter_contacts, group_contacts_by_role
from orgchat.domain.services.day_grouping import DayBucket, format_time, group_by_day
from orgchat.domain.services.replies import reply_extras
from orgchat.domain.services.timeline import Timeline
from orgchat.domain.value_objects.conversation_key import ConversationKey

logger = logging.getLogger(__name__)


class ChatSession:
    def __init__(
        self,
        identity: Identity,
        resolver: ContactResolver,
        get_self: GetSelfHandler,
        store: ConversationStore,
        channel: RealtimeChannelManager,
        pipeline: OptimisticMessagePipeline,
        mutations: MessageMutationService,
        messages: MessageList,
        display_tz: Optional[tzinfo] = None,
    ):
        self.identity = identity
        self._resolver = resolver
        self._get_self = get_self
        self._store = store
        self._channel = channel
        self._pipeline = pipeline
        self._mutations = mutations
        self._messages = messages
        self._display_tz = display_tz

        self._contacts: list[Contact] = []
        self._user_info: Optional[Contact] = None
        self._selected: Optional[Contact] = None
        self._loading_contacts = False

    # ==================== STATE ====================

    @property
    def contacts(self) -> list[Contact]:
        return list(self._contacts)

    @property
    def user_info(self) -> Optional[Contact]:
        return self._user_info

    @property
    def selected_contact(self) -> Optional[Contact]:
        return self._selected

    @property
    def messages(self) -> Timeline:
        return self._messages.snapshot

    @property
    def loading_contacts(self) -> bool:
        return self._loading_contacts

    @property
    def loading_messages(self) -> bool:
        return self._store.loading

    @property
    def channel_state(self) -> ChannelState:
        return self._channel.state

    def on_messages_changed(self, listener: Listener) -> Callable[[], None]:
        return self._messages.subscribe(listener)

    # ==================== LIFECYCLE ====================

    async def start(self) -> None:
        await asyncio.gather(self.refresh_contacts(), self.refresh_user_info())

    async def refresh_contacts(self) -> list[Contact]:
        self._loading_contacts = True
        try:
            self._contacts = await self._resolver.execute(
                ResolveContactsQuery.for_identity(self.identity)
            )
        finally:
            self._loading_contacts = False
        logger.info(f"[ChatSession] {len(self._contacts)} contacts for {self.identity.email}")
        return self.contacts

    async def refresh_user_info(self) -> Optional[Contact]:
        self._user_info = await self._get_self.execute(
            GetSelfQuery(self.identity.email, self.identity.role)
        )
        return self._user_info

    async def select_contact(self, contact: Optional[Contact]) -> bool:
        """
        Switch the open conversation; None closes it.

        The list is cleared and the previous channel invalidated before the
        first await, so nothing from the old conversation can land afterwards.
        """
        email = contact.email if contact else None
        self._selected = contact
        self._store.begin(email)
        set_correlation_id(
            ConversationKey.for_pair(self.identity.email, email).value if email else None
        )

        await self._channel.switch(email)
        if self._store.contact_email != email:
            return False
        if email is None:
            return True
        return await self._store.load(email)

    async def close(self) -> None:
        self._selected = None
        self._store.begin(None)
        await self._channel.detach()
        set_correlation_id(None)

    # ==================== ACTIONS ====================

    async def send(self, body: str) -> SendMessageResult:
        return await self._pipeline.execute(
            SendMessageCommand(body=body, receiver_email=self._selected_email())
        )

    async def reply(self, message: Message, body: str) -> SendMessageResult:
        self_name = self._user_info.display_name if self._user_info else None
        try:
            extras = reply_extras(message, self.identity, self._contacts, self_name)
        except ValueError as e:
            logger.info(f"[ChatSession] Reply to {message.id} rejected: {e}")
            return SendMessageResult(sent=False, error=DomainValidationError(str(e)))
        return await self._pipeline.execute(
            SendMessageCommand(body=body, receiver_email=self._selected_email(), extras=extras)
        )

    async def edit(self, message_id: str, new_body: str) -> bool:
        return await self._mutations.edit(message_id, new_body)

    async def delete(self, message_id: str) -> bool:
        return await self._mutations.soft_delete(message_id)

    async def forward(self, message: Message, target: Contact) -> Optional[Message]:
        return await self._mutations.forward(message, target)

    # ==================== VIEWS ====================

    def day_buckets(self, today: Optional[date] = None) -> list[DayBucket]:
        return group_by_day(self._messages.snapshot, self._display_tz, today)

    def time_label(self, message: Message) -> str:
        return format_time(message.created_at, self._display_tz)

    def search_contacts(self, search: str = "") -> dict[str, list[Contact]]:
        return group_contacts_by_role(filter_contacts(self._contacts, search))

    def _selected_email(self) -> Optional[str]:
        return self._selected.email if self._selected else None
