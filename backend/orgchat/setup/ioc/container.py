"""
Dishka DI Container Setup.

Scopes:
- APP: Prisma client, Redis client and the adapters built on them; created
  once per process and shared by every chat session
- REQUEST: one chat session. The signed-in Identity comes from the container
  context, and everything holding per-session state (message list, store,
  channel, pipeline) is built fresh for it

Flow:
  Identity (context) ─┐
  MessageList ────────┼──> ConversationStore / RealtimeChannelManager /
  adapters (APP) ─────┘    OptimisticMessagePipeline / MessageMutationService
                                         ↓
                                    ChatSession
"""

from typing import AsyncIterable
from zoneinfo import ZoneInfo

from dishka import AsyncContainer, Provider, Scope, from_context, make_async_container, provide
from prisma import Prisma
from redis.asyncio import Redis

from orgchat.application.commands.chat.send_message import OptimisticMessagePipeline
from orgchat.application.commands.messages import (
    DeleteMessageHandler,
    EditMessageHandler,
    ForwardMessageHandler,
)
from orgchat.application.queries.chat import LoadConversationHandler
from orgchat.application.queries.contacts import ContactResolver, GetSelfHandler
from orgchat.application.services.chat_session import ChatSession
from orgchat.application.services.conversation_store import ConversationStore
from orgchat.application.services.message_list import MessageList
from orgchat.application.services.message_mutation_service import MessageMutationService
from orgchat.application.services.realtime_channel import RealtimeChannelManager
from orgchat.config.settings import Config
from orgchat.domain.entities.identity import Identity
from orgchat.domain.ports import ChangeFeed, ConversationSnapshotCache, Directory, MessageStore
from orgchat.infrastructure.cache import RedisSnapshotCache, close_redis_client, create_redis_client
from orgchat.infrastructure.persistence import PrismaDirectory, PrismaMessageStore
from orgchat.infrastructure.realtime import RedisChangeFeed


class ChatProvider(Provider):
    """
    Messaging subsystem dependency provider.
    """

    identity = from_context(provides=Identity, scope=Scope.REQUEST)

    # ==================== CLIENTS ====================

    @provide(scope=Scope.APP)
    async def get_prisma(self) -> AsyncIterable[Prisma]:
        """
        Provide Prisma client (singleton, app-scoped).

        - connect() on first use, disconnect() when the container closes
        """
        prisma = Prisma()
        await prisma.connect()
        yield prisma
        await prisma.disconnect()

    @provide(scope=Scope.APP)
    async def get_redis(self) -> AsyncIterable[Redis]:
        client = await create_redis_client()
        yield client
        await close_redis_client(client)

    # ==================== ADAPTERS ====================

    @provide(scope=Scope.APP)
    def get_change_feed(self, redis: Redis) -> ChangeFeed:
        return RedisChangeFeed(redis)

    @provide(scope=Scope.APP)
    def get_message_store(self, prisma: Prisma, change_feed: ChangeFeed) -> MessageStore:
        """
        - Return type is ABSTRACT (MessageStore)
        - Implementation is CONCRETE (PrismaMessageStore)
        """
        return PrismaMessageStore(prisma, change_feed)

    @provide(scope=Scope.APP)
    def get_directory(self, prisma: Prisma) -> Directory:
        return PrismaDirectory(prisma)

    @provide(scope=Scope.APP)
    def get_snapshot_cache(self, redis: Redis) -> ConversationSnapshotCache:
        return RedisSnapshotCache(redis)

    # ==================== HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_contact_resolver(self, directory: Directory) -> ContactResolver:
        return ContactResolver(directory)

    @provide(scope=Scope.REQUEST)
    def get_self_handler(self, directory: Directory) -> GetSelfHandler:
        return GetSelfHandler(directory)

    @provide(scope=Scope.REQUEST)
    def get_load_conversation_handler(self, store: MessageStore) -> LoadConversationHandler:
        return LoadConversationHandler(store)

    @provide(scope=Scope.REQUEST)
    def get_send_pipeline(
        self, identity: Identity, store: MessageStore, messages: MessageList
    ) -> OptimisticMessagePipeline:
        return OptimisticMessagePipeline(identity, store, messages)

    @provide(scope=Scope.REQUEST)
    def get_edit_handler(
        self, identity: Identity, store: MessageStore, messages: MessageList
    ) -> EditMessageHandler:
        return EditMessageHandler(identity, store, messages)

    @provide(scope=Scope.REQUEST)
    def get_delete_handler(
        self, identity: Identity, store: MessageStore, messages: MessageList
    ) -> DeleteMessageHandler:
        return DeleteMessageHandler(identity, store, messages)

    @provide(scope=Scope.REQUEST)
    def get_forward_handler(self, identity: Identity, store: MessageStore) -> ForwardMessageHandler:
        return ForwardMessageHandler(identity, store)

    # ==================== SESSION STATE ====================

    @provide(scope=Scope.REQUEST)
    def get_message_list(self) -> MessageList:
        return MessageList()

    @provide(scope=Scope.REQUEST)
    def get_conversation_store(
        self,
        identity: Identity,
        history: LoadConversationHandler,
        messages: MessageList,
        snapshots: ConversationSnapshotCache,
    ) -> ConversationStore:
        return ConversationStore(
            identity,
            history,
            messages,
            snapshots=snapshots,
            use_snapshot_fallback=Config.USE_SNAPSHOT_FALLBACK,
        )

    @provide(scope=Scope.REQUEST)
    def get_channel_manager(
        self, identity: Identity, feed: ChangeFeed, messages: MessageList
    ) -> RealtimeChannelManager:
        return RealtimeChannelManager(identity, feed, messages)

    @provide(scope=Scope.REQUEST)
    def get_mutation_service(
        self,
        edit_handler: EditMessageHandler,
        delete_handler: DeleteMessageHandler,
        forward_handler: ForwardMessageHandler,
    ) -> MessageMutationService:
        return MessageMutationService(edit_handler, delete_handler, forward_handler)

    @provide(scope=Scope.REQUEST)
    def get_chat_session(
        self,
        identity: Identity,
        resolver: ContactResolver,
        get_self: GetSelfHandler,
        store: ConversationStore,
        channel: RealtimeChannelManager,
        pipeline: OptimisticMessagePipeline,
        mutations: MessageMutationService,
        messages: MessageList,
    ) -> ChatSession:
        return ChatSession(
            identity,
            resolver,
            get_self,
            store,
            channel,
            pipeline,
            mutations,
            messages,
            display_tz=ZoneInfo(Config.DISPLAY_TIMEZONE),
        )


async def create_container() -> AsyncContainer:
    """
    Create and configure the DI container.

    - Call this ONCE at process startup and close() it at shutdown
    """
    return make_async_container(ChatProvider())
