"""
Redis Change Feed - Row changes of the messages table over Redis pub/sub.

Channel per conversation: "{REALTIME_CHANNEL_PREFIX}:{conversation_key}".
Payload: ChangeEventPayload JSON, `{type, table, new, old}`.

subscribe() returns once Redis has acknowledged the SUBSCRIBE; a background
task then pumps messages into the callbacks. unsubscribe() closes the handle
before stopping the pump, so no callback fires after it returns.
"""

import asyncio
import logging
from typing import Optional

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.asyncio.client import PubSub

from orgchat.application.dto.message import MESSAGES_TABLE, ChangeEventPayload
from orgchat.config.settings import Config
from orgchat.domain.exceptions import SubscriptionError
from orgchat.domain.ports.change_feed import (
    ChangeEvent,
    ChangeFeed,
    ChangeKind,
    DeleteCallback,
    MessageCallback,
    Subscription,
)
from orgchat.domain.value_objects.conversation_key import ConversationKey

logger = logging.getLogger(__name__)


class RedisSubscription(Subscription):
    def __init__(
        self,
        key: ConversationKey,
        channel: str,
        pubsub: PubSub,
        on_insert: MessageCallback,
        on_update: MessageCallback,
        on_delete: DeleteCallback,
    ):
        self.key = key
        self.channel = channel
        self.pubsub = pubsub
        self.on_insert = on_insert
        self.on_update = on_update
        self.on_delete = on_delete
        self.task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True


class RedisChangeFeed(ChangeFeed):
    def __init__(
        self,
        redis: Redis,
        prefix: str = Config.REALTIME_CHANNEL_PREFIX,
        poll_timeout: float = Config.REALTIME_POLL_TIMEOUT,
    ):
        self._redis = redis
        self._prefix = prefix
        self._poll_timeout = poll_timeout

    def channel_name(self, key: ConversationKey) -> str:
        return f"{self._prefix}:{key.value}"

    async def subscribe(
        self,
        key: ConversationKey,
        on_insert: MessageCallback,
        on_update: MessageCallback,
        on_delete: DeleteCallback,
    ) -> RedisSubscription:
        channel = self.channel_name(key)
        pubsub = self._redis.pubsub()
        try:
            await pubsub.subscribe(channel)
        except Exception as e:
            await pubsub.aclose()
            raise SubscriptionError(f"Failed to subscribe to {channel}: {e}", cause=e) from e

        subscription = RedisSubscription(key, channel, pubsub, on_insert, on_update, on_delete)
        subscription.task = asyncio.create_task(self._pump(subscription))
        logger.debug(f"[ChangeFeed] Subscribed to {channel}")
        return subscription

    async def unsubscribe(self, subscription: RedisSubscription) -> None:
        if subscription.closed:
            return
        subscription.close()
        if subscription.task is not None:
            subscription.task.cancel()
            try:
                await subscription.task
            except asyncio.CancelledError:
                pass
        try:
            await subscription.pubsub.unsubscribe(subscription.channel)
        finally:
            await subscription.pubsub.aclose()
        logger.debug(f"[ChangeFeed] Unsubscribed from {subscription.channel}")

    async def publish(self, event: ChangeEvent, key: ConversationKey) -> None:
        payload = ChangeEventPayload.from_event(event)
        await self._redis.publish(self.channel_name(key), payload.model_dump_json())

    async def _pump(self, subscription: RedisSubscription) -> None:
        while not subscription.closed:
            try:
                msg = await subscription.pubsub.get_message(
                    ignore_subscribe_messages=True, timeout=self._poll_timeout
                )
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(f"[ChangeFeed] Read from {subscription.channel} failed: {e}")
                await asyncio.sleep(0.5)
                continue
            if msg and msg.get("type") == "message":
                self._dispatch(subscription, msg.get("data"))

    def _dispatch(self, subscription: RedisSubscription, data) -> None:
        if subscription.closed:
            return
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        try:
            payload = ChangeEventPayload.model_validate_json(data)
            if payload.table != MESSAGES_TABLE:
                return
            event = payload.to_event()
        except (ValidationError, ValueError) as e:
            logger.warning(f"[ChangeFeed] Malformed event on {subscription.channel}: {e}")
            return

        try:
            if event.kind is ChangeKind.INSERT:
                subscription.on_insert(event.new)
            elif event.kind is ChangeKind.UPDATE:
                subscription.on_update(event.new)
            else:
                subscription.on_delete(event.old_id)
        except Exception:
            logger.exception(f"[ChangeFeed] {event.kind.value} callback failed")
