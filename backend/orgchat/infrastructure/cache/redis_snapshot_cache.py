"""
Redis Snapshot Cache - Last successfully loaded history of each conversation.

Redis Data Structure (STRING):
- Key pattern: "{SNAPSHOT_CACHE_PREFIX}:{owner_email}:{conversation_key}"
- Value: JSON array of message records, oldest first
- TTL: Config.SNAPSHOT_CACHE_TTL

Cache failures never fail a load: callers log and carry on.
"""

import logging
from typing import Optional

from pydantic import ValidationError
from redis.asyncio import Redis

from orgchat.application.dto.message import MessageRecord, MessageRecordList
from orgchat.config.settings import Config
from orgchat.domain.entities.message import Message
from orgchat.domain.ports.snapshot_cache import ConversationSnapshotCache
from orgchat.domain.value_objects.conversation_key import ConversationKey

logger = logging.getLogger(__name__)


class RedisSnapshotCache(ConversationSnapshotCache):
    def __init__(
        self,
        redis: Redis,
        prefix: str = Config.SNAPSHOT_CACHE_PREFIX,
        ttl: int = Config.SNAPSHOT_CACHE_TTL,
    ):
        self._redis = redis
        self._prefix = prefix
        self._ttl = ttl

    def _cache_key(self, owner_email: str, key: ConversationKey) -> str:
        return f"{self._prefix}:{owner_email}:{key.value}"

    async def read(self, owner_email: str, key: ConversationKey) -> Optional[list[Message]]:
        cached = await self._redis.get(self._cache_key(owner_email, key))
        if cached is None:
            return None
        try:
            records = MessageRecordList.validate_json(cached)
        except ValidationError as e:
            logger.warning(f"[SnapshotCache] Dropping corrupt snapshot for {key}: {e}")
            await self._redis.delete(self._cache_key(owner_email, key))
            return None
        return [record.to_entity() for record in records]

    async def write(self, owner_email: str, key: ConversationKey, messages: list[Message]) -> None:
        # Placeholders have no server row and must not outlive this session
        records = [MessageRecord.from_entity(m) for m in messages if not m.optimistic]
        await self._redis.setex(
            self._cache_key(owner_email, key),
            self._ttl,
            MessageRecordList.dump_json(records),
        )
        logger.debug(f"[SnapshotCache] Stored {len(records)} messages for {key}")
