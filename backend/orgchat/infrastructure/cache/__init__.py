from orgchat.infrastructure.cache.redis_client import create_redis_client, close_redis_client
from orgchat.infrastructure.cache.redis_snapshot_cache import RedisSnapshotCache

__all__ = ["create_redis_client", "close_redis_client", "RedisSnapshotCache"]
