from orgchat.infrastructure.realtime.redis_change_feed import RedisChangeFeed, RedisSubscription

__all__ = ["RedisChangeFeed", "RedisSubscription"]
