"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


class Config:
    # Redis (realtime change feed + snapshot cache)
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Realtime channel
    REALTIME_CHANNEL_PREFIX = os.getenv("REALTIME_CHANNEL_PREFIX", "chat")
    REALTIME_POLL_TIMEOUT = float(os.getenv("REALTIME_POLL_TIMEOUT", "1.0"))

    # Conversation snapshot cache
    SNAPSHOT_CACHE_PREFIX = os.getenv("SNAPSHOT_CACHE_PREFIX", "chat:snapshot")
    SNAPSHOT_CACHE_TTL = int(os.getenv("SNAPSHOT_CACHE_TTL", "86400"))  # seconds
    # Serve the cached snapshot when the history fetch fails (default: empty list)
    USE_SNAPSHOT_FALLBACK = _flag("USE_SNAPSHOT_FALLBACK")

    # Rendering
    DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "UTC")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE") or None
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(name)s] [%(correlation_id)s] %(message)s",
    )
