"""
PORTS - Interfaces that infrastructure implements

A "port" is an abstract interface that defines WHAT the messaging core needs,
without specifying HOW it's done:
- directory.py       → member tables (Prisma)
- message_store.py   → message rows (Prisma)
- change_feed.py     → realtime row events (Redis pub/sub)
- snapshot_cache.py  → last loaded history (Redis)
"""

from orgchat.domain.ports.directory import Directory, DirectoryFilter
from orgchat.domain.ports.message_store import MessageStore
from orgchat.domain.ports.change_feed import (
    ChangeEvent,
    ChangeFeed,
    ChangeKind,
    Subscription,
)
from orgchat.domain.ports.snapshot_cache import ConversationSnapshotCache

__all__ = [
    "Directory",
    "DirectoryFilter",
    "MessageStore",
    "ChangeEvent",
    "ChangeFeed",
    "ChangeKind",
    "Subscription",
    "ConversationSnapshotCache",
]
