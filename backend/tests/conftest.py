import asyncio
import os
import sys
from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Optional
from uuid import uuid4

import pytest

# Add backend directory to path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__) + '/..'))

from orgchat.application.services.message_list import MessageList
from orgchat.domain.entities.contact import Contact
from orgchat.domain.entities.identity import Identity
from orgchat.domain.entities.message import Message, MessageDraft
from orgchat.domain.ports.change_feed import ChangeEvent, ChangeFeed, ChangeKind, Subscription
from orgchat.domain.ports.directory import Directory, DirectoryFilter
from orgchat.domain.ports.message_store import MessageStore
from orgchat.domain.ports.snapshot_cache import ConversationSnapshotCache
from orgchat.domain.value_objects.conversation_key import ConversationKey
from orgchat.domain.value_objects.role import Role

BASE_TIME = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


def make_message(
    id: str = None,
    sender: str = "a@acme.com",
    receiver: str = "b@acme.com",
    body: str = "hello",
    at: datetime = BASE_TIME,
    **kwargs,
) -> Message:
    return Message(
        id=id or str(uuid4()),
        sender_email=sender,
        receiver_email=receiver,
        sender_role=kwargs.pop("sender_role", Role.ADMIN),
        message=body,
        created_at=at,
        **kwargs,
    )


# ==================== FAKE PORTS ====================


class FakeDirectory(Directory):
    """Member tables held in memory; roles in `failing` raise on read."""

    def __init__(self, contacts: list[Contact], failing: set[Role] = frozenset(), honor_filter=True):
        self.contacts = contacts
        self.failing = set(failing)
        self.honor_filter = honor_filter
        self.queries: list[tuple[Role, Optional[DirectoryFilter]]] = []

    async def query_table(self, role, where=None):
        self.queries.append((role, where))
        if role in self.failing:
            raise RuntimeError(f"{role.table} unavailable")
        rows = [c for c in self.contacts if c.role is role]
        if self.honor_filter and where is not None:
            if where.domain:
                rows = [c for c in rows if c.domain == where.domain]
            if where.exclude_email:
                rows = [c for c in rows if c.email != where.exclude_email]
        return rows

    async def get_self(self, email, role):
        if role in self.failing:
            raise RuntimeError(f"{role.table} unavailable")
        return next((c for c in self.contacts if c.email == email and c.role is role), None)


class FakeMessageStore(MessageStore):
    """
    Message rows held in memory.

    - fail_insert / fail_update: raise instead of writing
    - insert_gate: when set, insert() waits on it before returning
    - on_insert: called with the stored record before insert() returns,
      to simulate a realtime echo that beats the insert response
    """

    def __init__(self, rows: list[Message] = None):
        self.rows: list[Message] = list(rows or [])
        self.fail_query = False
        self.fail_insert = False
        self.fail_update = False
        self.query_gates: dict[str, asyncio.Event] = {}
        self.insert_gate: Optional[asyncio.Event] = None
        self.on_insert = None
        self.drafts: list[MessageDraft] = []
        self.updates: list[tuple[str, dict]] = []
        self._clock = count(1)

    async def query_pair(self, first_email, second_email):
        gate = self.query_gates.get(second_email)
        if gate is not None:
            await gate.wait()
        if self.fail_query:
            raise RuntimeError("database unavailable")
        return [m for m in self.rows if m.is_between(first_email, second_email)]

    async def insert(self, draft):
        self.drafts.append(draft)
        if self.fail_insert:
            raise RuntimeError("insert failed")
        record = Message(
            id=str(uuid4()),
            sender_email=draft.sender_email,
            receiver_email=draft.receiver_email,
            sender_role=draft.sender_role,
            message=draft.message,
            created_at=BASE_TIME + timedelta(minutes=next(self._clock)),
            is_deleted=draft.is_deleted,
            is_forwarded=draft.is_forwarded,
            reply_to_message=draft.reply_to_message,
            reply_to_sender=draft.reply_to_sender,
            client_id=draft.client_id,
        )
        self.rows.append(record)
        if self.on_insert is not None:
            self.on_insert(record)
        if self.insert_gate is not None:
            await self.insert_gate.wait()
        return record

    async def update(self, message_id, patch):
        self.updates.append((message_id, dict(patch)))
        if self.fail_update:
            raise RuntimeError("update failed")


class FakeSubscription(Subscription):
    def __init__(self, key, on_insert, on_update, on_delete):
        self.key = key
        self.on_insert = on_insert
        self.on_update = on_update
        self.on_delete = on_delete
        self._closed = False

    @property
    def closed(self):
        return self._closed


class FakeChangeFeed(ChangeFeed):
    """
    In-memory change feed.

    `log` records subscribe/unsubscribe calls in order; `subscribe_gate`
    holds the handshake open until set; `fail_subscribe` makes it raise.
    """

    def __init__(self):
        self.subscriptions: list[FakeSubscription] = []
        self.log: list[str] = []
        self.published: list[tuple[ChangeEvent, ConversationKey]] = []
        self.subscribe_gate: Optional[asyncio.Event] = None
        self.fail_subscribe = False

    async def subscribe(self, key, on_insert, on_update, on_delete):
        self.log.append(f"subscribe:{key.value}")
        if self.subscribe_gate is not None:
            await self.subscribe_gate.wait()
        if self.fail_subscribe:
            raise RuntimeError("handshake failed")
        subscription = FakeSubscription(key, on_insert, on_update, on_delete)
        self.subscriptions.append(subscription)
        return subscription

    async def unsubscribe(self, subscription):
        self.log.append(f"unsubscribe:{subscription.key.value}")
        subscription._closed = True

    async def publish(self, event, key):
        self.published.append((event, key))

    @property
    def open_subscriptions(self) -> list[FakeSubscription]:
        return [s for s in self.subscriptions if not s.closed]

    def deliver(self, subscription: FakeSubscription, event: ChangeEvent) -> None:
        """Invoke a subscription's callback even if it was closed (a late event)."""
        if event.kind is ChangeKind.INSERT:
            subscription.on_insert(event.new)
        elif event.kind is ChangeKind.UPDATE:
            subscription.on_update(event.new)
        else:
            subscription.on_delete(event.old_id)

    def emit(self, event: ChangeEvent) -> None:
        for subscription in self.open_subscriptions:
            self.deliver(subscription, event)


class FakeSnapshotCache(ConversationSnapshotCache):
    def __init__(self):
        self.entries: dict[tuple[str, str], list[Message]] = {}

    async def read(self, owner_email, key):
        return self.entries.get((owner_email, key.value))

    async def write(self, owner_email, key, messages):
        self.entries[(owner_email, key.value)] = list(messages)


# ==================== FIXTURES ====================


@pytest.fixture()
def admin_identity():
    return Identity(id="1", email="alice@acme.com", role=Role.ADMIN, domain="acme.com")


@pytest.fixture()
def worker_identity():
    return Identity(id="2", email="wendy@acme.com", role=Role.WORKER, domain="acme.com")


@pytest.fixture()
def org_contacts():
    return [
        Contact(id="s1", name="Sam Super", email="sam@hq.com", role=Role.SUPER_ADMIN),
        Contact(id="a1", name="Alice", email="alice@acme.com", role=Role.ADMIN, domain="acme.com"),
        Contact(id="a2", name="Bob", email="bob@acme.com", role=Role.ADMIN, domain="acme.com"),
        Contact(id="a3", name="Olga", email="olga@other.com", role=Role.ADMIN, domain="other.com"),
        Contact(id="w1", name="Wendy", email="wendy@acme.com", role=Role.WORKER, domain="acme.com"),
        Contact(id="w2", name="Walt", email="walt@acme.com", role=Role.WORKER, domain="acme.com"),
        Contact(id="w3", name="Xena", email="xena@other.com", role=Role.WORKER, domain="other.com"),
    ]


@pytest.fixture()
def message_list():
    return MessageList()


@pytest.fixture()
def message_store():
    return FakeMessageStore()


@pytest.fixture()
def change_feed():
    return FakeChangeFeed()


@pytest.fixture()
def snapshot_cache():
    return FakeSnapshotCache()
