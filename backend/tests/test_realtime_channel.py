"""
Unit tests for RealtimeChannelManager.

Run with: pytest tests/test_realtime_channel.py -v
"""

import asyncio
from dataclasses import replace

import pytest

from conftest import make_message
from orgchat.application.services.realtime_channel import ChannelState, RealtimeChannelManager
from orgchat.domain.entities.message import Message
from orgchat.domain.ports.change_feed import ChangeEvent, ChangeKind
from orgchat.domain.value_objects.conversation_key import ConversationKey
from orgchat.domain.value_objects.role import Role

ME = "alice@acme.com"
C = "carol@acme.com"
D = "dave@acme.com"

KEY_C = ConversationKey.for_pair(ME, C).value
KEY_D = ConversationKey.for_pair(ME, D).value


def _insert(message):
    return ChangeEvent(kind=ChangeKind.INSERT, new=message)


@pytest.fixture()
def channel(admin_identity, change_feed, message_list):
    return RealtimeChannelManager(admin_identity, change_feed, message_list)


class TestStateMachine:
    @pytest.mark.asyncio
    async def test_switch_activates_channel_for_pair_key(self, channel, change_feed):
        assert channel.state is ChannelState.DETACHED

        assert await channel.switch(C) is True

        assert channel.state is ChannelState.ACTIVE
        assert channel.contact_email == C
        assert change_feed.log == [f"subscribe:{KEY_C}"]

    @pytest.mark.asyncio
    async def test_state_is_subscribing_during_handshake(self, channel, change_feed):
        change_feed.subscribe_gate = asyncio.Event()

        task = asyncio.create_task(channel.switch(C))
        await asyncio.sleep(0)
        assert channel.state is ChannelState.SUBSCRIBING

        change_feed.subscribe_gate.set()
        await task
        assert channel.state is ChannelState.ACTIVE

    @pytest.mark.asyncio
    async def test_old_channel_is_torn_down_before_new_subscribe(self, channel, change_feed):
        await channel.switch(C)
        await channel.switch(D)

        assert change_feed.log == [
            f"subscribe:{KEY_C}",
            f"unsubscribe:{KEY_C}",
            f"subscribe:{KEY_D}",
        ]
        assert len(change_feed.open_subscriptions) == 1

    @pytest.mark.asyncio
    async def test_switch_to_none_detaches(self, channel, change_feed):
        await channel.switch(C)

        await channel.detach()

        assert channel.state is ChannelState.DETACHED
        assert change_feed.open_subscriptions == []

    @pytest.mark.asyncio
    async def test_subscribe_failure_leaves_channel_detached(self, channel, change_feed):
        change_feed.fail_subscribe = True

        assert await channel.switch(C) is False

        assert channel.state is ChannelState.DETACHED
        assert channel.contact_email is None

    @pytest.mark.asyncio
    async def test_rapid_switch_keeps_only_latest_channel(self, channel, change_feed):
        change_feed.subscribe_gate = asyncio.Event()

        first = asyncio.create_task(channel.switch(C))
        await asyncio.sleep(0)
        second = asyncio.create_task(channel.switch(D))
        await asyncio.sleep(0)
        change_feed.subscribe_gate.set()

        assert await first is False
        assert await second is True
        assert [s.key.value for s in change_feed.open_subscriptions] == [KEY_D]
        assert channel.contact_email == D


class TestEvents:
    @pytest.mark.asyncio
    async def test_insert_for_pair_is_appended(self, channel, change_feed, message_list):
        await channel.switch(C)

        change_feed.emit(_insert(make_message(id="m1", sender=C, receiver=ME)))

        assert [m.id for m in message_list] == ["m1"]

    @pytest.mark.asyncio
    async def test_insert_for_other_pair_is_ignored(self, channel, change_feed, message_list):
        await channel.switch(C)

        change_feed.emit(_insert(make_message(id="m1", sender=D, receiver=ME)))

        assert len(message_list) == 0

    @pytest.mark.asyncio
    async def test_duplicate_insert_is_merged(self, channel, change_feed, message_list):
        await channel.switch(C)
        record = make_message(id="m1", sender=C, receiver=ME)

        change_feed.emit(_insert(record))
        change_feed.emit(_insert(record))

        assert len(message_list) == 1

    @pytest.mark.asyncio
    async def test_echo_replaces_own_placeholder(self, channel, change_feed, message_list):
        await channel.switch(C)
        placeholder = Message.create_optimistic(ME, C, Role.ADMIN, "hi")
        message_list.reset([placeholder])

        echo = replace(placeholder, id="srv-1", optimistic=False)
        change_feed.emit(_insert(echo))

        assert [m.id for m in message_list] == ["srv-1"]

    @pytest.mark.asyncio
    async def test_update_merges_fields(self, channel, change_feed, message_list):
        await channel.switch(C)
        original = replace(make_message(id="m1", sender=ME, receiver=C, body="old"), unsynced=True)
        message_list.reset([original])

        change_feed.emit(ChangeEvent(kind=ChangeKind.UPDATE, new=replace(original, message="new")))

        assert message_list.find("m1").message == "new"
        assert not message_list.find("m1").unsynced

    @pytest.mark.asyncio
    async def test_delete_removes_by_id(self, channel, change_feed, message_list):
        await channel.switch(C)
        message_list.reset([make_message(id="m1", sender=ME, receiver=C)])

        change_feed.emit(ChangeEvent(kind=ChangeKind.DELETE, old_id="m1"))

        assert len(message_list) == 0

    @pytest.mark.asyncio
    async def test_late_event_from_previous_channel_is_dropped(
        self, channel, change_feed, message_list
    ):
        await channel.switch(C)
        old_subscription = change_feed.subscriptions[0]
        await channel.switch(D)

        change_feed.deliver(old_subscription, _insert(make_message(id="late", sender=C, receiver=ME)))

        assert len(message_list) == 0

    @pytest.mark.asyncio
    async def test_events_are_dropped_as_soon_as_switch_starts(
        self, channel, change_feed, message_list
    ):
        await channel.switch(C)
        old_subscription = change_feed.subscriptions[0]
        change_feed.subscribe_gate = asyncio.Event()

        task = asyncio.create_task(channel.switch(D))
        await asyncio.sleep(0)
        change_feed.deliver(old_subscription, _insert(make_message(id="late", sender=C, receiver=ME)))
        change_feed.subscribe_gate.set()
        await task

        assert len(message_list) == 0
