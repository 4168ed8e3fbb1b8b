"""
Timeline - Pure transformations of a conversation's message list.

A timeline is an immutable tuple of messages kept in `created_at` order (ties
in insertion order). Every function takes the previous snapshot and returns a
new one, so two callbacks landing back to back can never lose each other's
update.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable, Optional

from orgchat.domain.entities.message import Message

Timeline = tuple[Message, ...]


class InsertStrategy(str, Enum):
    """How an inbound INSERT is reconciled with the local list."""

    MERGE = "merge"  # same server id already present
    CLIENT_ID = "client_id"  # echo of one of our placeholders
    HEURISTIC = "heuristic"  # same sender, receiver and text as a placeholder
    APPEND = "append"


def conversation_view(
    messages: Iterable[Message], first_email: str, second_email: str
) -> Timeline:
    """Derive a conversation from raw rows: filter to the pair, then order."""
    return sort_chronologically(
        m for m in messages if m.is_between(first_email, second_email)
    )


def sort_chronologically(messages: Iterable[Message]) -> Timeline:
    # sorted() is stable, which keeps insertion order for equal timestamps
    return tuple(sorted(messages, key=lambda m: m.created_at))


def insert_ordered(messages: Timeline, message: Message) -> Timeline:
    index = len(messages)
    while index > 0 and messages[index - 1].created_at > message.created_at:
        index -= 1
    return messages[:index] + (message,) + messages[index:]


def index_of(messages: Timeline, message_id: str) -> Optional[int]:
    for index, message in enumerate(messages):
        if message.id == message_id:
            return index
    return None


def replace_at(messages: Timeline, index: int, message: Message) -> Timeline:
    if messages[index].created_at == message.created_at:
        return messages[:index] + (message,) + messages[index + 1 :]
    return insert_ordered(messages[:index] + messages[index + 1 :], message)


def remove_message(messages: Timeline, message_id: str) -> Timeline:
    return tuple(m for m in messages if m.id != message_id)


def patch_message(
    messages: Timeline, message_id: str, change: Callable[[Message], Message]
) -> Timeline:
    index = index_of(messages, message_id)
    if index is None:
        return messages
    return replace_at(messages, index, change(messages[index]))


def merge_record(messages: Timeline, record: Message) -> Timeline:
    """Field-merge an authoritative record into the entry with the same id."""
    return patch_message(messages, record.id, lambda current: current.merged_with(record))


def find_placeholder(messages: Timeline, record: Message) -> Optional[int]:
    if record.client_id:
        for index, message in enumerate(messages):
            if message.optimistic and message.client_id == record.client_id:
                return index
        return None
    # Records written by other clients carry no correlation id; fall back to
    # matching the oldest placeholder with the same sender, receiver and text.
    for index, message in enumerate(messages):
        if (
            message.optimistic
            and message.sender_email == record.sender_email
            and message.receiver_email == record.receiver_email
            and message.message == record.message
        ):
            return index
    return None


def insert_strategy(messages: Timeline, record: Message) -> InsertStrategy:
    if index_of(messages, record.id) is not None:
        return InsertStrategy.MERGE
    if find_placeholder(messages, record) is not None:
        return InsertStrategy.CLIENT_ID if record.client_id else InsertStrategy.HEURISTIC
    return InsertStrategy.APPEND


def reconcile_insert(messages: Timeline, record: Message) -> Timeline:
    """Idempotent upsert of a confirmed record arriving from the change feed."""
    if index_of(messages, record.id) is not None:
        return merge_record(messages, record)
    placeholder = find_placeholder(messages, record)
    if placeholder is not None:
        return replace_at(messages, placeholder, messages[placeholder].merged_with(record))
    return insert_ordered(messages, record)


def confirm_placeholder(messages: Timeline, temp_id: str, record: Message) -> Timeline:
    """Swap a placeholder for its persisted record after the insert returns.

    Converges with reconcile_insert whichever of the two lands first.
    """
    placeholder = index_of(messages, temp_id)
    existing = index_of(messages, record.id)
    if placeholder is not None and existing is not None:
        return merge_record(remove_message(messages, temp_id), record)
    if placeholder is not None:
        return replace_at(messages, placeholder, messages[placeholder].merged_with(record))
    if existing is not None:
        return merge_record(messages, record)
    # Neither present: the list was reset by a contact switch
    return messages


def merge_history(history: Iterable[Message], current: Timeline) -> Timeline:
    """Combine a fetched history with entries that arrived while it was in flight."""
    merged = sort_chronologically(history)
    known_ids = {m.id for m in merged}
    known_client_ids = {m.client_id for m in merged if m.client_id}
    for message in current:
        if message.id in known_ids:
            continue
        if message.optimistic and message.client_id in known_client_ids:
            continue
        merged = insert_ordered(merged, message)
    return merged
