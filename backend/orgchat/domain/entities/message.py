"""
Message Entity - A single direct message between two members.

Instances are immutable; every change produces a new Message so that the
conversation list can be replaced snapshot by snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from orgchat.domain.value_objects.conversation_key import ConversationKey
from orgchat.domain.value_objects.role import Role

OPTIMISTIC_ID_PREFIX = "opt-"
DELETED_MESSAGE_TEXT = "This message was deleted"


def new_client_id() -> str:
    return f"{OPTIMISTIC_ID_PREFIX}{uuid4().hex}"


@dataclass(frozen=True)
class MessageExtras:
    """Optional attributes a sender may attach to a new message."""

    reply_to_message: Optional[str] = None
    reply_to_sender: Optional[str] = None
    is_forwarded: bool = False


@dataclass(frozen=True)
class MessageDraft:
    """Payload of a persist request: everything except server-assigned fields."""

    sender_email: str
    receiver_email: str
    sender_role: Role
    message: str
    client_id: str
    is_deleted: bool = False
    is_forwarded: bool = False
    reply_to_message: Optional[str] = None
    reply_to_sender: Optional[str] = None


@dataclass(frozen=True)
class Message:
    # Persisted fields
    id: str
    sender_email: str
    receiver_email: str
    sender_role: Role
    message: str
    created_at: datetime
    is_deleted: bool = False
    is_forwarded: bool = False
    reply_to_message: Optional[str] = None
    reply_to_sender: Optional[str] = None
    client_id: Optional[str] = None
    # Local-only state, never persisted
    optimistic: bool = field(default=False, compare=False)
    unsynced: bool = field(default=False, compare=False)

    @classmethod
    def create_optimistic(
        cls,
        sender_email: str,
        receiver_email: str,
        sender_role: Role,
        body: str,
        extras: Optional[MessageExtras] = None,
        now: Optional[datetime] = None,
    ) -> Message:
        """Factory for a local placeholder; its temporary id doubles as client_id."""
        extras = extras or MessageExtras()
        temp_id = new_client_id()
        return cls(
            id=temp_id,
            sender_email=sender_email,
            receiver_email=receiver_email,
            sender_role=sender_role,
            message=body,
            created_at=now or datetime.now(timezone.utc),
            is_forwarded=extras.is_forwarded,
            reply_to_message=extras.reply_to_message,
            reply_to_sender=extras.reply_to_sender,
            client_id=temp_id,
            optimistic=True,
        )

    def to_draft(self) -> MessageDraft:
        return MessageDraft(
            sender_email=self.sender_email,
            receiver_email=self.receiver_email,
            sender_role=self.sender_role,
            message=self.message,
            client_id=self.client_id or new_client_id(),
            is_deleted=self.is_deleted,
            is_forwarded=self.is_forwarded,
            reply_to_message=self.reply_to_message,
            reply_to_sender=self.reply_to_sender,
        )

    @property
    def conversation_key(self) -> ConversationKey:
        return ConversationKey.for_pair(self.sender_email, self.receiver_email)

    @property
    def display_body(self) -> str:
        """Body as rendered; deleted messages keep their text but never show it."""
        return DELETED_MESSAGE_TEXT if self.is_deleted else self.message

    def is_between(self, first_email: str, second_email: str) -> bool:
        return (
            self.sender_email == first_email and self.receiver_email == second_email
        ) or (self.sender_email == second_email and self.receiver_email == first_email)

    def merged_with(self, incoming: Message) -> Message:
        """Field-merge an authoritative record over this one."""
        return replace(
            incoming,
            client_id=incoming.client_id or self.client_id,
            optimistic=False,
            unsynced=False,
        )

    def edited(self, new_body: str) -> Message:
        if self.is_deleted:
            raise ValueError("Deleted messages cannot be edited")
        return replace(self, message=new_body, unsynced=False)

    def soft_deleted(self) -> Message:
        return replace(self, is_deleted=True, unsynced=False)

    def mark_unsynced(self) -> Message:
        return replace(self, unsynced=True)
