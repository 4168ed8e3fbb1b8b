"""Message DTOs: persisted rows and change-feed payloads."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator

from orgchat.domain.entities.message import Message
from orgchat.domain.ports.change_feed import ChangeEvent, ChangeKind
from orgchat.domain.value_objects.role import Role

MESSAGES_TABLE = "messages"


class MessageRecord(BaseModel):
    """A row of the messages table."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    sender_email: str
    receiver_email: str
    sender_role: str
    message: str
    is_deleted: bool = False
    is_forwarded: bool = False
    reply_to_message: Optional[str] = None
    reply_to_sender: Optional[str] = None
    created_at: datetime
    client_id: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value) if value is not None else value

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive timestamps from the store are UTC
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    def to_entity(self) -> Message:
        return Message(
            id=self.id,
            sender_email=self.sender_email,
            receiver_email=self.receiver_email,
            sender_role=Role.parse(self.sender_role),
            message=self.message,
            created_at=self.created_at,
            is_deleted=self.is_deleted,
            is_forwarded=self.is_forwarded,
            reply_to_message=self.reply_to_message,
            reply_to_sender=self.reply_to_sender,
            client_id=self.client_id,
        )

    @classmethod
    def from_entity(cls, message: Message) -> MessageRecord:
        return cls(
            id=message.id,
            sender_email=message.sender_email,
            receiver_email=message.receiver_email,
            sender_role=message.sender_role.value,
            message=message.message,
            is_deleted=message.is_deleted,
            is_forwarded=message.is_forwarded,
            reply_to_message=message.reply_to_message,
            reply_to_sender=message.reply_to_sender,
            created_at=message.created_at,
            client_id=message.client_id,
        )


MessageRecordList = TypeAdapter(list[MessageRecord])


class MessageRef(BaseModel):
    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value) if value is not None else value


class ChangeEventPayload(BaseModel):
    """Wire format of a change-feed event: `{type, table, new, old}`."""

    type: ChangeKind
    table: str = MESSAGES_TABLE
    new: Optional[MessageRecord] = None
    old: Optional[MessageRef] = None

    def to_event(self) -> ChangeEvent:
        if self.type in (ChangeKind.INSERT, ChangeKind.UPDATE):
            if self.new is None:
                raise ValueError(f"{self.type.value} event without a new record")
            return ChangeEvent(kind=self.type, new=self.new.to_entity())
        if self.old is None:
            raise ValueError("DELETE event without an old record")
        return ChangeEvent(kind=self.type, old_id=self.old.id)

    @classmethod
    def from_event(cls, event: ChangeEvent) -> ChangeEventPayload:
        return cls(
            type=event.kind,
            new=MessageRecord.from_entity(event.new) if event.new else None,
            old=MessageRef(id=event.old_id) if event.old_id else None,
        )
