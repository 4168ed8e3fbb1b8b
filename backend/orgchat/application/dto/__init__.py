"""Data Transfer Objects for rows and change-feed payloads."""

from orgchat.application.dto.contact import ContactRecord
from orgchat.application.dto.message import (
    ChangeEventPayload,
    MessageRecord,
    MessageRecordList,
    MessageRef,
)

__all__ = [
    "ContactRecord",
    "ChangeEventPayload",
    "MessageRecord",
    "MessageRecordList",
    "MessageRef",
]
