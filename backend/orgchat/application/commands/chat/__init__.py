"""Chat commands."""

from orgchat.application.commands.chat.send_message import (
    OptimisticMessagePipeline,
    SendMessageCommand,
    SendMessageResult,
)

__all__ = [
    "OptimisticMessagePipeline",
    "SendMessageCommand",
    "SendMessageResult",
]
