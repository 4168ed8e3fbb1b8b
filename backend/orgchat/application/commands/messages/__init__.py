"""Message mutation commands."""

from orgchat.application.commands.messages.edit_message import (
    EditMessageCommand,
    EditMessageHandler,
)
from orgchat.application.commands.messages.delete_message import (
    DeleteMessageCommand,
    DeleteMessageHandler,
)
from orgchat.application.commands.messages.forward_message import (
    ForwardMessageCommand,
    ForwardMessageHandler,
)

__all__ = [
    "EditMessageCommand",
    "EditMessageHandler",
    "DeleteMessageCommand",
    "DeleteMessageHandler",
    "ForwardMessageCommand",
    "ForwardMessageHandler",
]
