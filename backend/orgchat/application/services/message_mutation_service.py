"""
MessageMutationService - Edit, soft delete and forward for the active session.
"""

from typing import Optional

from orgchat.application.commands.messages import (
    DeleteMessageCommand,
    DeleteMessageHandler,
    EditMessageCommand,
    EditMessageHandler,
    ForwardMessageCommand,
    ForwardMessageHandler,
)
from orgchat.domain.entities.contact import Contact
from orgchat.domain.entities.message import Message


class MessageMutationService:
    def __init__(
        self,
        edit_handler: EditMessageHandler,
        delete_handler: DeleteMessageHandler,
        forward_handler: ForwardMessageHandler,
    ):
        self._edit = edit_handler
        self._delete = delete_handler
        self._forward = forward_handler

    async def edit(self, message_id: str, new_body: str) -> bool:
        return await self._edit.execute(EditMessageCommand(message_id, new_body))

    async def soft_delete(self, message_id: str) -> bool:
        return await self._delete.execute(DeleteMessageCommand(message_id))

    async def forward(self, message: Message, target: Contact) -> Optional[Message]:
        return await self._forward.execute(ForwardMessageCommand(message, target))
