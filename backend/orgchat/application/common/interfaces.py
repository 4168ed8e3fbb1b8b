"""
Command/query seams of the messaging core.

Commands change the conversation (send, edit, delete, forward); queries read
the directory or the message store. Every handler takes exactly one request
object and is awaited by a ChatSession.

    @dataclass(frozen=True)
    class DeleteMessageCommand(Command[bool]):
        message_id: str

    class DeleteMessageHandler(CommandHandler[bool]):
        async def execute(self, command: DeleteMessageCommand) -> bool:
            ...
"""
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

R = TypeVar("R")


class Command(ABC, Generic[R]):
    """Request that mutates messages; R is what the handler reports back"""


class CommandHandler(ABC, Generic[R]):
    @abstractmethod
    async def execute(self, command: Command[R]) -> R:
        """Apply the command; failures are reported in R, not raised"""
        ...


class Query(ABC, Generic[R]):
    """Read-only request against the directory or message store"""


class QueryHandler(ABC, Generic[R]):
    @abstractmethod
    async def execute(self, query: Query[R]) -> R:
        ...
