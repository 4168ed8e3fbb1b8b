"""
LoadConversation Query - Full ordered history between the caller and a contact.
"""

from dataclasses import dataclass

from orgchat.application.common.interfaces import Query, QueryHandler
from orgchat.domain.entities.message import Message
from orgchat.domain.exceptions import HistoryLoadError
from orgchat.domain.ports.message_store import MessageStore
from orgchat.domain.services.timeline import conversation_view


@dataclass(frozen=True)
class LoadConversationQuery(Query[list[Message]]):
    owner_email: str
    contact_email: str


class LoadConversationHandler(QueryHandler[list[Message]]):
    def __init__(self, store: MessageStore):
        self._store = store

    async def execute(self, query: LoadConversationQuery) -> list[Message]:
        """
        Raises:
            HistoryLoadError: If the store cannot be read
        """
        try:
            rows = await self._store.query_pair(query.owner_email, query.contact_email)
        except HistoryLoadError:
            raise
        except Exception as e:
            raise HistoryLoadError(
                f"Failed to load history with {query.contact_email}: {e}", cause=e
            ) from e
        return list(conversation_view(rows, query.owner_email, query.contact_email))
