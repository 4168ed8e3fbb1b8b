"""Chat-related queries."""

from orgchat.application.queries.chat.load_conversation import (
    LoadConversationHandler,
    LoadConversationQuery,
)

__all__ = [
    "LoadConversationHandler",
    "LoadConversationQuery",
]
