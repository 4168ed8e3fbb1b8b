"""
HistoryLoadError - Raised when the message history fetch fails.
Degrades to: empty message list (or the cached snapshot when enabled).
"""

from orgchat.domain.exceptions.messaging_error import MessagingError


class HistoryLoadError(MessagingError):
    """Raised when a conversation's history cannot be loaded."""
