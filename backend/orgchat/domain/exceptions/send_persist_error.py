"""
SendPersistError - Raised when a new message cannot be persisted.
Degrades to: optimistic placeholder rolled back, failure result to the caller.
"""

from orgchat.domain.exceptions.messaging_error import MessagingError


class SendPersistError(MessagingError):
    """Raised when the persistence layer rejects a send."""
