"""
MutationPersistError - Raised when an edit or soft delete cannot be persisted.
Degrades to: local state kept, message flagged as unsynced.
"""

from orgchat.domain.exceptions.messaging_error import MessagingError


class MutationPersistError(MessagingError):
    """Raised when the persistence layer rejects an edit or soft delete."""
