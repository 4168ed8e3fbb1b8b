"""
DirectoryReadError - Raised when a contact or self-info fetch fails.
Degrades to: zero contacts for that sub-query / no user info.
"""

from orgchat.domain.exceptions.messaging_error import MessagingError


class DirectoryReadError(MessagingError):
    """Raised when the member directory cannot be read."""
