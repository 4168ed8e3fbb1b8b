"""
SubscriptionError - Raised when the realtime channel handshake fails.
Degrades to: channel left detached until the next contact switch.
"""

from orgchat.domain.exceptions.messaging_error import MessagingError


class SubscriptionError(MessagingError):
    """Raised when a realtime subscription cannot be established."""
