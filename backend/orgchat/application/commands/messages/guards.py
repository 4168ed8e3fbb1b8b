"""
Mutation guards - Which local messages the caller may edit or delete.
"""

from typing import Optional

from orgchat.domain.entities.identity import Identity
from orgchat.domain.entities.message import Message


def mutation_rejection(message: Optional[Message], identity: Identity) -> Optional[str]:
    """Return why `message` cannot be mutated by `identity`, or None if it can."""
    if message is None:
        return "message not found"
    if message.optimistic:
        # No server id yet, an update would match nothing
        return "message is still being sent"
    if message.is_deleted:
        return "message is deleted"
    if message.sender_email != identity.email:
        return "message was not sent by the current user"
    return None
