"""
Replies - Builds the quote attached to a reply.
"""

from typing import Iterable, Optional

from orgchat.domain.entities.contact import Contact
from orgchat.domain.entities.identity import Identity
from orgchat.domain.entities.message import Message, MessageExtras
from orgchat.domain.services.contact_listing import find_contact


def quoted_sender_name(
    message: Message,
    identity: Identity,
    contacts: Iterable[Contact],
    self_name: Optional[str] = None,
) -> str:
    if message.sender_email == identity.email:
        return self_name or identity.email
    contact = find_contact(contacts, message.sender_email)
    return contact.display_name if contact else message.sender_email


def reply_extras(
    message: Message,
    identity: Identity,
    contacts: Iterable[Contact],
    self_name: Optional[str] = None,
) -> MessageExtras:
    if message.is_deleted:
        raise ValueError("Cannot reply to a deleted message")
    return MessageExtras(
        reply_to_message=message.message,
        reply_to_sender=quoted_sender_name(message, identity, contacts, self_name),
    )
