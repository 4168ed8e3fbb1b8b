"""Contact queries."""

from orgchat.application.queries.contacts.resolve_contacts import (
    ContactResolver,
    ResolveContactsQuery,
)
from orgchat.application.queries.contacts.get_self import GetSelfHandler, GetSelfQuery

__all__ = [
    "ContactResolver",
    "ResolveContactsQuery",
    "GetSelfHandler",
    "GetSelfQuery",
]
