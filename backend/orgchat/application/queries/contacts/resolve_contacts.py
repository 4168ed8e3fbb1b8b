"""
ResolveContacts Query - Who the current member may message.

Each permission-matrix rule is one directory sub-query. A failing sub-query
contributes nothing; the query as a whole never raises.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from orgchat.application.common.interfaces import Query, QueryHandler
from orgchat.domain.entities.contact import Contact
from orgchat.domain.entities.identity import Identity
from orgchat.domain.exceptions import DirectoryReadError
from orgchat.domain.ports.directory import Directory, DirectoryFilter
from orgchat.domain.services.contact_listing import dedupe_contacts
from orgchat.domain.services.permission_matrix import (
    ContactRule,
    DomainScope,
    rules_for,
)
from orgchat.domain.value_objects.role import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolveContactsQuery(Query[list[Contact]]):
    email: str
    role: Role
    domain: Optional[str] = None

    @classmethod
    def for_identity(cls, identity: Identity) -> ResolveContactsQuery:
        return cls(email=identity.email, role=identity.role, domain=identity.domain)


class ContactResolver(QueryHandler[list[Contact]]):
    def __init__(self, directory: Directory):
        self._directory = directory

    async def execute(self, query: ResolveContactsQuery) -> list[Contact]:
        rules = [r for r in rules_for(query.role) if r.applies_to(query.domain)]
        results = await asyncio.gather(
            *(self._fetch(rule, query) for rule in rules)
        )
        contacts = [contact for batch in results for contact in batch]
        return dedupe_contacts(contacts, exclude_email=query.email)

    async def _fetch(self, rule: ContactRule, query: ResolveContactsQuery) -> list[Contact]:
        where = DirectoryFilter(
            domain=query.domain if rule.scope is DomainScope.SAME else None,
            exclude_email=query.email if rule.exclude_self else None,
        )
        try:
            rows = await self._directory.query_table(rule.counterpart, where)
        except Exception as e:
            error = e if isinstance(e, DirectoryReadError) else DirectoryReadError(str(e), cause=e)
            logger.warning(
                f"[ContactResolver] {rule.counterpart.table} lookup failed, "
                f"skipping: {error.message}"
            )
            return []
        # The directory filter is not trusted to have been applied
        return [c for c in rows if rule.admits(query.email, query.domain, c)]
