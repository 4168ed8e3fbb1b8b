"""
Permission Matrix - Who may message whom.

The whole policy lives in PERMISSION_MATRIX; adding a role or changing a
visibility rule is a change to that table only.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from orgchat.domain.entities.contact import Contact
from orgchat.domain.entities.identity import Identity
from orgchat.domain.value_objects.role import Role


class DomainScope(Enum):
    ANY = "any"
    SAME = "same"


@dataclass(frozen=True)
class ContactRule:
    counterpart: Role
    scope: DomainScope = DomainScope.ANY
    exclude_self: bool = False

    def applies_to(self, domain: Optional[str]) -> bool:
        """Same-domain rules never apply to a member without a domain."""
        return self.scope is DomainScope.ANY or bool(domain)

    def admits(self, email: str, domain: Optional[str], contact: Contact) -> bool:
        if contact.role is not self.counterpart:
            return False
        if self.exclude_self and contact.email == email:
            return False
        if self.scope is DomainScope.SAME:
            return bool(domain) and contact.domain == domain
        return True


PERMISSION_MATRIX: dict[Role, tuple[ContactRule, ...]] = {
    Role.SUPER_ADMIN: (ContactRule(Role.ADMIN),),
    Role.ADMIN: (
        ContactRule(Role.SUPER_ADMIN),
        ContactRule(Role.ADMIN, exclude_self=True),
        ContactRule(Role.WORKER, scope=DomainScope.SAME),
    ),
    Role.WORKER: (
        ContactRule(Role.ADMIN, scope=DomainScope.SAME),
        ContactRule(Role.WORKER, scope=DomainScope.SAME, exclude_self=True),
    ),
}


def rules_for(role: Role) -> tuple[ContactRule, ...]:
    return PERMISSION_MATRIX.get(role, ())


def can_message(identity: Identity, contact: Contact) -> bool:
    if contact.email == identity.email:
        return False
    return any(
        rule.admits(identity.email, identity.domain, contact)
        for rule in rules_for(identity.role)
    )
