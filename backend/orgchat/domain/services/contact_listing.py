"""
Contact Listing - Search, grouping and de-duplication of resolved contacts.
"""

from typing import Iterable

from orgchat.domain.entities.contact import Contact


def dedupe_contacts(contacts: Iterable[Contact], exclude_email: str = "") -> list[Contact]:
    """Keep the first contact per email, preserving order."""
    seen: set[str] = set()
    unique: list[Contact] = []
    for contact in contacts:
        if contact.email == exclude_email or contact.email in seen:
            continue
        seen.add(contact.email)
        unique.append(contact)
    return unique


def filter_contacts(contacts: Iterable[Contact], search: str) -> list[Contact]:
    query = (search or "").strip().lower()
    if not query:
        return list(contacts)
    return [
        c
        for c in contacts
        if query in (c.name or "").lower()
        or query in (c.email or "").lower()
        or query in (c.domain or "").lower()
    ]


def group_contacts_by_role(contacts: Iterable[Contact]) -> dict[str, list[Contact]]:
    groups: dict[str, list[Contact]] = {}
    for contact in contacts:
        groups.setdefault(contact.role_label, []).append(contact)
    return groups


def find_contact(contacts: Iterable[Contact], email: str) -> Contact | None:
    return next((c for c in contacts if c.email == email), None)
