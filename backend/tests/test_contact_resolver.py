"""
Unit tests for contact resolution and the permission matrix.

Run with: pytest tests/test_contact_resolver.py -v
"""

import pytest

from conftest import FakeDirectory
from orgchat.application.queries.contacts import (
    ContactResolver,
    GetSelfHandler,
    GetSelfQuery,
    ResolveContactsQuery,
)
from orgchat.domain.entities.contact import Contact
from orgchat.domain.entities.identity import Identity
from orgchat.domain.services.permission_matrix import can_message
from orgchat.domain.value_objects.role import Role


def _emails(contacts):
    return [c.email for c in contacts]


class TestContactResolver:
    @pytest.mark.asyncio
    async def test_worker_sees_same_domain_admins_and_workers(self, org_contacts, worker_identity):
        resolver = ContactResolver(FakeDirectory(org_contacts))

        contacts = await resolver.execute(ResolveContactsQuery.for_identity(worker_identity))

        assert _emails(contacts) == ["alice@acme.com", "bob@acme.com", "walt@acme.com"]

    @pytest.mark.asyncio
    async def test_admin_sees_super_admins_all_admins_and_domain_workers(
        self, org_contacts, admin_identity
    ):
        resolver = ContactResolver(FakeDirectory(org_contacts))

        contacts = await resolver.execute(ResolveContactsQuery.for_identity(admin_identity))

        assert _emails(contacts) == [
            "sam@hq.com",
            "bob@acme.com",
            "olga@other.com",
            "wendy@acme.com",
            "walt@acme.com",
        ]

    @pytest.mark.asyncio
    async def test_super_admin_sees_only_admins(self, org_contacts):
        resolver = ContactResolver(FakeDirectory(org_contacts))

        contacts = await resolver.execute(ResolveContactsQuery("sam@hq.com", Role.SUPER_ADMIN))

        assert {c.role for c in contacts} == {Role.ADMIN}
        assert len(contacts) == 3

    @pytest.mark.asyncio
    async def test_failed_table_contributes_nothing(self, org_contacts, admin_identity):
        resolver = ContactResolver(FakeDirectory(org_contacts, failing={Role.WORKER}))

        contacts = await resolver.execute(ResolveContactsQuery.for_identity(admin_identity))

        assert _emails(contacts) == ["sam@hq.com", "bob@acme.com", "olga@other.com"]

    @pytest.mark.asyncio
    async def test_all_tables_failing_yields_empty_list(self, org_contacts, worker_identity):
        directory = FakeDirectory(org_contacts, failing={Role.ADMIN, Role.WORKER})

        contacts = await ContactResolver(directory).execute(
            ResolveContactsQuery.for_identity(worker_identity)
        )

        assert contacts == []

    @pytest.mark.asyncio
    async def test_worker_without_domain_queries_nothing(self, org_contacts):
        directory = FakeDirectory(org_contacts)

        contacts = await ContactResolver(directory).execute(
            ResolveContactsQuery("loner@acme.com", Role.WORKER, None)
        )

        assert contacts == []
        assert directory.queries == []

    @pytest.mark.asyncio
    async def test_rows_are_filtered_even_if_directory_ignores_the_filter(
        self, org_contacts, worker_identity
    ):
        resolver = ContactResolver(FakeDirectory(org_contacts, honor_filter=False))

        contacts = await resolver.execute(ResolveContactsQuery.for_identity(worker_identity))

        assert "wendy@acme.com" not in _emails(contacts)
        assert all(c.domain == "acme.com" for c in contacts)

    @pytest.mark.asyncio
    async def test_duplicate_emails_are_collapsed(self, worker_identity):
        dup = Contact(id="a1", name="Alice", email="alice@acme.com", role=Role.ADMIN, domain="acme.com")
        resolver = ContactResolver(FakeDirectory([dup, dup]))

        contacts = await resolver.execute(ResolveContactsQuery.for_identity(worker_identity))

        assert _emails(contacts) == ["alice@acme.com"]


class TestCanMessage:
    def test_worker_cannot_message_other_domain_admin(self, org_contacts, worker_identity):
        olga = next(c for c in org_contacts if c.email == "olga@other.com")
        assert not can_message(worker_identity, olga)

    def test_worker_cannot_message_super_admin(self, org_contacts, worker_identity):
        sam = next(c for c in org_contacts if c.role is Role.SUPER_ADMIN)
        assert not can_message(worker_identity, sam)

    def test_admin_can_message_other_domain_admin(self, org_contacts, admin_identity):
        olga = next(c for c in org_contacts if c.email == "olga@other.com")
        assert can_message(admin_identity, olga)

    def test_nobody_can_message_themselves(self, org_contacts, admin_identity):
        alice = next(c for c in org_contacts if c.email == admin_identity.email)
        assert not can_message(admin_identity, alice)


class TestGetSelf:
    @pytest.mark.asyncio
    async def test_returns_own_row(self, org_contacts, admin_identity):
        me = await GetSelfHandler(FakeDirectory(org_contacts)).execute(
            GetSelfQuery(admin_identity.email, admin_identity.role)
        )
        assert me.name == "Alice"

    @pytest.mark.asyncio
    async def test_failure_returns_none(self, org_contacts, admin_identity):
        handler = GetSelfHandler(FakeDirectory(org_contacts, failing={Role.ADMIN}))
        assert await handler.execute(GetSelfQuery(admin_identity.email, Role.ADMIN)) is None

    def test_identity_domain_is_passed_through(self):
        identity = Identity(id="9", email="x@acme.com", role=Role.WORKER, domain="acme.com")
        assert ResolveContactsQuery.for_identity(identity).domain == "acme.com"
