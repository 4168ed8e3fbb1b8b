"""
Unit tests for the messaging value objects and entities.

Run with: pytest tests/test_domain_model.py -v
"""

from dataclasses import replace

import pytest

from conftest import BASE_TIME, make_message
from orgchat.domain.entities.identity import Identity
from orgchat.domain.entities.message import (
    DELETED_MESSAGE_TEXT,
    OPTIMISTIC_ID_PREFIX,
    Message,
    MessageExtras,
)
from orgchat.domain.value_objects.conversation_key import ConversationKey
from orgchat.domain.value_objects.role import Role
from orgchat.domain.value_objects.user_email import UserEmail


class TestRole:
    def test_parse_accepts_legacy_superadmin_alias(self):
        assert Role.parse("superadmin") is Role.SUPER_ADMIN
        assert Role.parse("SuperAdmin") is Role.SUPER_ADMIN
        assert Role.parse("super_admin") is Role.SUPER_ADMIN

    def test_parse_rejects_unknown_role(self):
        with pytest.raises(ValueError):
            Role.parse("owner")

    def test_labels(self):
        assert Role.SUPER_ADMIN.label == "Super Admin"
        assert Role.ADMIN.label == "Admin"
        assert Role.WORKER.label == "Worker"


class TestConversationKey:
    def test_key_is_symmetric(self):
        assert ConversationKey.for_pair("a@x.com", "b@x.com") == ConversationKey.for_pair(
            "b@x.com", "a@x.com"
        )

    def test_key_value_is_sorted_join(self):
        assert ConversationKey.for_pair("z@x.com", "a@x.com").value == "a@x.com|z@x.com"

    def test_unsorted_key_is_rejected(self):
        with pytest.raises(ValueError):
            ConversationKey("z@x.com", "a@x.com")

    def test_missing_participant_is_rejected(self):
        with pytest.raises(ValueError):
            ConversationKey.for_pair("a@x.com", "")

    def test_includes(self):
        key = ConversationKey.for_pair("a@x.com", "b@x.com")
        assert key.includes("a@x.com")
        assert not key.includes("c@x.com")

    def test_separator_in_local_part_is_accepted(self):
        key = ConversationKey.for_pair("a|b@x.com", "c@x.com")
        assert key.participants == ("a|b@x.com", "c@x.com")
        assert key.includes("a|b@x.com")
        assert not key.includes("a")


class TestIdentity:
    def test_from_auth_parses_role_and_blank_domain(self):
        identity = Identity.from_auth(
            {"id": 7, "email": "root@hq.com", "role": "superadmin", "domain": ""}
        )
        assert identity.id == "7"
        assert identity.role is Role.SUPER_ADMIN
        assert identity.domain is None

    def test_invalid_email_is_rejected(self):
        with pytest.raises(ValueError):
            Identity(id="1", email="not-an-email", role=Role.ADMIN)

    @pytest.mark.parametrize("email", ["a@", "@acme.com", "a b@acme.com", ""])
    def test_malformed_email_is_rejected(self, email):
        with pytest.raises(ValueError):
            Identity(id="1", email=email, role=Role.ADMIN)


class TestUserEmail:
    def test_parts_split_on_last_at(self):
        email = UserEmail('"a@b"@Acme.COM')
        assert email.local_part == '"a@b"'
        assert email.domain_part == "acme.com"
        assert str(email) == '"a@b"@Acme.COM'


class TestMessage:
    def test_optimistic_placeholder_uses_temp_id_as_client_id(self):
        placeholder = Message.create_optimistic(
            "a@acme.com",
            "b@acme.com",
            Role.ADMIN,
            "hi",
            extras=MessageExtras(reply_to_message="earlier", reply_to_sender="Bob"),
        )
        assert placeholder.optimistic
        assert placeholder.id.startswith(OPTIMISTIC_ID_PREFIX)
        assert placeholder.client_id == placeholder.id
        assert placeholder.reply_to_sender == "Bob"

    def test_draft_carries_client_id_but_no_id(self):
        placeholder = Message.create_optimistic("a@acme.com", "b@acme.com", Role.ADMIN, "hi")
        draft = placeholder.to_draft()
        assert draft.client_id == placeholder.id
        assert not hasattr(draft, "id")

    def test_deleted_message_hides_body(self):
        message = make_message(body="secret").soft_deleted()
        assert message.display_body == DELETED_MESSAGE_TEXT
        assert message.message == "secret"

    def test_deleted_message_cannot_be_edited(self):
        with pytest.raises(ValueError):
            make_message().soft_deleted().edited("again")

    def test_merge_keeps_local_client_id_and_clears_flags(self):
        local = replace(make_message(id="m1", client_id="opt-1"), unsynced=True)
        incoming = make_message(id="m1", body="edited", at=BASE_TIME)
        merged = local.merged_with(incoming)
        assert merged.client_id == "opt-1"
        assert merged.message == "edited"
        assert not merged.unsynced
        assert not merged.optimistic
