"""Tests for webhook envelope and user snapshot decoding."""

import json

import pytest

from seatmanager.errors import DecodeError
from seatmanager.webhooks.events import (
    ExternalUserSnapshot,
    decode_event,
    decode_user_snapshot,
    is_user_event,
)


def _body(payload) -> bytes:
    return json.dumps(payload).encode("utf-8")


class TestDecodeEvent:
    """Test envelope parsing."""

    def test_decodes_type_and_keeps_data_opaque(self):
        event = decode_event(_body({"type": "user.created", "object": "event", "data": {"id": "user_1"}}))
        assert event.type == "user.created"
        assert event.object == "event"
        assert event.data == {"id": "user_1"}

    def test_unknown_type_is_not_an_error(self):
        event = decode_event(_body({"type": "session.created", "data": {"id": "sess_1"}}))
        assert event.type == "session.created"
        assert is_user_event(event.type) is False

    def test_malformed_json_raises_decode_error(self):
        with pytest.raises(DecodeError):
            decode_event(b"{not json")

    def test_missing_type_raises_decode_error(self):
        with pytest.raises(DecodeError):
            decode_event(_body({"data": {"id": "user_1"}}))

    def test_non_object_body_raises_decode_error(self):
        with pytest.raises(DecodeError):
            decode_event(_body(["user.created"]))


class TestDecodeUserSnapshot:
    """Test user payload parsing."""

    def test_full_payload(self, user_payload):
        event = decode_event(_body({"type": "user.created", "data": user_payload(
            external_accounts=[{"provider": "oauth_google", "email_address": "ann@gmail.com"}],
        )}))
        snapshot = decode_user_snapshot(event)

        assert snapshot.id == "user_ext_1"
        assert snapshot.primary_email() == "ann@example.com"
        assert snapshot.full_name() == "Ann Lee"
        assert snapshot.image_url == "https://img.example.com/ann.png"
        assert snapshot.external_accounts[0].provider == "oauth_google"
        assert snapshot.password_enabled is True

    def test_first_email_is_authoritative(self):
        snapshot = ExternalUserSnapshot(
            id="u",
            email_addresses=[{"email_address": "first@example.com"}, {"email_address": "second@example.com"}],
        )
        assert snapshot.primary_email() == "first@example.com"

    def test_null_lists_become_empty(self):
        event = decode_event(_body({"type": "user.updated", "data": {
            "id": "user_1", "email_addresses": None, "external_accounts": None, "password_enabled": None,
        }}))
        snapshot = decode_user_snapshot(event)
        assert snapshot.email_addresses == []
        assert snapshot.external_accounts == []
        assert snapshot.password_enabled is False
        assert snapshot.primary_email() is None

    def test_deleted_payload_only_needs_id(self):
        event = decode_event(_body({"type": "user.deleted", "data": {"id": "user_1", "deleted": True}}))
        snapshot = decode_user_snapshot(event)
        assert snapshot.id == "user_1"

    def test_missing_id_raises_decode_error(self):
        event = decode_event(_body({"type": "user.created", "data": {"first_name": "Ann"}}))
        with pytest.raises(DecodeError, match="id"):
            decode_user_snapshot(event)

    def test_empty_id_raises_decode_error(self):
        event = decode_event(_body({"type": "user.created", "data": {"id": ""}}))
        with pytest.raises(DecodeError):
            decode_user_snapshot(event)

    def test_non_object_data_raises_decode_error(self):
        event = decode_event(_body({"type": "user.created", "data": "user_1"}))
        with pytest.raises(DecodeError):
            decode_user_snapshot(event)


class TestFullName:
    """Test display-name composition."""

    @pytest.mark.parametrize("first,last,expected", [
        ("Ann", "Lee", "Ann Lee"),
        ("Ann", None, "Ann"),
        (None, "Lee", "Lee"),
        ("Ann", "", "Ann"),
        ("", "  ", ""),
        (None, None, ""),
    ])
    def test_full_name(self, first, last, expected):
        snapshot = ExternalUserSnapshot(id="u", first_name=first, last_name=last)
        assert snapshot.full_name() == expected
