"""Unit tests for profile merging, sanitizing and serialized updates (no database)."""

import asyncio
import json
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lib import profile_store
from lib.errors import ProfileNotFoundError, ProfileValidationError, StoreUnavailableError
from lib.models import ProfileFields, ProfileUpdateRequest
from lib.profile_store import decode_update_body, merge_profile, sanitize_user, validate_profile_update

from fake_db import FakePool, make_user


@pytest.fixture
def pool(monkeypatch):
    """Install a fake pool holding two users."""
    fake = FakePool(make_user("user-1"), make_user("user-2", name="Grace"))
    monkeypatch.setattr(profile_store, "get_pool", lambda: fake)
    return fake


# ---------------------------------------------------------------------------
# merge_profile
# ---------------------------------------------------------------------------

class TestMergeProfile:

    def test_overlays_only_supplied_fields(self):
        """Only the supplied sub-fields should change."""
        current = {"bio": "old", "phone": "1", "location": "Oslo"}
        merged = merge_profile(current, ProfileFields(phone="2"))
        assert merged == {"bio": "old", "phone": "2", "location": "Oslo"}

    def test_keeps_keys_outside_known_fields(self):
        """Stored keys outside the known fields should survive a merge."""
        current = {"bio": "old", "avatar": "a.png"}
        merged = merge_profile(current, ProfileFields(bio="new"))
        assert merged == {"bio": "new", "avatar": "a.png"}

    def test_none_update_is_a_copy(self):
        """No profile update should return an equal, separate dict."""
        current = {"bio": "old"}
        merged = merge_profile(current, None)
        assert merged == current
        assert merged is not current

    def test_fields_added_when_absent(self):
        """Supplied sub-fields should be added to an empty profile."""
        assert merge_profile({}, ProfileFields(location="Rome")) == {"location": "Rome"}


# ---------------------------------------------------------------------------
# sanitize_user
# ---------------------------------------------------------------------------

class TestSanitizeUser:

    def test_password_removed(self):
        """Password should be removed from the user row."""
        user = sanitize_user(make_user())
        assert "password" not in user
        assert user["name"] == "Ada"

    def test_profile_json_decoded(self):
        """JSONB text should be decoded into a dict."""
        user = sanitize_user(make_user(profile={"bio": "x"}))
        assert user["profile"] == {"bio": "x"}

    def test_null_profile_becomes_empty(self):
        """A null profile column should become an empty dict."""
        row = make_user()
        row["profile"] = None
        assert sanitize_user(row)["profile"] == {}


# ---------------------------------------------------------------------------
# validate_profile_update
# ---------------------------------------------------------------------------

class TestValidateProfileUpdate:

    def test_strings_are_trimmed(self):
        """Name and sub-fields should be trimmed."""
        update = validate_profile_update({"name": "  Ada ", "profile": {"bio": " hi ", "phone": " "}})
        assert update.name == "Ada"
        assert update.profile.supplied() == {"bio": "hi", "phone": ""}

    def test_null_means_not_supplied(self):
        """JSON null should count as not supplied."""
        update = validate_profile_update({"name": None, "profile": {"bio": None}})
        assert update.is_empty()

    def test_none_payload_is_empty_update(self):
        """A missing payload should parse as an empty update."""
        assert validate_profile_update(None).is_empty()

    def test_blank_name_error_shape(self):
        """Blank name error should carry path, message, value and location."""
        with pytest.raises(ProfileValidationError) as exc_info:
            validate_profile_update({"name": " "})
        assert exc_info.value.errors == [{
            "type": "field",
            "path": "name",
            "msg": "Name cannot be empty",
            "value": " ",
            "location": "body",
        }]

    def test_non_object_body_rejected(self):
        """A JSON array body should fail validation."""
        with pytest.raises(ProfileValidationError):
            validate_profile_update(["name"])


class TestDecodeUpdateBody:

    def test_valid_json_decoded(self):
        """A JSON object body should decode to a dict."""
        assert decode_update_body(b'{"name": "Ada"}') == {"name": "Ada"}

    def test_blank_body_is_none(self):
        """An empty or whitespace body should mean no fields supplied."""
        assert decode_update_body(b"") is None
        assert decode_update_body(b"  \n") is None

    @pytest.mark.parametrize("raw", [b'{"name": ', b"not json", b"\x80abc"])
    def test_invalid_json_raises_validation_error(self, raw):
        """Undecodable bodies should raise a body-level validation error."""
        with pytest.raises(ProfileValidationError) as exc_info:
            decode_update_body(raw)
        assert exc_info.value.errors[0]["msg"] == "Invalid JSON body"


# ---------------------------------------------------------------------------
# get_profile / update_profile
# ---------------------------------------------------------------------------

class TestStoreOperations:

    def test_get_profile_strips_password(self, pool):
        """Stored password should never be returned."""
        user = asyncio.run(profile_store.get_profile("user-1"))
        assert "password" not in user
        assert user["id"] == "user-1"

    def test_get_profile_missing_user(self, pool):
        """Unknown user should raise ProfileNotFoundError."""
        with pytest.raises(ProfileNotFoundError):
            asyncio.run(profile_store.get_profile("ghost"))

    def test_no_pool_raises_unavailable(self, monkeypatch):
        """Missing pool should raise StoreUnavailableError."""
        monkeypatch.setattr(profile_store, "get_pool", lambda: None)
        with pytest.raises(StoreUnavailableError):
            asyncio.run(profile_store.get_profile("user-1"))

    def test_update_returns_post_update_state(self, pool):
        """Update should return the row as written."""
        update = ProfileUpdateRequest(name="Ada L", profile={"location": "Paris"})
        user = asyncio.run(profile_store.update_profile("user-1", update))
        assert user["name"] == "Ada L"
        assert user["profile"] == {"bio": "Gardener", "phone": "555-0100", "location": "Paris"}
        assert user["updated_at"] > user["created_at"]

    def test_empty_update_skips_write(self, pool):
        """Empty update should not touch the database."""
        user = asyncio.run(profile_store.update_profile("user-1", ProfileUpdateRequest()))
        assert pool.conn.writes == 0
        assert user == sanitize_user(pool.users["user-1"])

    def test_concurrent_updates_for_same_user_both_apply(self, pool):
        """Concurrent sub-field updates for one user should both persist."""
        async def run():
            await asyncio.gather(
                profile_store.update_profile("user-1", ProfileUpdateRequest(profile={"bio": "Painter"})),
                profile_store.update_profile("user-1", ProfileUpdateRequest(profile={"phone": "555-0199"})),
            )

        asyncio.run(run())
        assert pool.stored_profile("user-1") == {
            "bio": "Painter",
            "phone": "555-0199",
            "location": "Oslo",
        }
        assert pool.conn.writes == 2

    def test_concurrent_updates_for_different_users(self, pool):
        """Updates for different users should not interfere."""
        async def run():
            return await asyncio.gather(
                profile_store.update_profile("user-1", ProfileUpdateRequest(name="Ada B")),
                profile_store.update_profile("user-2", ProfileUpdateRequest(name="Grace H")),
            )

        first, second = asyncio.run(run())
        assert first["name"] == "Ada B"
        assert second["name"] == "Grace H"
        assert json.loads(pool.users["user-2"]["profile"])["bio"] == "Gardener"
