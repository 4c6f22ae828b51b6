"""Tests for UserRepository CRUD operations."""

import pytest

from seatmanager.database.models import UserDB
from seatmanager.errors import DuplicateEmailError, DuplicateExternalIDError, NotFoundError
from seatmanager.models.user import AuthProvider, PrivacySetting, User


def _user(external_user_id="user_ext_1", email="ann@example.com", **overrides) -> User:
    data = {
        "external_user_id": external_user_id,
        "email": email,
        "name": "Ann Lee",
        "avatar_url": "https://img.example.com/ann.png",
        "primary_auth_provider": AuthProvider.EMAIL,
        "default_privacy_setting": PrivacySetting.PRIVATE,
    }
    data.update(overrides)
    return User(**data)


class TestUserRepository:
    """Test UserRepository CRUD operations."""

    def test_create_then_find_round_trip(self, user_repository):
        """Create assigns a new ID and equal timestamps; other fields match input."""
        user = _user()
        created = user_repository.create(user)
        found = user_repository.get_by_external_id("user_ext_1")

        assert created.id is not None
        assert len(created.id) == 26
        assert found.id == created.id
        assert found.created_at == found.updated_at
        assert found.deleted_at is None
        for field in ("external_user_id", "email", "name", "avatar_url",
                      "primary_auth_provider", "default_privacy_setting", "last_login_at"):
            assert getattr(found, field) == getattr(user, field)

    def test_create_ignores_caller_supplied_id(self, user_repository):
        created = user_repository.create(_user(id="caller-chosen"))
        assert created.id != "caller-chosen"

    def test_ids_follow_creation_order(self, user_repository):
        first = user_repository.create(_user("ext_a", "a@example.com"))
        second = user_repository.create(_user("ext_b", "b@example.com"))
        assert first.id < second.id

    def test_get_by_email(self, user_repository):
        created = user_repository.create(_user())
        assert user_repository.get_by_email("ann@example.com").id == created.id
        assert user_repository.get_by_email("nobody@example.com") is None

    def test_get_nonexistent_user(self, user_repository):
        assert user_repository.get("01HZZZZZZZZZZZZZZZZZZZZZZZ") is None
        assert user_repository.get_by_external_id("missing") is None

    def test_duplicate_external_id_is_rejected(self, user_repository):
        user_repository.create(_user())
        with pytest.raises(DuplicateExternalIDError):
            user_repository.create(_user(email="other@example.com"))

    def test_duplicate_email_is_rejected(self, user_repository):
        user_repository.create(_user())
        with pytest.raises(DuplicateEmailError):
            user_repository.create(_user(external_user_id="user_ext_2"))

    def test_session_is_usable_after_conflict(self, user_repository):
        user_repository.create(_user())
        with pytest.raises(DuplicateEmailError):
            user_repository.create(_user(external_user_id="user_ext_2"))
        created = user_repository.create(_user("user_ext_3", "third@example.com"))
        assert user_repository.get(created.id) is not None

    def test_update_writes_mutable_fields(self, user_repository):
        created = user_repository.create(_user())
        created.email = "new@example.com"
        created.name = "Ann Smith"
        created.avatar_url = None
        created.primary_auth_provider = AuthProvider.GOOGLE
        created.default_privacy_setting = PrivacySetting.FRIENDS

        updated = user_repository.update(created)

        assert updated.id == created.id
        assert updated.email == "new@example.com"
        assert updated.name == "Ann Smith"
        assert updated.avatar_url is None
        assert updated.primary_auth_provider == AuthProvider.GOOGLE
        assert updated.default_privacy_setting == PrivacySetting.FRIENDS
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at

    def test_update_email_conflict(self, user_repository):
        user_repository.create(_user())
        other = user_repository.create(_user("user_ext_2", "bob@example.com"))
        other.email = "ann@example.com"
        with pytest.raises(DuplicateEmailError):
            user_repository.update(other)

    def test_update_missing_user_raises_not_found(self, user_repository):
        with pytest.raises(NotFoundError):
            user_repository.update(_user(id="01HZZZZZZZZZZZZZZZZZZZZZZZ"))

    def test_soft_delete_keeps_row_but_hides_it(self, user_repository, db_session):
        created = user_repository.create(_user())

        assert user_repository.soft_delete(created.id) is True

        assert user_repository.get(created.id) is None
        assert user_repository.get_by_external_id("user_ext_1") is None
        assert user_repository.get_by_email("ann@example.com") is None
        row = db_session.query(UserDB).filter(UserDB.id == created.id).first()
        assert row is not None
        assert row.deleted_at is not None

    def test_soft_delete_missing_user(self, user_repository):
        assert user_repository.soft_delete("01HZZZZZZZZZZZZZZZZZZZZZZZ") is False

    def test_soft_delete_twice(self, user_repository):
        created = user_repository.create(_user())
        assert user_repository.soft_delete(created.id) is True
        assert user_repository.soft_delete(created.id) is False

    def test_deleted_user_does_not_block_recreation(self, user_repository):
        first = user_repository.create(_user())
        user_repository.soft_delete(first.id)

        second = user_repository.create(_user())

        assert second.id != first.id
        assert user_repository.get_by_external_id("user_ext_1").id == second.id

    def test_update_deleted_user_raises_not_found(self, user_repository):
        created = user_repository.create(_user())
        user_repository.soft_delete(created.id)
        with pytest.raises(NotFoundError):
            user_repository.update(created)

    def test_touch_last_login(self, user_repository):
        created = user_repository.create(_user())
        assert created.last_login_at is None

        assert user_repository.touch_last_login(created.id) is True

        assert user_repository.get(created.id).last_login_at is not None
        assert user_repository.touch_last_login("missing") is False

    def test_list_excludes_deleted_and_pages(self, user_repository):
        users = [
            user_repository.create(_user(f"ext_{i}", f"user{i}@example.com"))
            for i in range(5)
        ]
        user_repository.soft_delete(users[1].id)

        listed = user_repository.list(limit=10, offset=0)
        assert [u.id for u in listed] == [users[0].id, users[2].id, users[3].id, users[4].id]

        page = user_repository.list(limit=2, offset=1)
        assert [u.id for u in page] == [users[2].id, users[3].id]
