"""Business rules around the user store."""

import logging
from typing import List, Optional

from seatmanager.database.user_repository import UserRepository
from seatmanager.errors import NotFoundError, ValidationError
from seatmanager.models.constants import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT
from seatmanager.models.user import AuthProvider, PrivacySetting, User

logger = logging.getLogger(__name__)


class UserService:
    """User operations shared by the webhook engine and the user endpoints."""

    def __init__(self, repository: UserRepository):
        self.repository = repository

    def create(self, user: User) -> User:
        """Persist a new user, filling in default privacy and provider values."""
        if not user.default_privacy_setting:
            user.default_privacy_setting = PrivacySetting.PRIVATE
        if not user.primary_auth_provider:
            user.primary_auth_provider = AuthProvider.UNKNOWN
        return self.repository.create(user)

    def get(self, user_id: str) -> User:
        user = self.repository.get(user_id)
        if user is None:
            raise NotFoundError(f"user {user_id} not found")
        return user

    def find_by_external_id(self, external_user_id: str) -> Optional[User]:
        """Like get_by_external_id, but returns None when there is no active user."""
        return self.repository.get_by_external_id(external_user_id)

    def get_by_external_id(self, external_user_id: str) -> User:
        user = self.find_by_external_id(external_user_id)
        if user is None:
            raise NotFoundError(f"user with external ID {external_user_id} not found")
        return user

    def get_by_email(self, email: str) -> User:
        user = self.repository.get_by_email(email)
        if user is None:
            raise NotFoundError(f"user with email {email} not found")
        return user

    def update(self, user: User) -> User:
        """Validate and persist changes to an existing user.

        Raises:
            ValidationError: email or name is empty
        """
        if not (user.email or "").strip():
            raise ValidationError("email must not be empty")
        if not (user.name or "").strip():
            raise ValidationError("name must not be empty")
        return self.repository.update(user)

    def update_profile(
        self,
        user: User,
        name: Optional[str] = None,
        avatar_url: Optional[str] = None,
        default_privacy_setting: Optional[PrivacySetting] = None,
    ) -> User:
        """Apply the user-editable fields that were provided, then update."""
        if name is not None:
            user.name = name
        if avatar_url is not None:
            user.avatar_url = avatar_url
        if default_privacy_setting is not None:
            user.default_privacy_setting = default_privacy_setting
        return self.update(user)

    def touch_last_login(self, user_id: str) -> bool:
        return self.repository.touch_last_login(user_id)

    def delete(self, user_id: str) -> None:
        """Soft-delete a user."""
        if not self.repository.soft_delete(user_id):
            raise NotFoundError(f"user {user_id} not found")

    def list(self, limit: int = DEFAULT_LIST_LIMIT, offset: int = 0) -> List[User]:
        """List active users; out-of-range paging values fall back to defaults."""
        if limit <= 0 or limit > MAX_LIST_LIMIT:
            limit = DEFAULT_LIST_LIMIT
        if offset < 0:
            offset = 0
        return self.repository.list(limit, offset)
