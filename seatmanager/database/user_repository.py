"""Repository for User database operations."""

import logging
from datetime import datetime
from typing import Callable, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from seatmanager.errors import ConflictError, DuplicateEmailError, DuplicateExternalIDError, NotFoundError
from seatmanager.ids import generate_id
from seatmanager.models.user import User
from seatmanager.database.models import UserDB, enum_to_value

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for User database operations.

    Every lookup excludes soft-deleted rows.
    """

    def __init__(self, db: Session, id_generator: Callable[[], str] = generate_id):
        self.db = db
        self.id_generator = id_generator

    def _active(self):
        return self.db.query(UserDB).filter(UserDB.deleted_at.is_(None))

    def _conflict_for(self, user: User, exclude_id: Optional[str] = None) -> ConflictError:
        """Work out which unique key a failed write collided with."""
        by_external_id = self._active().filter(UserDB.external_user_id == user.external_user_id)
        by_email = self._active().filter(UserDB.email == user.email)
        if exclude_id:
            by_external_id = by_external_id.filter(UserDB.id != exclude_id)
            by_email = by_email.filter(UserDB.id != exclude_id)

        if by_external_id.first():
            return DuplicateExternalIDError(f"external user ID {user.external_user_id} is already in use")
        if by_email.first():
            return DuplicateEmailError(f"email {user.email} is already in use")
        return ConflictError(f"user {user.external_user_id} conflicts with an existing record")

    def create(self, user: User) -> User:
        """Insert a new user with a freshly generated ID.

        Raises:
            DuplicateExternalIDError: an active user already has the external ID
            DuplicateEmailError: an active user already has the email
        """
        now = datetime.utcnow()
        user_db = UserDB.from_pydantic(user)
        user_db.id = self.id_generator()
        user_db.created_at = now
        user_db.updated_at = now
        user_db.deleted_at = None

        try:
            self.db.add(user_db)
            self.db.commit()
            self.db.refresh(user_db)
            logger.debug(f"Created user {user_db.id} for external ID {user.external_user_id}")
            return user_db.to_pydantic()
        except IntegrityError as e:
            self.db.rollback()
            conflict = self._conflict_for(user)
            logger.warning(f"Failed to create user for external ID {user.external_user_id}: {conflict}")
            raise conflict from e
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create user for external ID {user.external_user_id}: {type(e).__name__}: {str(e)}")
            raise

    def get(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        user_db = self._active().filter(UserDB.id == user_id).first()
        return user_db.to_pydantic() if user_db else None

    def get_by_external_id(self, external_user_id: str) -> Optional[User]:
        """Get user by identity-provider user ID."""
        user_db = self._active().filter(UserDB.external_user_id == external_user_id).first()
        return user_db.to_pydantic() if user_db else None

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        user_db = self._active().filter(UserDB.email == email).first()
        return user_db.to_pydantic() if user_db else None

    def update(self, user: User) -> User:
        """Write the mutable fields of an existing user.

        The ID, timestamps other than `updated_at`, and `last_login_at` are not touched.
        """
        user_db = self._active().filter(UserDB.id == user.id).first()
        if not user_db:
            raise NotFoundError(f"user {user.id} not found")

        user_db.external_user_id = user.external_user_id
        user_db.email = user.email
        user_db.name = user.name
        user_db.avatar_url = user.avatar_url
        user_db.primary_auth_provider = enum_to_value(user.primary_auth_provider)
        user_db.default_privacy_setting = enum_to_value(user.default_privacy_setting)
        user_db.updated_at = datetime.utcnow()

        try:
            self.db.commit()
            self.db.refresh(user_db)
            logger.debug(f"Updated user {user.id}: {user.email}")
            return user_db.to_pydantic()
        except IntegrityError as e:
            self.db.rollback()
            conflict = self._conflict_for(user, exclude_id=user.id)
            logger.warning(f"Failed to update user {user.id}: {conflict}")
            raise conflict from e
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update user {user.id}: {type(e).__name__}: {str(e)}")
            raise

    def touch_last_login(self, user_id: str) -> bool:
        """Set last_login_at to now. Returns False if the user doesn't exist."""
        user_db = self._active().filter(UserDB.id == user_id).first()
        if not user_db:
            return False

        try:
            user_db.last_login_at = datetime.utcnow()
            self.db.commit()
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update last login for user {user_id}: {type(e).__name__}: {str(e)}")
            raise

    def soft_delete(self, user_id: str) -> bool:
        """Soft-delete a user by ID. The row is kept with deleted_at set."""
        user_db = self._active().filter(UserDB.id == user_id).first()
        if not user_db:
            return False

        try:
            user_db.deleted_at = datetime.utcnow()
            self.db.commit()
            logger.debug(f"Soft-deleted user {user_id}")
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to soft-delete user {user_id}: {type(e).__name__}: {str(e)}")
            raise

    def list(self, limit: int, offset: int) -> List[User]:
        """List active users in creation order (IDs are time-ordered)."""
        users_db = self._active().order_by(UserDB.id).offset(offset).limit(limit).all()
        return [user_db.to_pydantic() for user_db in users_db]
