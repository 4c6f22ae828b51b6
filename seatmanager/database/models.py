"""SQLAlchemy database models for seatmanager."""

from datetime import datetime
from typing import Type, TypeVar, Union
from sqlalchemy import CheckConstraint, Column, DateTime, Index, String, text

from seatmanager.database.database import Base
from seatmanager.models.user import AuthProvider, PrivacySetting

T = TypeVar('T')

_ACTIVE_ROWS = text("deleted_at IS NULL")


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string)."""
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.

    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails

    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


def _in_list(column: str, enum_class) -> str:
    values = ", ".join(f"'{member.value}'" for member in enum_class)
    return f"{column} IN ({values})"


class UserDB(Base):
    """Database model for User."""

    __tablename__ = "users"
    __table_args__ = (
        # Uniqueness applies to active rows only; tombstoned users keep their row.
        Index(
            "uq_users_external_user_id_active",
            "external_user_id",
            unique=True,
            sqlite_where=_ACTIVE_ROWS,
            postgresql_where=_ACTIVE_ROWS,
        ),
        Index(
            "uq_users_email_active",
            "email",
            unique=True,
            sqlite_where=_ACTIVE_ROWS,
            postgresql_where=_ACTIVE_ROWS,
        ),
        CheckConstraint(_in_list("primary_auth_provider", AuthProvider), name="ck_users_primary_auth_provider"),
        CheckConstraint(_in_list("default_privacy_setting", PrivacySetting), name="ck_users_default_privacy_setting"),
    )

    # Primary key (ULID)
    id = Column(String(26), primary_key=True)

    # Identity provider linkage
    external_user_id = Column(String(255), nullable=False)

    # User profile
    email = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    avatar_url = Column(String(500), nullable=True)
    primary_auth_provider = Column(String(20), nullable=False, default=AuthProvider.UNKNOWN.value)
    default_privacy_setting = Column(String(20), nullable=False, default=PrivacySetting.PRIVATE.value)
    last_login_at = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True, index=True)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from seatmanager.models.user import User
        return User(
            id=self.id,
            external_user_id=self.external_user_id,
            email=self.email,
            name=self.name,
            avatar_url=self.avatar_url,
            primary_auth_provider=value_to_enum(self.primary_auth_provider, AuthProvider, AuthProvider.UNKNOWN),
            default_privacy_setting=value_to_enum(
                self.default_privacy_setting, PrivacySetting, PrivacySetting.PRIVATE
            ),
            last_login_at=self.last_login_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
            deleted_at=self.deleted_at,
        )

    @classmethod
    def from_pydantic(cls, user):
        """Create database model from Pydantic model."""
        return cls(
            id=user.id,
            external_user_id=user.external_user_id,
            email=user.email,
            name=user.name,
            avatar_url=user.avatar_url,
            primary_auth_provider=enum_to_value(user.primary_auth_provider),
            default_privacy_setting=enum_to_value(user.default_privacy_setting),
            last_login_at=user.last_login_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
            deleted_at=user.deleted_at,
        )
