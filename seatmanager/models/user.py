"""User data model for seatmanager."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class PrivacySetting(str, Enum):
    """Default visibility of a user's seat activity."""
    PUBLIC = "public"
    FRIENDS = "friends"
    PRIVATE = "private"


class AuthProvider(str, Enum):
    """How the user signed up with the identity provider (a classification only)."""
    EMAIL = "email"
    GOOGLE = "google"
    UNKNOWN = "unknown"


class User(BaseModel):
    """Local mirror of an identity-provider user."""

    id: Optional[str] = Field(None, description="ULID assigned by the store on create")
    external_user_id: str = Field(..., description="User ID assigned by the identity provider")
    email: str = Field(..., description="User email address (unique among active users)")
    name: str = Field(..., description="User display name")
    avatar_url: Optional[str] = Field(None, description="Profile image URL")
    primary_auth_provider: AuthProvider = Field(AuthProvider.UNKNOWN, description="Inferred sign-up method")
    default_privacy_setting: PrivacySetting = Field(PrivacySetting.PRIVATE, description="Default privacy setting")
    last_login_at: Optional[datetime] = Field(None, description="Last authenticated request")
    created_at: Optional[datetime] = Field(None, description="User creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="User last update timestamp")
    deleted_at: Optional[datetime] = Field(None, description="Soft-delete timestamp (null if active)")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        validate_assignment = True
