"""Request/response models for the user and webhook endpoints."""

from typing import Optional
from pydantic import BaseModel, Field

from seatmanager.models.user import PrivacySetting


class UpdateProfileRequest(BaseModel):
    """Request model for PUT /api/users/me. Omitted fields are left unchanged."""
    name: Optional[str] = Field(None, description="New display name")
    avatar_url: Optional[str] = Field(None, description="New profile image URL")
    default_privacy_setting: Optional[PrivacySetting] = Field(None, description="New default privacy setting")


class WebhookResponse(BaseModel):
    """Response model for webhook deliveries."""
    message: str
    outcome: str
    error: Optional[str] = None
