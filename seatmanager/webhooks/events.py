"""Webhook event envelope and user payload decoding.

The envelope is decoded first; its `data` stays opaque until the event type
says what it holds.
"""

from typing import Any, List, Optional
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from seatmanager.errors import DecodeError
from seatmanager.models.constants import USER_CREATED, USER_DELETED, USER_UPDATED

USER_EVENT_TYPES = (USER_CREATED, USER_UPDATED, USER_DELETED)


class WebhookEvent(BaseModel):
    """Top-level webhook envelope."""
    type: str = Field(..., description="Event type tag, e.g. 'user.created'")
    object: Optional[str] = Field(None, description="Envelope object tag ('event')")
    data: Any = Field(None, description="Event payload, decoded according to `type`")


class EmailAddress(BaseModel):
    email_address: str = ""


class ExternalAccount(BaseModel):
    """An OAuth account linked to the external identity."""
    provider: str = ""
    email_address: Optional[str] = None


class ExternalUserSnapshot(BaseModel):
    """Point-in-time view of an identity-provider user, as carried by one event."""

    id: str = Field(..., min_length=1, description="External user ID")
    email_addresses: List[EmailAddress] = Field(default_factory=list)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image_url: Optional[str] = None
    external_accounts: List[ExternalAccount] = Field(default_factory=list)
    password_enabled: bool = False

    @field_validator("email_addresses", "external_accounts", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("password_enabled", mode="before")
    @classmethod
    def _null_as_false(cls, value):
        return False if value is None else value

    def primary_email(self) -> Optional[str]:
        """The first listed email address is authoritative."""
        if not self.email_addresses:
            return None
        return self.email_addresses[0].email_address

    def full_name(self) -> str:
        """First and last name joined; whichever is present; or '' if neither.

        Blank names count as absent.
        """
        first = (self.first_name or "").strip()
        last = (self.last_name or "").strip()
        if first and last:
            return f"{first} {last}"
        return first or last


def is_user_event(event_type: str) -> bool:
    return event_type in USER_EVENT_TYPES


def decode_event(body: bytes) -> WebhookEvent:
    """Parse the webhook envelope.

    Raises:
        DecodeError: body is not JSON or has no string `type`
    """
    try:
        return WebhookEvent.model_validate_json(body)
    except PydanticValidationError as e:
        raise DecodeError(f"failed to parse webhook event: {e.error_count()} error(s)") from e


def decode_user_snapshot(event: WebhookEvent) -> ExternalUserSnapshot:
    """Decode the event payload as a user snapshot.

    Raises:
        DecodeError: payload is not an object or lacks the external user ID
    """
    if not isinstance(event.data, dict):
        raise DecodeError(f"{event.type} payload must be a JSON object")
    try:
        return ExternalUserSnapshot.model_validate(event.data)
    except PydanticValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise DecodeError(f"failed to parse user data for {event.type}: invalid {fields}") from e
