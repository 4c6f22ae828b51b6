"""Reconcile local users with identity-provider lifecycle events.

| event        | local user exists | action                         |
|--------------|-------------------|--------------------------------|
| user.created | no                | create                         |
| user.created | yes               | no-op (redelivery)             |
| user.updated | yes               | merge + update                 |
| user.updated | no                | NotFoundError                  |
| user.deleted | yes               | soft delete                    |
| user.deleted | no                | NotFoundError                  |
| other        | -                 | ignored                        |
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from seatmanager.engine.auth_provider import classify
from seatmanager.engine.user_service import UserService
from seatmanager.errors import ConflictError, ValidationError
from seatmanager.models.constants import USER_CREATED, USER_DELETED, USER_UPDATED
from seatmanager.models.user import PrivacySetting, User
from seatmanager.webhooks.events import ExternalUserSnapshot, WebhookEvent, decode_user_snapshot, is_user_event

logger = logging.getLogger(__name__)


class ReconcileOutcome(str, Enum):
    """What a webhook event did to the local user store."""
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    ALREADY_EXISTS = "already_exists"
    IGNORED = "ignored"


@dataclass
class ReconcileResult:
    outcome: ReconcileOutcome
    event_type: str
    external_user_id: Optional[str] = None
    user: Optional[User] = None


class UserReconciler:
    """Apply user.created / user.updated / user.deleted events to the store."""

    def __init__(self, user_service: UserService):
        self.user_service = user_service

    def handle(self, event: WebhookEvent) -> ReconcileResult:
        """Dispatch an event by type. Unknown types are ignored, not rejected."""
        if not is_user_event(event.type):
            logger.info(f"Ignoring unhandled event type: {event.type}")
            return ReconcileResult(outcome=ReconcileOutcome.IGNORED, event_type=event.type)

        handlers = {
            USER_CREATED: self.user_created,
            USER_UPDATED: self.user_updated,
            USER_DELETED: self.user_deleted,
        }
        snapshot = decode_user_snapshot(event)
        return handlers[event.type](snapshot)

    def user_created(self, snapshot: ExternalUserSnapshot) -> ReconcileResult:
        """Create the local user, or do nothing if it already exists."""
        logger.info(f"Processing {USER_CREATED} for external ID {snapshot.id}")

        existing = self.user_service.find_by_external_id(snapshot.id)
        if existing is not None:
            logger.info(f"User already exists for external ID {snapshot.id}")
            return self._already_exists(snapshot, existing)

        email = snapshot.primary_email()
        if not email:
            # Dashboard test events are sent without email addresses
            raise ValidationError(f"no email address for user {snapshot.id} (test event?)")

        user = User(
            external_user_id=snapshot.id,
            email=email,
            name=snapshot.full_name() or email.split("@")[0],
            avatar_url=snapshot.image_url,
            default_privacy_setting=PrivacySetting.PRIVATE,
            primary_auth_provider=classify(snapshot),
        )

        try:
            created = self.user_service.create(user)
        except ConflictError as e:
            # A concurrent delivery won the race, or the email belongs to another active user
            logger.warning(f"Create for external ID {snapshot.id} hit a uniqueness conflict: {e}")
            return self._already_exists(snapshot, self.user_service.find_by_external_id(snapshot.id))

        logger.info(
            f"Created user {created.id} for external ID {snapshot.id} "
            f"with provider {created.primary_auth_provider}"
        )
        return ReconcileResult(
            outcome=ReconcileOutcome.CREATED,
            event_type=USER_CREATED,
            external_user_id=snapshot.id,
            user=created,
        )

    def user_updated(self, snapshot: ExternalUserSnapshot) -> ReconcileResult:
        """Merge the snapshot into the existing local user."""
        logger.info(f"Processing {USER_UPDATED} for external ID {snapshot.id}")

        user = self.user_service.get_by_external_id(snapshot.id)

        if snapshot.email_addresses:
            user.email = snapshot.primary_email()

        name = snapshot.full_name()
        if name:
            user.name = name

        # Avatar always follows the provider, including removal
        user.avatar_url = snapshot.image_url
        user.primary_auth_provider = classify(snapshot)

        updated = self.user_service.update(user)
        logger.info(f"Updated user {updated.id} for external ID {snapshot.id}")
        return ReconcileResult(
            outcome=ReconcileOutcome.UPDATED,
            event_type=USER_UPDATED,
            external_user_id=snapshot.id,
            user=updated,
        )

    def user_deleted(self, snapshot: ExternalUserSnapshot) -> ReconcileResult:
        """Soft-delete the local user."""
        logger.info(f"Processing {USER_DELETED} for external ID {snapshot.id}")

        user = self.user_service.get_by_external_id(snapshot.id)
        self.user_service.delete(user.id)

        logger.info(f"Soft-deleted user {user.id} for external ID {snapshot.id}")
        return ReconcileResult(
            outcome=ReconcileOutcome.DELETED,
            event_type=USER_DELETED,
            external_user_id=snapshot.id,
            user=user,
        )

    def _already_exists(self, snapshot: ExternalUserSnapshot, existing: Optional[User]) -> ReconcileResult:
        return ReconcileResult(
            outcome=ReconcileOutcome.ALREADY_EXISTS,
            event_type=USER_CREATED,
            external_user_id=snapshot.id,
            user=existing,
        )
