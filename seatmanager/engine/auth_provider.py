"""Infer how a user authenticates from an identity-provider snapshot."""

import logging
from typing import Dict

from seatmanager.models.constants import GOOGLE_OAUTH_PROVIDER_TAG
from seatmanager.models.user import AuthProvider
from seatmanager.webhooks.events import ExternalUserSnapshot

logger = logging.getLogger(__name__)

# Linked-account provider tags we recognise. New OAuth providers go here.
OAUTH_PROVIDER_TAGS: Dict[str, AuthProvider] = {
    GOOGLE_OAUTH_PROVIDER_TAG: AuthProvider.GOOGLE,
}


def classify(snapshot: ExternalUserSnapshot) -> AuthProvider:
    """Return the primary auth provider for a snapshot.

    A linked external account wins over password login: the first account's
    provider tag decides, and unrecognised tags map to UNKNOWN rather than
    EMAIL. Without linked accounts, password login means EMAIL.
    """
    if snapshot.external_accounts:
        tag = snapshot.external_accounts[0].provider
        provider = OAUTH_PROVIDER_TAGS.get(tag, AuthProvider.UNKNOWN)
        logger.debug(f"User {snapshot.id}: external account provider '{tag}' -> {provider.value}")
        return provider

    if snapshot.password_enabled:
        logger.debug(f"User {snapshot.id}: password login enabled -> email")
        return AuthProvider.EMAIL

    logger.debug(f"User {snapshot.id}: no external accounts or password -> unknown")
    return AuthProvider.UNKNOWN
