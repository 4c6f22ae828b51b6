"""Inbound identity-provider webhooks: signature checks and payload decoding."""

from seatmanager.webhooks.signature import WebhookVerifier
from seatmanager.webhooks.events import (
    WebhookEvent,
    ExternalUserSnapshot,
    decode_event,
    decode_user_snapshot,
    is_user_event,
)

__all__ = [
    "WebhookVerifier",
    "WebhookEvent",
    "ExternalUserSnapshot",
    "decode_event",
    "decode_user_snapshot",
    "is_user_event",
]
