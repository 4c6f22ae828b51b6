"""Webhook signature verification.

Deliveries are signed by the provider's webhook service (Svix). Each configured
endpoint secret gets its own `svix.webhooks.Webhook`; a delivery is accepted if
any of them verifies it.
"""

import json
import logging
from typing import List, Mapping, Sequence

from svix.webhooks import Webhook, WebhookVerificationError

from seatmanager.errors import ConfigurationError, DecodeError, VerificationError

logger = logging.getLogger(__name__)


class WebhookVerifier:
    """Verify that a webhook body was signed by the identity provider.

    Several secrets may be configured so deliveries keep verifying while a
    secret is being rotated. Timestamps more than five minutes from now are
    rejected by svix.
    """

    def __init__(self, secrets: Sequence[str]):
        secrets = [s for s in secrets if s]
        if not secrets:
            raise ConfigurationError("no webhook secret configured")
        try:
            self._webhooks: List[Webhook] = [Webhook(s) for s in secrets]
        except ValueError as e:
            raise ConfigurationError("webhook secret is not valid base64") from e

    def verify(self, body: bytes, headers: Mapping[str, str]) -> None:
        """Check the signature headers against body.

        Raises:
            VerificationError: headers missing/malformed, stale timestamp, or no signature matches
            DecodeError: the signature matched but the body is not JSON
        """
        error = None
        for webhook in self._webhooks:
            try:
                webhook.verify(body, dict(headers.items()))
                return
            except WebhookVerificationError as e:
                error = e
            except json.JSONDecodeError as e:
                raise DecodeError("payload is not valid JSON") from e
            except ValueError as e:
                # Malformed signature entries or a non UTF-8 body
                raise VerificationError("malformed signature headers") from e

        logger.debug(f"Webhook verification failed: {error}")
        raise VerificationError(str(error).lower()) from error
