"""Verification of identity-provider session tokens (RS256 JWTs)."""

import logging
from typing import Dict, Optional

import jwt

from seatmanager.config import AppConfig
from seatmanager.errors import VerificationError

logger = logging.getLogger(__name__)

ALGORITHMS = ["RS256"]


class SessionTokenVerifier:
    """Verify bearer tokens issued by the identity provider.

    Uses the configured PEM public key when present (no network), otherwise
    fetches signing keys from the JWKS endpoint.
    """

    def __init__(self, config: AppConfig, leeway_sec: int = 5):
        self.jwt_key = config.jwt_key
        self.authorized_parties = list(config.authorized_parties)
        self.leeway_sec = leeway_sec
        self._jwks_client: Optional[jwt.PyJWKClient] = None
        if not self.jwt_key:
            headers = {"Authorization": f"Bearer {config.secret_key}"} if config.secret_key else None
            self._jwks_client = jwt.PyJWKClient(config.jwks_url, cache_keys=True, headers=headers)

    def _signing_key(self, token: str):
        if self.jwt_key:
            return self.jwt_key
        return self._jwks_client.get_signing_key_from_jwt(token).key

    def verify(self, token: str) -> Dict:
        """Decode and validate a session token.

        Returns:
            The token claims

        Raises:
            VerificationError: signature, expiry, subject or authorized party is invalid
        """
        try:
            claims = jwt.decode(
                token,
                self._signing_key(token),
                algorithms=ALGORITHMS,
                leeway=self.leeway_sec,
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise VerificationError("session token has expired") from e
        except jwt.PyJWTError as e:
            logger.debug(f"Session token rejected: {type(e).__name__}: {str(e)}")
            raise VerificationError("invalid session token") from e

        azp = claims.get("azp")
        if self.authorized_parties and azp and azp not in self.authorized_parties:
            raise VerificationError(f"unauthorized party: {azp}")

        return claims

    def get_external_user_id(self, token: str) -> str:
        """Return the identity-provider user ID (`sub`) of a valid token."""
        return self.verify(token)["sub"]
