"""Application configuration for seatmanager.

Values are read from the environment (and a local `.env`) once, into an
explicit `AppConfig` that is handed to the app factory.
"""

import os
import re
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from seatmanager.errors import ConfigurationError
from seatmanager.models.constants import DEFAULT_CLERK_JWKS_URL


def _split_list(value: Optional[str]) -> List[str]:
    """Split a comma or whitespace separated env value into non-empty items."""
    if not value:
        return []
    return [item for item in re.split(r"[\s,]+", value.strip()) if item]


@dataclass
class AppConfig:
    """Identity-provider and HTTP settings."""

    webhook_secrets: List[str] = field(default_factory=list)
    secret_key: Optional[str] = None
    jwt_key: Optional[str] = None
    jwks_url: str = DEFAULT_CLERK_JWKS_URL
    authorized_parties: List[str] = field(default_factory=list)
    frontend_url: Optional[str] = None
    debug: bool = False

    def validate(self) -> None:
        """Raise ConfigurationError if the service cannot run with these settings."""
        if not self.webhook_secrets:
            raise ConfigurationError("CLERK_WEBHOOK_SECRET is not set")
        if not (self.secret_key or self.jwt_key):
            raise ConfigurationError("CLERK_SECRET_KEY or CLERK_JWT_KEY must be set")


def load_config() -> AppConfig:
    """Build an AppConfig from environment variables."""
    load_dotenv()

    return AppConfig(
        webhook_secrets=_split_list(os.getenv("CLERK_WEBHOOK_SECRET")),
        secret_key=os.getenv("CLERK_SECRET_KEY") or None,
        # PEM keys are often stored with escaped newlines in .env files
        jwt_key=(os.getenv("CLERK_JWT_KEY") or "").replace("\\n", "\n") or None,
        jwks_url=os.getenv("CLERK_JWKS_URL", DEFAULT_CLERK_JWKS_URL),
        authorized_parties=_split_list(os.getenv("CLERK_AUTHORIZED_PARTIES")),
        frontend_url=os.getenv("FRONTEND_URL") or None,
        debug=os.getenv("DEBUG", "False").lower() == "true",
    )
