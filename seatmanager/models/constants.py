"""Constants for seatmanager.

This module centralizes magic numbers and default values used throughout the application.
"""

# User listing
DEFAULT_LIST_LIMIT = 20
MAX_LIST_LIMIT = 100

# Identity provider
DEFAULT_CLERK_JWKS_URL = "https://api.clerk.com/v1/jwks"
GOOGLE_OAUTH_PROVIDER_TAG = "oauth_google"

# Webhook event types
USER_CREATED = "user.created"
USER_UPDATED = "user.updated"
USER_DELETED = "user.deleted"
