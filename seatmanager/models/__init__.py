"""Data models for seatmanager."""

from seatmanager.models.user import User, PrivacySetting, AuthProvider

__all__ = [
    "User",
    "PrivacySetting",
    "AuthProvider",
]
