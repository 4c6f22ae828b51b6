"""Identity synchronization engine for seatmanager."""

from seatmanager.engine.auth_provider import classify
from seatmanager.engine.user_service import UserService
from seatmanager.engine.reconciler import UserReconciler, ReconcileOutcome, ReconcileResult

__all__ = [
    "classify",
    "UserService",
    "UserReconciler",
    "ReconcileOutcome",
    "ReconcileResult",
]
