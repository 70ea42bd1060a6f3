"""Session and identity core domain."""

from salesdesk.core.auth.service import SessionService
from salesdesk.core.auth.state import AuthState, AuthStateTracker
from salesdesk.core.auth.store import IdentityStore
from salesdesk.core.auth.types import Identity, Organization, Subscription, normalize_profile

__all__ = [
    "AuthState",
    "AuthStateTracker",
    "Identity",
    "IdentityStore",
    "Organization",
    "SessionService",
    "Subscription",
    "normalize_profile",
]
