"""State containers that own persisted data."""

from subtrack.store.login_state import LoginState
from subtrack.store.subscription_store import SubscriptionStore

__all__ = ["LoginState", "SubscriptionStore"]
