"""
Main Orchestrator for SubTrack

This module ties together all the components for one running app:
1. Storage backends chosen from settings
2. The subscription store and login flag that own persisted state
3. Onboarding sessions, statistics and the assistant that read them

DESIGN DECISION: The orchestrator is the only place that builds the store.
Everything else receives the same store instance, so all mutation goes
through its add / delete / replace API and persistence stays in one place.

The presentation layer talks to SubTrackApp and renders what it returns.
"""

from typing import Optional

from subtrack.audit import AuditLogger
from subtrack.config import Settings, get_settings
from subtrack.models.query import AssistantReply
from subtrack.models.subscription import (
    StatisticsPeriod,
    StatisticsReport,
    Subscription,
)
from subtrack.onboarding import OnboardingFlow
from subtrack.queries import SubscriptionAssistant
from subtrack.services.storage import (
    AuditStorageInterface,
    InMemoryLoginStateStorage,
    InMemorySubscriptionStorage,
    JsonFileLoginStateStorage,
    JsonFileSubscriptionStorage,
    LoginStateStorageInterface,
    SubscriptionStorageInterface,
)
from subtrack.statistics import build_report
from subtrack.store import LoginState, SubscriptionStore


class SubTrackApp:
    """
    One user's SubTrack state and the operations the UI can trigger.

    Flow:
    1. Not logged in → start_onboarding() and drive the returned flow
    2. Logged in     → list, add, delete subscriptions and read statistics
    3. Log out       → back to onboarding, subscriptions are kept
    """

    def __init__(
        self,
        subscription_storage: SubscriptionStorageInterface,
        login_storage: LoginStateStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._audit_logger = audit_logger or AuditLogger()
        self._store = SubscriptionStore(subscription_storage, self._audit_logger)
        self._login_state = LoginState(login_storage, self._audit_logger)
        self._assistant = SubscriptionAssistant(self._store, self._audit_logger)

    @property
    def store(self) -> SubscriptionStore:
        return self._store

    @property
    def login_state(self) -> LoginState:
        return self._login_state

    @property
    def is_logged_in(self) -> bool:
        return self._login_state.is_logged_in

    def start_onboarding(self) -> OnboardingFlow:
        """
        A fresh onboarding session, already showing the catalog.

        Abandoning it never touches the store; completing or skipping it
        logs the user in.
        """
        flow = OnboardingFlow(
            store=self._store,
            login_state=self._login_state,
            audit_logger=self._audit_logger,
            settings=self._settings.app,
        )
        flow.begin()
        return flow

    def add_subscription(self, subscription: Subscription) -> None:
        """Direct "add" outside of onboarding."""
        self._store.add_subscription(subscription)

    def list_subscriptions(self) -> list[Subscription]:
        """Subscriptions as the list screen shows them, nearest renewal first."""
        return self._store.sorted_by_renewal()

    def statistics(
        self,
        period: StatisticsPeriod = StatisticsPeriod.MONTHLY,
    ) -> StatisticsReport:
        """Recomputed from the store on every call."""
        return build_report(self._store.subscriptions, period)

    def ask(self, question: str) -> AssistantReply:
        return self._assistant.ask(question)

    def delete_all_data(self) -> None:
        """Remove every subscription. The login flag is unaffected."""
        self._store.delete_all()

    def log_out(self) -> None:
        self._login_state.log_out()


def create_app(
    settings: Optional[Settings] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
) -> SubTrackApp:
    """
    Factory function to build the app from settings.

    Args:
        settings: Settings to use, defaults to get_settings()
        audit_storage: Where audit events are appended besides the log.
                       If None, audit events are only logged locally.

    Returns:
        A SubTrackApp with storage chosen by SUBTRACK_STORAGE_BACKEND
    """
    settings = settings or get_settings()
    storage_settings = settings.storage

    if storage_settings.backend == "memory":
        subscription_storage = InMemorySubscriptionStorage()
        login_storage = InMemoryLoginStateStorage()
    else:
        subscription_storage = JsonFileSubscriptionStorage(storage_settings.subscriptions_path)
        login_storage = JsonFileLoginStateStorage(storage_settings.login_state_path)

    return SubTrackApp(
        subscription_storage=subscription_storage,
        login_storage=login_storage,
        audit_logger=AuditLogger(audit_storage),
        settings=settings,
    )
