"""
Onboarding Configuration Flow

This module defines the first-run flow a new user walks through:
1. Begin       → show the catalog (NOT_STARTED → SELECTING)
2. Toggle      → pick the services they already pay for
3. Start       → snapshot the selection (SELECTING → CONFIGURING(0))
4. Configure   → one form per selected service, forward only
5. Commit      → after the LAST step, hand everything to the store
                 and log the user in (→ COMPLETE)

DESIGN DECISION: The flow enforces the boundaries:
- Nothing reaches the store before the final step is accepted
- Rejected input never moves the cursor
- Abandoning discards the session and leaves the store untouched
- Skipping is only possible from the catalog screen

The accumulator length always equals the current step index. A cursor
that points past the selected services is a programming error: with
strict_state_checks it raises OnboardingStateError, otherwise the flow
is clamped to COMPLETE.
"""

from datetime import date
from typing import Iterable, Optional
from uuid import UUID

from subtrack.audit import AuditLogger, create_correlation_id
from subtrack.catalog import POPULAR_SERVICES, filter_services
from subtrack.config import AppSettings, get_settings
from subtrack.models.audit import AuditEventBuilder
from subtrack.models.onboarding import (
    OnboardingStage,
    OnboardingState,
    StepOutcome,
    SubscriptionForm,
)
from subtrack.models.subscription import PredefinedService, Subscription
from subtrack.services.storage import DuplicateError
from subtrack.store import LoginState, SubscriptionStore
from subtrack.validation import SubscriptionFormValidator


class OnboardingError(Exception):
    """Base exception for onboarding flow errors."""
    pass


class InvalidTransitionError(OnboardingError):
    """The requested action is not available in the current state."""

    def __init__(self, action: str, state: OnboardingState):
        self.action = action
        self.state = state
        super().__init__(f"Cannot {action} while onboarding is {state.stage.value}")


class EmptySelectionError(OnboardingError):
    """Configuration was started with no services selected."""
    pass


class UnknownServiceError(OnboardingError):
    """A service id that is not part of the catalog."""

    def __init__(self, service_id: UUID):
        self.service_id = service_id
        super().__init__(f"Service {service_id} is not in the catalog")


class OnboardingStateError(OnboardingError):
    """The flow's own invariants were violated."""
    pass


class OnboardingFlow:
    """
    Forward-only state machine producing one subscription per selected service.

    The flow owns its session (selection, services to configure and the
    configured subscriptions) until the last step, then transfers every
    subscription to the store with one add call each, in session order.
    """

    def __init__(
        self,
        store: SubscriptionStore,
        login_state: LoginState,
        catalog: Iterable[PredefinedService] = POPULAR_SERVICES,
        validator: Optional[SubscriptionFormValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AppSettings] = None,
    ):
        self._store = store
        self._login_state = login_state
        self._catalog = tuple(catalog)
        self._settings = settings or get_settings().app
        self._validator = validator or SubscriptionFormValidator(self._settings)
        self._audit_logger = audit_logger or AuditLogger()

        self._state = OnboardingState.not_started()
        self._correlation_id: Optional[UUID] = None
        self._selected_ids: set[UUID] = set()
        self._services: tuple[PredefinedService, ...] = ()
        self._configured: list[Subscription] = []
        self._committed: tuple[Subscription, ...] = ()
        self._skipped = False

    # -------------------------------------------------------------------------
    # Read-only view of the session
    # -------------------------------------------------------------------------

    @property
    def state(self) -> OnboardingState:
        return self._state

    @property
    def stage(self) -> OnboardingStage:
        return self._state.stage

    @property
    def catalog(self) -> tuple[PredefinedService, ...]:
        return self._catalog

    @property
    def selected_ids(self) -> frozenset[UUID]:
        return frozenset(self._selected_ids)

    @property
    def services_to_configure(self) -> tuple[PredefinedService, ...]:
        return self._services

    @property
    def configured(self) -> tuple[Subscription, ...]:
        """Subscriptions accepted so far in this session (not yet in the store)."""
        return tuple(self._configured)

    @property
    def committed(self) -> tuple[Subscription, ...]:
        """Subscriptions handed to the store when the flow completed."""
        return self._committed

    @property
    def was_skipped(self) -> bool:
        return self._skipped

    @property
    def is_complete(self) -> bool:
        return self._state.stage == OnboardingStage.COMPLETE

    @property
    def correlation_id(self) -> Optional[UUID]:
        return self._correlation_id

    @property
    def current_service(self) -> Optional[PredefinedService]:
        """The service being configured, None outside CONFIGURING."""
        if self._state.stage != OnboardingStage.CONFIGURING:
            return None
        index = self._state.step_index
        if index >= len(self._services):
            return None
        return self._services[index]

    def is_selected(self, service_id: UUID) -> bool:
        return service_id in self._selected_ids

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def begin(self) -> OnboardingState:
        """NOT_STARTED → SELECTING."""
        self._require("begin onboarding", OnboardingStage.NOT_STARTED)

        self._correlation_id = create_correlation_id()
        self._selected_ids = set()
        self._skipped = False
        self._state = OnboardingState.selecting()

        self._audit_logger.log(AuditEventBuilder.onboarding_started(self._correlation_id))
        return self._state

    def toggle_selection(self, service_id: UUID) -> bool:
        """
        Add or remove a service from the selection.

        Returns:
            True if the service is selected after the toggle

        Raises:
            UnknownServiceError: If the id is not in the catalog
        """
        self._require("change the selection", OnboardingStage.SELECTING)

        service = self._find_service(service_id)
        if service is None:
            raise UnknownServiceError(service_id)

        if service_id in self._selected_ids:
            self._selected_ids.remove(service_id)
            selected = False
        else:
            self._selected_ids.add(service_id)
            selected = True

        self._audit_logger.log(AuditEventBuilder.service_toggled(
            service_id=service.id,
            service_name=service.name,
            selected=selected,
            correlation_id=self._correlation_id,
        ))
        return selected

    def start_configuration(self) -> OnboardingState:
        """
        SELECTING → CONFIGURING(0).

        Snapshots the selected services in catalog order and empties the
        accumulator.

        Raises:
            EmptySelectionError: If nothing is selected
        """
        self._require("start configuration", OnboardingStage.SELECTING)

        if not self._selected_ids:
            raise EmptySelectionError("Select at least one service before configuring")

        self._services = filter_services(self._selected_ids, self._catalog)
        self._configured = []
        self._state = OnboardingState.configuring(0)

        self._audit_logger.log(AuditEventBuilder.configuration_started(
            service_names=[service.name for service in self._services],
            correlation_id=self._correlation_id,
        ))
        return self._state

    def new_form(self, today: Optional[date] = None) -> SubscriptionForm:
        """
        A form pre-filled for the current step.

        The name starts as the service name and stays editable; cost starts
        empty, so an untouched form cannot be submitted.
        """
        self._require("open a configuration form", OnboardingStage.CONFIGURING)

        service = self.current_service
        if service is None:
            raise OnboardingStateError(
                f"Step {self._state.step_index} has no service to configure"
            )

        return SubscriptionForm(
            name=service.name,
            cost_text="",
            currency=self._settings.default_currency,
            renewal_date=today or date.today(),
            category=service.default_category,
        )

    def submit(self, form: SubscriptionForm) -> StepOutcome:
        """
        Validate a form and, if it passes, complete the current step.

        Invalid input leaves the cursor exactly where it was.
        """
        self._require("submit a step", OnboardingStage.CONFIGURING)

        index = self._checked_step_index()
        if index is None:
            return StepOutcome(
                accepted=False,
                state=self._state,
                validation=self._validator.validate(form),
            )

        validation = self._validator.validate(form)
        if not validation.is_valid:
            self._audit_logger.log(AuditEventBuilder.step_rejected(
                step_index=index,
                fields=sorted(validation.error_fields),
                correlation_id=self._correlation_id,
            ))
            return StepOutcome(
                accepted=False,
                state=self._state,
                validation=validation,
            )

        subscription = self._validator.build_subscription(form, self._services[index])
        self.complete_step(subscription)

        return StepOutcome(
            accepted=True,
            state=self._state,
            validation=validation,
            subscription=subscription,
        )

    def complete_step(self, subscription: Subscription) -> OnboardingState:
        """
        Record the subscription for the current step.

        CONFIGURING(i) → CONFIGURING(i+1), or → COMPLETE on the last step,
        which flushes the whole session into the store and logs the user in.
        """
        self._require("complete a step", OnboardingStage.CONFIGURING)

        index = self._checked_step_index()
        if index is None:
            return self._state

        self._configured.append(subscription)
        self._audit_logger.log(AuditEventBuilder.step_completed(
            step_index=index,
            service_name=self._services[index].name,
            subscription_id=subscription.id,
            correlation_id=self._correlation_id,
        ))

        if index + 1 < len(self._services):
            self._state = OnboardingState.configuring(index + 1)
        else:
            self._finish()

        return self._state

    def skip(self) -> OnboardingState:
        """SELECTING → COMPLETE without adding any subscription."""
        self._require("skip onboarding", OnboardingStage.SELECTING)

        self._audit_logger.log(AuditEventBuilder.onboarding_skipped(self._correlation_id))
        self._discard_session()
        self._committed = ()
        self._skipped = True
        self._login_state.log_in()
        self._state = OnboardingState.complete()
        return self._state

    def abandon(self) -> OnboardingState:
        """
        Throw the in-flight session away (→ NOT_STARTED).

        Nothing configured so far reaches the store, and the login flag
        is not touched.
        """
        self._require(
            "abandon onboarding",
            OnboardingStage.SELECTING,
            OnboardingStage.CONFIGURING,
        )

        self._audit_logger.log(AuditEventBuilder.onboarding_abandoned(
            discarded=len(self._configured),
            correlation_id=self._correlation_id,
        ))
        self._discard_session()
        self._correlation_id = None
        self._state = OnboardingState.not_started()
        return self._state

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require(self, action: str, *stages: OnboardingStage) -> None:
        if self._state.stage not in stages:
            raise InvalidTransitionError(action, self._state)

    def _find_service(self, service_id: UUID) -> Optional[PredefinedService]:
        for service in self._catalog:
            if service.id == service_id:
                return service
        return None

    def _checked_step_index(self) -> Optional[int]:
        """
        The current step index, after checking the session invariants.

        Returns None when the flow had to be clamped to COMPLETE.
        """
        index = self._state.step_index

        problem = None
        if index >= len(self._services):
            problem = f"Step {index} is past the last of {len(self._services)} services"
        elif len(self._configured) != index:
            problem = (
                f"Step {index} reached with {len(self._configured)} configured subscriptions"
            )

        if problem is None:
            return index

        if self._settings.strict_state_checks:
            raise OnboardingStateError(problem)

        self._audit_logger.log_error(
            error_type="onboarding_state",
            error_message=problem,
            details={"step_index": index, "services": len(self._services)},
            correlation_id=self._correlation_id,
        )
        self._finish()
        return None

    def _finish(self) -> None:
        """Transfer the accumulator to the store and log in (→ COMPLETE)."""
        committed = []
        for subscription in self._configured:
            try:
                self._store.add_subscription(
                    subscription,
                    correlation_id=self._correlation_id,
                )
            except DuplicateError as e:
                self._audit_logger.log_error(
                    error_type="duplicate_subscription",
                    error_message=str(e),
                    correlation_id=self._correlation_id,
                )
                continue
            committed.append(subscription)

        self._committed = tuple(committed)
        self._audit_logger.log(AuditEventBuilder.onboarding_completed(
            count=len(committed),
            correlation_id=self._correlation_id,
        ))

        self._discard_session()
        self._login_state.log_in()
        self._state = OnboardingState.complete()

    def _discard_session(self) -> None:
        self._selected_ids = set()
        self._services = ()
        self._configured = []
