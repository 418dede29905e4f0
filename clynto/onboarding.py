"""Signup wizard state, scoped to one onboarding session.

A session is opened when the wizard starts and torn down when it is
completed or abandoned::

    async with onboarding_session() as session:
        session.select_integrations("crm", ["hubspot"])
        ...
        session.complete()
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import asynccontextmanager, contextmanager
from enum import Enum
from typing import AsyncIterator, Awaitable, Callable, Dict, Iterator, List, Optional

from pydantic import BaseModel, Field

from .config import RetryConfig
from .constants import WIZARD_FIRST_STEP, WIZARD_LAST_STEP
from .exceptions import WizardValidationError
from .operations import AsyncOperation

logger = logging.getLogger(__name__)

ApiKeyValidator = Callable[[str, str], Awaitable[bool]]


class Connections(BaseModel):
    crm: List[str] = Field(default_factory=list)
    task_management: List[str] = Field(default_factory=list)
    product_analytics: List[str] = Field(default_factory=list)
    data_warehouse: List[str] = Field(default_factory=list)
    communication: List[str] = Field(default_factory=list)
    billing: List[str] = Field(default_factory=list)
    subscription: List[str] = Field(default_factory=list)

    def total(self) -> int:
        return sum(len(v) for v in self.model_dump().values())


class FieldMapping(BaseModel):
    source: str
    target: str
    category: str


class TeamMember(BaseModel):
    name: str = ""
    email: str = ""
    designation: str = ""
    role: str = "member"
    phone: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.name.strip() and self.email.strip())


class OnboardingData(BaseModel):
    """Answers collected across wizard steps."""

    email: str = ""
    name: str = ""
    company: str = ""
    designation: str = ""
    domain: str = ""
    phone: str = ""
    connections: Connections = Field(default_factory=Connections)
    api_keys: Dict[str, str] = Field(default_factory=dict)
    field_mappings: Dict[str, List[FieldMapping]] = Field(default_factory=dict)
    team_members: List[TeamMember] = Field(default_factory=list)
    approved_records: List[str] = Field(default_factory=list)


class SessionState(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class OnboardingSession:
    """Mutable wizard state for a single signup flow."""

    def __init__(
        self,
        api_validator: Optional[ApiKeyValidator] = None,
        retry: Optional[RetryConfig] = None,
    ) -> None:
        self.current_step = WIZARD_FIRST_STEP
        self.data = OnboardingData()
        self.state = SessionState.ACTIVE
        self.validated_apis: Dict[str, bool] = {}
        self._api_validator = api_validator
        self._retry = retry or RetryConfig()
        self._operations: Dict[str, AsyncOperation[bool]] = {}

    # ------------------------------------------------------------------
    # Navigation
    def set_step(self, step: int) -> int:
        self.current_step = max(WIZARD_FIRST_STEP, min(step, WIZARD_LAST_STEP))
        return self.current_step

    def next_step(self) -> int:
        return self.set_step(self.current_step + 1)

    def prev_step(self) -> int:
        return self.set_step(self.current_step - 1)

    def update_data(self, **changes) -> OnboardingData:
        """Merge ``changes`` into the collected answers, validating the result."""
        self._ensure_active()
        merged = {**self.data.model_dump(), **changes}
        self.data = OnboardingData.model_validate(merged)
        return self.data

    # ------------------------------------------------------------------
    # Step validations
    def select_integrations(self, category: str, integration_ids: List[str]) -> None:
        self._ensure_active()
        if category not in Connections.model_fields:
            raise WizardValidationError(f"Unknown integration category: {category}")
        setattr(self.data.connections, category, list(integration_ids))

    def confirm_integrations(self) -> int:
        total = self.data.connections.total()
        if total == 0:
            raise WizardValidationError("Please select at least one integration")
        logger.info(f"{total} integrations selected")
        return total

    def set_api_key(self, api_id: str, key: str) -> None:
        self._ensure_active()
        self.data.api_keys[api_id] = key
        # a changed key has to be validated again
        self.validated_apis[api_id] = False

    async def validate_api_key(self, api_id: str) -> bool:
        """Check the stored key for ``api_id`` with the configured validator."""
        key = self.data.api_keys.get(api_id, "").strip()
        if not key:
            raise WizardValidationError("Please enter an API key first")
        if self._api_validator is None:
            raise RuntimeError("No API key validator configured for this session")

        operation = AsyncOperation.from_config(
            lambda: self._api_validator(api_id, key),
            self._retry,
            name=f"validate {api_id} API key",
        )
        self._operations[api_id] = operation
        valid = await operation.run()
        self.validated_apis[api_id] = bool(valid)
        if not valid:
            raise WizardValidationError(f"{api_id} API key was rejected")
        logger.info(f"{api_id} API validated successfully")
        return True

    def cancel_validation(self, api_id: str) -> bool:
        operation = self._operations.get(api_id)
        return operation.cancel() if operation else False

    def ensure_apis_ready(self) -> List[str]:
        configured = [k for k, v in self.data.api_keys.items() if v.strip()]
        if not configured:
            raise WizardValidationError("Please configure at least one API")
        if not all(self.validated_apis.get(k) for k in configured):
            raise WizardValidationError(
                "Please validate all configured APIs before proceeding"
            )
        return configured

    def invite_team(self, members: List[TeamMember]) -> List[TeamMember]:
        self._ensure_active()
        valid = [m for m in members if m.is_complete]
        if not valid:
            raise WizardValidationError(
                "Please add at least one team member with name and email"
            )
        self.data.team_members = valid
        logger.info(f"{len(valid)} team member(s) invited")
        return valid

    def approve_record(self, record_id: str) -> None:
        self._ensure_active()
        if record_id not in self.data.approved_records:
            self.data.approved_records.append(record_id)

    def approve_all(self, record_ids: List[str]) -> None:
        for record_id in record_ids:
            self.approve_record(record_id)

    # ------------------------------------------------------------------
    # Lifecycle
    def _ensure_active(self) -> None:
        if self.state is not SessionState.ACTIVE:
            raise RuntimeError(f"Onboarding session is {self.state.value}")

    def complete(self) -> OnboardingData:
        self._ensure_active()
        self.state = SessionState.COMPLETED
        logger.info(f"Onboarding completed for {self.data.company or 'unnamed company'}")
        return self.data

    def abandon(self) -> None:
        if self.state is SessionState.ACTIVE:
            self.state = SessionState.ABANDONED
            for operation in self._operations.values():
                operation.cancel()
            logger.info("Onboarding session abandoned")


_current_session: contextvars.ContextVar[Optional[OnboardingSession]] = (
    contextvars.ContextVar("clynto_onboarding_session", default=None)
)


def current_session() -> OnboardingSession:
    session = _current_session.get()
    if session is None:
        raise RuntimeError("current_session() must be used within onboarding_session()")
    return session


@contextmanager
def _scoped(session: OnboardingSession) -> Iterator[OnboardingSession]:
    token = _current_session.set(session)
    try:
        yield session
    finally:
        # leaving without complete() counts as abandoning the wizard
        session.abandon()
        _current_session.reset(token)


@asynccontextmanager
async def onboarding_session(
    api_validator: Optional[ApiKeyValidator] = None,
    retry: Optional[RetryConfig] = None,
) -> AsyncIterator[OnboardingSession]:
    """Open a wizard session visible through :func:`current_session`."""
    with _scoped(OnboardingSession(api_validator, retry)) as session:
        yield session
