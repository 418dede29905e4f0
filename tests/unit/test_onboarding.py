"""Tests for the signup wizard session."""

import pytest

from clynto.config import RetryConfig
from clynto.exceptions import TransientError, WizardValidationError
from clynto.onboarding import (
    OnboardingSession,
    SessionState,
    TeamMember,
    current_session,
    onboarding_session,
)

FAST_RETRY = RetryConfig(max_attempts=2, base=0.001, jitter=0)


async def accept_all(api_id: str, key: str) -> bool:
    return True


async def reject_all(api_id: str, key: str) -> bool:
    return False


def test_step_navigation_is_clamped():
    session = OnboardingSession()
    assert session.prev_step() == 1
    assert session.set_step(42) == 10
    assert session.next_step() == 10
    assert session.prev_step() == 9


def test_update_data_validates():
    session = OnboardingSession()
    session.update_data(company="Acme", email="ops@acme.test")
    assert session.data.company == "Acme"
    with pytest.raises(ValueError):
        session.update_data(team_members="not a list")


def test_integration_selection_required():
    session = OnboardingSession()
    with pytest.raises(WizardValidationError, match="at least one integration"):
        session.confirm_integrations()

    session.select_integrations("crm", ["hubspot", "salesforce"])
    session.select_integrations("billing", ["stripe"])
    assert session.confirm_integrations() == 3

    with pytest.raises(WizardValidationError):
        session.select_integrations("fax", ["x"])


@pytest.mark.asyncio
async def test_api_keys_must_be_validated():
    session = OnboardingSession(api_validator=accept_all, retry=FAST_RETRY)
    with pytest.raises(WizardValidationError, match="configure at least one API"):
        session.ensure_apis_ready()
    with pytest.raises(WizardValidationError, match="enter an API key first"):
        await session.validate_api_key("hubspot")

    session.set_api_key("hubspot", "hs-123")
    with pytest.raises(WizardValidationError, match="validate all configured APIs"):
        session.ensure_apis_ready()

    assert await session.validate_api_key("hubspot") is True
    assert session.ensure_apis_ready() == ["hubspot"]

    # changing the key invalidates it again
    session.set_api_key("hubspot", "hs-456")
    with pytest.raises(WizardValidationError):
        session.ensure_apis_ready()


@pytest.mark.asyncio
async def test_rejected_key():
    session = OnboardingSession(api_validator=reject_all, retry=FAST_RETRY)
    session.set_api_key("stripe", "sk-bad")
    with pytest.raises(WizardValidationError):
        await session.validate_api_key("stripe")
    assert session.validated_apis["stripe"] is False


@pytest.mark.asyncio
async def test_validator_retried_on_transient_error():
    calls = []

    async def flaky(api_id, key):
        calls.append(api_id)
        if len(calls) == 1:
            raise TransientError("gateway timeout")
        return True

    session = OnboardingSession(api_validator=flaky, retry=FAST_RETRY)
    session.set_api_key("segment", "seg-1")
    assert await session.validate_api_key("segment")
    assert calls == ["segment", "segment"]


@pytest.mark.asyncio
async def test_missing_validator():
    session = OnboardingSession()
    session.set_api_key("hubspot", "hs-123")
    with pytest.raises(RuntimeError):
        await session.validate_api_key("hubspot")


def test_team_invite_requires_complete_member():
    session = OnboardingSession()
    with pytest.raises(WizardValidationError, match="at least one team member"):
        session.invite_team([TeamMember(name="Sam"), TeamMember(email="x@y.test")])

    invited = session.invite_team(
        [TeamMember(name="Sam", email="sam@acme.test"), TeamMember(name="")]
    )
    assert [m.name for m in invited] == ["Sam"]


def test_record_approval_is_idempotent():
    session = OnboardingSession()
    session.approve_record("r1")
    session.approve_all(["r1", "r2"])
    assert session.data.approved_records == ["r1", "r2"]


@pytest.mark.asyncio
async def test_session_scope():
    with pytest.raises(RuntimeError):
        current_session()

    async with onboarding_session() as session:
        assert current_session() is session
        session.update_data(company="Acme")
        session.complete()

    assert session.state is SessionState.COMPLETED
    with pytest.raises(RuntimeError):
        current_session()


@pytest.mark.asyncio
async def test_leaving_scope_abandons_session():
    async with onboarding_session() as session:
        session.approve_record("r1")

    assert session.state is SessionState.ABANDONED
    with pytest.raises(RuntimeError):
        session.approve_record("r2")
