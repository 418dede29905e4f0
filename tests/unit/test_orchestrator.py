"""Tests for playbook assignment and active workflow tracking."""

import asyncio

import pytest

from clynto.exceptions import (
    AccountNotFoundError,
    InvalidTransitionError,
    PlaybookNotFoundError,
    WorkflowNotFoundError,
)
from clynto.models import AccountSource, AwaitingAccount, WorkflowCategory
from clynto.orchestrator import Orchestrator, filter_workflows
from clynto.persistence import InMemoryWorkflowRepository
from clynto.playbooks import PLAYBOOKS, PlaybookLibrary
from clynto.samples import seed_repository


async def _seeded() -> Orchestrator:
    repo = InMemoryWorkflowRepository()
    await seed_repository(repo)
    return Orchestrator(repo, PLAYBOOKS)


@pytest.mark.asyncio
async def test_assign_playbook_moves_account_to_active():
    orchestrator = await _seeded()

    active = await orchestrator.assign_playbook("aw-1", "enterprise-onboarding")

    assert active.account.name == "Quantum Dynamics"
    assert active.playbook.name == "Enterprise Onboarding"
    assert active.progress.current_phase == 1
    assert active.progress.percentage == 0

    awaiting_ids = [a.id for a in await orchestrator.awaiting_accounts()]
    assert "aw-1" not in awaiting_ids
    workflows = await orchestrator.active_workflows()
    assert any(
        w.id == active.id and w.account.name == "Quantum Dynamics" for w in workflows
    )


@pytest.mark.asyncio
async def test_failed_assignment_changes_nothing():
    orchestrator = await _seeded()
    awaiting_before = await orchestrator.awaiting_accounts()
    active_before = await orchestrator.active_workflows()

    with pytest.raises(PlaybookNotFoundError):
        await orchestrator.assign_playbook("aw-1", "no-such-playbook")
    with pytest.raises(AccountNotFoundError):
        await orchestrator.assign_playbook("aw-404", "enterprise-onboarding")

    assert await orchestrator.awaiting_accounts() == awaiting_before
    assert len(await orchestrator.active_workflows()) == len(active_before)


@pytest.mark.asyncio
async def test_concurrent_assignment_of_same_account():
    orchestrator = await _seeded()

    results = await asyncio.gather(
        orchestrator.assign_playbook("aw-2", "health-recovery"),
        orchestrator.assign_playbook("aw-2", "standard-onboarding"),
        return_exceptions=True,
    )

    assert sum(1 for r in results if isinstance(r, AccountNotFoundError)) == 1
    matching = [
        w
        for w in await orchestrator.active_workflows()
        if w.account.name == "TechFlow Industries"
    ]
    assert len(matching) == 1


@pytest.mark.asyncio
async def test_awaiting_accounts_filters():
    orchestrator = await _seeded()

    assert [a.id for a in await orchestrator.awaiting_accounts(search="scale")] == ["aw-5"]
    bulk = await orchestrator.awaiting_accounts(source="Bulk Upload")
    assert [a.name for a in bulk] == ["DataStream Corp"]

    await orchestrator.add_awaiting_account(
        AwaitingAccount(
            id="aw-6",
            name="Northwind",
            segment="SMB",
            arr=20_000,
            source=AccountSource.MANUAL,
        )
    )
    manual = await orchestrator.awaiting_accounts(source=AccountSource.MANUAL)
    assert {a.id for a in manual} == {"aw-5", "aw-6"}


@pytest.mark.asyncio
async def test_recommendations_for_awaiting_account():
    orchestrator = await _seeded()
    recs = await orchestrator.recommendations("aw-1")
    assert recs[0].name == "Enterprise Onboarding"
    with pytest.raises(AccountNotFoundError):
        await orchestrator.recommendations("aw-404")


@pytest.mark.asyncio
async def test_active_workflows_category_and_search():
    orchestrator = await _seeded()

    onboarding = await orchestrator.active_workflows(category="onboarding")
    assert {w.id for w in onboarding} == {"wf-acme", "wf-startuphub"}
    assert all(w.category is WorkflowCategory.ONBOARDING for w in onboarding)

    by_playbook = await orchestrator.active_workflows(search="renewal PREP")
    assert [w.id for w in by_playbook] == ["wf-globaltech"]

    assert await orchestrator.active_workflows(category="renewal", search="acme") == []


def test_filter_workflows_rejects_unknown_category():
    with pytest.raises(ValueError):
        filter_workflows([], category="churned")


@pytest.mark.asyncio
async def test_update_task_status_persists_progress():
    orchestrator = await _seeded()

    before = (await orchestrator.get_workflow("wf-acme")).progress.percentage
    summary = await orchestrator.update_task_status("wf-acme", "train-1", "completed")
    assert summary.progress.percentage > before

    stored = await orchestrator.get_workflow("wf-acme")
    assert stored.find_task("train-1").completed

    with pytest.raises(InvalidTransitionError):
        await orchestrator.update_task_status("wf-acme", "train-1", "in_progress")

    reopened = await orchestrator.reopen_task("wf-acme", "train-1")
    assert reopened.progress.percentage == before


@pytest.mark.asyncio
async def test_pause_and_resume():
    orchestrator = await _seeded()

    paused = await orchestrator.pause_workflow("wf-acme")
    assert paused.status.value == "paused"
    with pytest.raises(InvalidTransitionError):
        await orchestrator.update_task_status("wf-acme", "train-1", "completed")

    resumed = await orchestrator.resume_workflow("wf-acme")
    assert resumed.status.value == "running"


@pytest.mark.asyncio
async def test_unknown_workflow():
    orchestrator = await _seeded()
    with pytest.raises(WorkflowNotFoundError):
        await orchestrator.get_workflow("wf-missing")


@pytest.mark.asyncio
async def test_explicit_empty_library_is_respected():
    repo = InMemoryWorkflowRepository()
    await seed_repository(repo)
    orchestrator = Orchestrator(repo, PlaybookLibrary())

    with pytest.raises(PlaybookNotFoundError):
        await orchestrator.assign_playbook("aw-1", "enterprise-onboarding")
    assert await repo.get_awaiting_account("aw-1") is not None


@pytest.mark.asyncio
async def test_reopen_rejected_while_paused():
    orchestrator = await _seeded()
    await orchestrator.pause_workflow("wf-acme")
    with pytest.raises(InvalidTransitionError):
        await orchestrator.reopen_task("wf-acme", "kick-1")
    stored = await orchestrator.get_workflow("wf-acme")
    assert stored.find_task("kick-1").completed
