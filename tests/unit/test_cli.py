import asyncio

import pytest
from typer.testing import CliRunner

import clynto.persistence as persistence
from clynto.cli import app
from clynto.persistence import InMemoryWorkflowRepository
from clynto.samples import seed_repository


@pytest.fixture
def repo(tmp_path, monkeypatch) -> InMemoryWorkflowRepository:
    monkeypatch.setenv("CLYNTO_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.delenv("CLYNTO_PLAYBOOKS_PATH", raising=False)
    repo = InMemoryWorkflowRepository()
    asyncio.run(seed_repository(repo))
    persistence._repository_instance = repo
    yield repo
    persistence.reset_repository()


def test_workflow_list_filters(repo):
    runner = CliRunner()
    result = runner.invoke(app, ["workflow", "list", "--category", "onboarding"])
    assert result.exit_code == 0, result.stdout
    assert "Acme Corporation" in result.stdout
    assert "StartupHub" in result.stdout
    assert "GlobalTech" not in result.stdout

    bad = runner.invoke(app, ["workflow", "list", "--category", "churned"])
    assert bad.exit_code == 1


def test_workflow_show_and_missing(repo):
    runner = CliRunner()
    result = runner.invoke(app, ["workflow", "show", "wf-acme"])
    assert result.exit_code == 0, result.stdout
    assert "Acme Corporation - Enterprise Onboarding (running)" in result.stdout
    assert "train-1 End User Training Sessions: in_progress" in result.stdout

    missing = runner.invoke(app, ["workflow", "show", "wf-missing"])
    assert missing.exit_code == 1
    assert "Workflow 'wf-missing' not found" in missing.stdout


def test_workflow_task_updates_and_rejects(repo):
    runner = CliRunner()
    result = runner.invoke(app, ["workflow", "task", "wf-acme", "train-1", "completed"])
    assert result.exit_code == 0, result.stdout
    assert "train-1 -> completed" in result.stdout

    rejected = runner.invoke(app, ["workflow", "task", "wf-acme", "train-1", "pending"])
    assert rejected.exit_code == 1
    assert "Cannot move task" in rejected.stdout

    invalid = runner.invoke(app, ["workflow", "task", "wf-acme", "train-1", "done"])
    assert invalid.exit_code == 1


def test_assign_moves_account(repo):
    runner = CliRunner()
    result = runner.invoke(app, ["awaiting", "assign", "aw-1", "enterprise-onboarding"])
    assert result.exit_code == 0, result.stdout
    assert "Started Enterprise Onboarding for Quantum Dynamics" in result.stdout

    listing = runner.invoke(app, ["awaiting", "list"])
    assert "Quantum Dynamics" not in listing.stdout
    assert "TechFlow Industries" in listing.stdout

    again = runner.invoke(app, ["awaiting", "assign", "aw-1", "enterprise-onboarding"])
    assert again.exit_code == 1


def test_recommend_and_journey(repo):
    runner = CliRunner()
    rec = runner.invoke(app, ["awaiting", "recommend", "aw-1"])
    assert rec.exit_code == 0, rec.stdout
    assert rec.stdout.splitlines()[0].startswith("enterprise-onboarding")
    assert "(recommended)" in rec.stdout

    journey = runner.invoke(app, ["journey"])
    assert journey.exit_code == 0, journey.stdout
    assert "Adoption: 1 workflow(s)" in journey.stdout
    assert "need attention" in journey.stdout


def test_playbook_and_accounts_commands(repo):
    runner = CliRunner()
    listing = runner.invoke(app, ["playbook", "list"])
    assert "enterprise-onboarding" in listing.stdout

    shown = runner.invoke(app, ["playbook", "show", "health-recovery"])
    assert shown.exit_code == 0
    assert "Diagnosis - Days 1-7" in shown.stdout

    missing = runner.invoke(app, ["playbook", "show", "nope"])
    assert missing.exit_code == 1

    accounts = runner.invoke(app, ["accounts", "list", "--search", "acme"])
    assert accounts.exit_code == 0
    assert accounts.stdout.strip().startswith("Acme Corporation")
    assert "$125K" in accounts.stdout


def test_invalid_input_reports_error(repo, monkeypatch):
    runner = CliRunner()
    result = runner.invoke(app, ["awaiting", "list", "--source", "bogus"])
    assert result.exit_code == 1
    assert "bogus" in result.stdout

    monkeypatch.setenv("CLYNTO_LOG_LEVEL", "LOUD")
    result = runner.invoke(app, ["journey"])
    assert result.exit_code == 1
    assert "Unknown log level: LOUD" in result.stdout
