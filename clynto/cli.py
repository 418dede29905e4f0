"""Command line interface for the clynto orchestrator."""

from __future__ import annotations

import asyncio
from typing import Optional

import typer

from clynto.config import ClyntoConfig, configure_logging, load_config
from clynto.constants import ALL_CATEGORIES
from clynto.contracts import get_phase_progress
from clynto.exceptions import ClyntoError
from clynto.journey import summarize_stages
from clynto.orchestrator import Orchestrator
from clynto.persistence import get_repository
from clynto.playbooks import default_library
from clynto.samples import account_table, seed_repository
from clynto.utils.formatting import format_currency, format_percentage

app = typer.Typer(help="CLI for the clynto customer success orchestrator")

# Command groups
workflow_app = typer.Typer(help="Commands for active workflows")
awaiting_app = typer.Typer(help="Commands for accounts awaiting a playbook")
playbook_app = typer.Typer(help="Commands for playbook templates")
accounts_app = typer.Typer(help="Commands for the account canvas")

app.add_typer(workflow_app, name="workflow")
app.add_typer(awaiting_app, name="awaiting")
app.add_typer(playbook_app, name="playbook")
app.add_typer(accounts_app, name="accounts")

_config: ClyntoConfig | None = None


@app.callback()
def main(
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to a YAML config file"
    ),
) -> None:
    """clynto CLI entry point."""
    global _config
    try:
        _config = load_config(config_path)
        configure_logging(_config)
    except ValueError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1)


def _get_config() -> ClyntoConfig:
    return _config or load_config()


async def _orchestrator() -> Orchestrator:
    config = _get_config()
    repository = get_repository()
    library = default_library(config.playbooks_path)
    if config.seed_demo_data:
        empty = not await repository.list_workflows() and not (
            await repository.list_awaiting_accounts()
        )
        if empty:
            await seed_repository(repository, library)
    return Orchestrator(repository, library)


def _run(coro):
    """Run ``coro``, turning domain and input errors into a red message and exit code 1."""
    try:
        return asyncio.run(coro)
    except (ClyntoError, ValueError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1)


@workflow_app.command("list")
def workflow_list(
    category: str = typer.Option(
        ALL_CATEGORIES, help="onboarding, at_risk, renewal, expansion or all"
    ),
    search: str = typer.Option("", help="Match account or playbook name"),
) -> None:
    """
    List active workflows with progress and status.

    Example:
        clynto workflow list --category onboarding --search acme
        # Output: wf-acme  Acme Corporation  Enterprise Onboarding  63%  running
    """

    async def _list():
        orchestrator = await _orchestrator()
        return await orchestrator.active_workflows(category, search)

    workflows = _run(_list())
    if not workflows:
        typer.echo("No workflows found")
        return
    for wf in workflows:
        typer.echo(
            f"{wf.id}\t{wf.account.name}\t{wf.playbook.name}\t"
            f"{format_percentage(wf.progress.percentage)}\t{wf.status.value}"
        )


@workflow_app.command("show")
def workflow_show(workflow_id: str) -> None:
    """
    Show the phase board of a workflow.

    Example:
        clynto workflow show wf-acme
        # Output: Acme Corporation - Enterprise Onboarding (running)
        #         [100%] Kickoff & Alignment (Days 1-3)
        #           - kick-1 Schedule Kickoff Meeting: completed
    """

    async def _show():
        orchestrator = await _orchestrator()
        return await orchestrator.get_workflow(workflow_id)

    wf = _run(_show())
    typer.echo(f"{wf.account.name} - {wf.playbook.name} ({wf.status.value})")
    progress = wf.progress
    typer.echo(
        f"Phase {progress.current_phase}/{progress.total_phases}: "
        f"{wf.current_phase_name}, {format_percentage(progress.percentage)} complete"
    )
    for phase in wf.phases:
        marker = "" if phase.enabled else " [disabled]"
        typer.echo(
            f"[{format_percentage(get_phase_progress(phase))}] "
            f"{phase.name} ({phase.timeline}){marker}"
        )
        for task in phase.tasks:
            owner = f" - {task.owner}" if task.owner else ""
            typer.echo(f"  - {task.id} {task.name}: {task.status.value}{owner}")


@workflow_app.command("task")
def workflow_task(workflow_id: str, task_id: str, status: str) -> None:
    """
    Change the status of a task.

    Example:
        clynto workflow task wf-acme setup-1 completed
    """

    async def _update():
        orchestrator = await _orchestrator()
        return await orchestrator.update_task_status(workflow_id, task_id, status)

    wf = _run(_update())
    typer.echo(
        f"{task_id} -> {status}; {wf.account.name} at "
        f"{format_percentage(wf.progress.percentage)}"
    )


@workflow_app.command("reopen")
def workflow_reopen(workflow_id: str, task_id: str) -> None:
    """Move a completed or skipped task back to pending."""

    async def _reopen():
        orchestrator = await _orchestrator()
        return await orchestrator.reopen_task(workflow_id, task_id)

    wf = _run(_reopen())
    typer.echo(f"{task_id} reopened; {wf.account.name} at {format_percentage(wf.progress.percentage)}")


@workflow_app.command("pause")
def workflow_pause(workflow_id: str) -> None:
    """Pause a running workflow."""

    async def _pause():
        orchestrator = await _orchestrator()
        return await orchestrator.pause_workflow(workflow_id)

    wf = _run(_pause())
    typer.echo(f"Workflow {wf.id}: {wf.status.value}")


@workflow_app.command("resume")
def workflow_resume(workflow_id: str) -> None:
    """Resume a paused workflow."""

    async def _resume():
        orchestrator = await _orchestrator()
        return await orchestrator.resume_workflow(workflow_id)

    wf = _run(_resume())
    typer.echo(f"Workflow {wf.id}: {wf.status.value}")


@awaiting_app.command("list")
def awaiting_list(
    search: str = typer.Option("", help="Match account name"),
    source: Optional[str] = typer.Option(None, help="CRM, Bulk Upload or Manual"),
) -> None:
    """List accounts that have no playbook yet."""

    async def _list():
        orchestrator = await _orchestrator()
        return await orchestrator.awaiting_accounts(search, source)

    accounts = _run(_list())
    if not accounts:
        typer.echo("No accounts awaiting a playbook")
        return
    for account in accounts:
        typer.echo(
            f"{account.id}\t{account.name}\t{account.segment}\t"
            f"{format_currency(account.arr)}\t{account.source.value}\t"
            f"{account.days_since_creation}d\t{account.suggested_stage}"
        )


@awaiting_app.command("recommend")
def awaiting_recommend(account_id: str) -> None:
    """Rank playbooks for an awaiting account."""

    async def _recommend():
        orchestrator = await _orchestrator()
        return await orchestrator.recommendations(account_id)

    for rec in _run(_recommend()):
        flag = " (recommended)" if rec.is_recommended else ""
        typer.echo(f"{rec.playbook_id}\t{rec.name}\t{rec.match_score}{flag}")
        for reason in rec.reasons:
            typer.echo(f"  - {reason}")


@awaiting_app.command("assign")
def awaiting_assign(account_id: str, playbook_id: str) -> None:
    """
    Assign a playbook to an awaiting account and start its workflow.

    Example:
        clynto awaiting assign aw-1 enterprise-onboarding
        # Output: Started Enterprise Onboarding for Quantum Dynamics (wf-...)
    """

    async def _assign():
        orchestrator = await _orchestrator()
        return await orchestrator.assign_playbook(account_id, playbook_id)

    wf = _run(_assign())
    typer.echo(f"Started {wf.playbook.name} for {wf.account.name} ({wf.id})")
    typer.echo(f"Current phase: {wf.current_phase_name} ({wf.phase_timeline})")


@app.command("journey")
def journey() -> None:
    """Show workflows grouped by customer lifecycle stage."""

    async def _journey():
        orchestrator = await _orchestrator()
        return summarize_stages(await orchestrator.active_workflows())

    for summary in _run(_journey()):
        attention = (
            f", {summary.attention_count} need attention"
            if summary.attention_count
            else ""
        )
        typer.echo(
            f"{summary.stage.label}: {summary.count} workflow(s), "
            f"avg {format_percentage(summary.average_progress)}{attention}"
        )
        for wf in summary.workflows:
            typer.echo(f"  - {wf.account.name}: {wf.current_phase_name}")


@playbook_app.command("list")
def playbook_list() -> None:
    """List available playbook templates."""
    library = default_library(_get_config().playbooks_path)
    for template in library.list():
        typer.echo(
            f"{template.id}\t{template.name}\t{template.category.value}\t"
            f"{len(template.phases)} phases\t{template.avg_duration}"
        )


@playbook_app.command("show")
def playbook_show(playbook_id: str) -> None:
    """Show the phases and tasks of a playbook template."""
    library = default_library(_get_config().playbooks_path)
    try:
        template = library.get(playbook_id)
    except ClyntoError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.echo(f"{template.name} ({template.category.value}, {template.avg_duration})")
    if template.description:
        typer.echo(template.description)
    for phase in template.phases:
        typer.echo(f"{phase.name} - {phase.timeline}")
        for task in phase.tasks:
            typer.echo(f"  - {task.name}")


@accounts_app.command("list")
def accounts_list(
    search: str = typer.Option("", help="Match account name"),
    stage: Optional[str] = typer.Option(None, help="Onboarding, Adoption or Renewal"),
    health: Optional[str] = typer.Option(None, help="Healthy, At Risk or Critical"),
) -> None:
    """List accounts of the canvas, optionally filtered."""
    rows = account_table().filter(stage=stage, health=health, search=search)
    if not rows:
        typer.echo("No accounts found")
        return
    for row in rows:
        typer.echo(
            f"{row.name}\t{row.stage}\t{row.health}\t{format_currency(row.arr)}\t"
            f"renews in {row.renewal_days}d"
        )


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
