"""Repository abstraction for accounts and workflow instances."""

from __future__ import annotations

from typing import Protocol

from ..models import AwaitingAccount, WorkflowInstance


class WorkflowRepository(Protocol):
    """Protocol for workflow state persistence backends."""

    async def add_awaiting_account(self, account: AwaitingAccount) -> None:
        """Register an account that has no playbook yet."""

    async def get_awaiting_account(self, account_id: str) -> AwaitingAccount | None:
        """Retrieve an awaiting account by id."""

    async def list_awaiting_accounts(self) -> list[AwaitingAccount]:
        """Return all accounts waiting for a playbook."""

    async def create_workflow(self, instance: WorkflowInstance) -> None:
        """Persist a new workflow instance."""

    async def save_workflow(self, instance: WorkflowInstance) -> None:
        """Persist changes to an existing workflow instance."""

    async def get_workflow(self, workflow_id: str) -> WorkflowInstance | None:
        """Retrieve the workflow instance by id."""

    async def list_workflows(self) -> list[WorkflowInstance]:
        """Return all persisted workflows."""

    async def promote_account(
        self, account_id: str, instance: WorkflowInstance
    ) -> None:
        """Remove ``account_id`` from the awaiting set and store ``instance``.

        Both changes happen together or not at all.
        """
