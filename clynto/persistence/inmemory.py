"""In-memory implementation of the workflow repository."""

from __future__ import annotations

from typing import Dict

from ..exceptions import AccountNotFoundError, WorkflowNotFoundError
from ..models import AwaitingAccount, WorkflowInstance
from .repository import WorkflowRepository


class InMemoryWorkflowRepository(WorkflowRepository):
    """Store accounts and workflows in local memory.

    Useful for tests, the CLI demo and any session without a backend. Data is
    not persisted across process restarts.
    """

    def __init__(self) -> None:
        self._awaiting: Dict[str, AwaitingAccount] = {}
        self._workflows: Dict[str, WorkflowInstance] = {}

    # ------------------------------------------------------------------
    async def add_awaiting_account(self, account: AwaitingAccount) -> None:
        if account.id in self._awaiting:
            raise ValueError(f"Account '{account.id}' is already awaiting a playbook")
        self._awaiting[account.id] = account

    async def get_awaiting_account(self, account_id: str) -> AwaitingAccount | None:
        return self._awaiting.get(account_id)

    async def list_awaiting_accounts(self) -> list[AwaitingAccount]:
        return list(self._awaiting.values())

    async def create_workflow(self, instance: WorkflowInstance) -> None:
        if instance.id in self._workflows:
            raise ValueError(f"Workflow '{instance.id}' already exists")
        self._workflows[instance.id] = instance

    async def save_workflow(self, instance: WorkflowInstance) -> None:
        if instance.id not in self._workflows:
            raise WorkflowNotFoundError(instance.id)
        self._workflows[instance.id] = instance

    async def get_workflow(self, workflow_id: str) -> WorkflowInstance | None:
        return self._workflows.get(workflow_id)

    async def list_workflows(self) -> list[WorkflowInstance]:
        return list(self._workflows.values())

    async def promote_account(
        self, account_id: str, instance: WorkflowInstance
    ) -> None:
        # validate both sides before touching either map
        if account_id not in self._awaiting:
            raise AccountNotFoundError(account_id)
        if instance.id in self._workflows:
            raise ValueError(f"Workflow '{instance.id}' already exists")
        self._workflows[instance.id] = instance
        del self._awaiting[account_id]
