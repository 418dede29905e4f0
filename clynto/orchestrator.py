"""Orchestrator service: playbook assignment and active workflow tracking."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional

from .constants import ALL_CATEGORIES
from .contracts import TaskStatus
from .exceptions import AccountNotFoundError, WorkflowNotFoundError
from .models import (
    AccountSource,
    ActiveWorkflow,
    AwaitingAccount,
    PlaybookRef,
    WorkflowCategory,
    WorkflowInstance,
)
from .persistence import WorkflowRepository, get_repository
from .playbooks import PLAYBOOKS, PlaybookLibrary, PlaybookRecommendation
from .playbooks import recommend_playbooks

logger = logging.getLogger(__name__)


def _matches_search(text: str, *fields: str) -> bool:
    needle = text.strip().lower()
    return not needle or any(needle in f.lower() for f in fields)


def filter_workflows(
    workflows: Iterable[ActiveWorkflow],
    category: str = ALL_CATEGORIES,
    search: str = "",
) -> List[ActiveWorkflow]:
    """Filter workflow cards by exact category and free-text search.

    The search is a case-insensitive substring match on the account name or
    the playbook name. ``category="all"`` disables the category predicate.
    """
    wanted = None if category == ALL_CATEGORIES else WorkflowCategory(category)
    return [
        w
        for w in workflows
        if (wanted is None or w.category is wanted)
        and _matches_search(search, w.account.name, w.playbook.name)
    ]


class Orchestrator:
    """Moves accounts from "awaiting" to "active" and tracks their workflows."""

    def __init__(
        self,
        repository: WorkflowRepository | None = None,
        library: PlaybookLibrary | None = None,
    ) -> None:
        self._repository = repository if repository is not None else get_repository()
        self._library = library if library is not None else PLAYBOOKS
        self._lock = asyncio.Lock()

    @property
    def library(self) -> PlaybookLibrary:
        return self._library

    # ------------------------------------------------------------------
    # Awaiting accounts
    async def add_awaiting_account(self, account: AwaitingAccount) -> None:
        await self._repository.add_awaiting_account(account)
        logger.info(
            f"Account {account.id} ({account.name}) registered from {account.source.value}"
        )

    async def awaiting_accounts(
        self, search: str = "", source: Optional[AccountSource | str] = None
    ) -> List[AwaitingAccount]:
        wanted = AccountSource(source) if source else None
        accounts = await self._repository.list_awaiting_accounts()
        return [
            a
            for a in accounts
            if (wanted is None or a.source is wanted) and _matches_search(search, a.name)
        ]

    async def _require_awaiting(self, account_id: str) -> AwaitingAccount:
        account = await self._repository.get_awaiting_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    async def recommendations(
        self, account_id: str, limit: int = 3
    ) -> List[PlaybookRecommendation]:
        account = await self._require_awaiting(account_id)
        return recommend_playbooks(account, self._library, limit=limit)

    async def assign_playbook(self, account_id: str, playbook_id: str) -> ActiveWorkflow:
        """Start ``playbook_id`` for an awaiting account.

        The account leaves the awaiting list and the new workflow appears in
        the active list in one repository call, so no reader sees the account
        in both lists or in neither.

        Raises:
            AccountNotFoundError: If ``account_id`` is not awaiting a playbook.
            PlaybookNotFoundError: If ``playbook_id`` is unknown.
        """
        async with self._lock:
            account = await self._require_awaiting(account_id)
            template = self._library.get(playbook_id)
            instance = WorkflowInstance(
                account=account.to_summary(),
                playbook=PlaybookRef(id=template.id, name=template.name),
                category=template.category,
                phases=template.instantiate(),
            )
            await self._repository.promote_account(account_id, instance)

        logger.info(
            f"Assigned playbook {template.id} to {account.name}; workflow {instance.id} started"
        )
        return instance.to_active_workflow()

    # ------------------------------------------------------------------
    # Active workflows
    async def get_workflow(self, workflow_id: str) -> WorkflowInstance:
        instance = await self._repository.get_workflow(workflow_id)
        if instance is None:
            raise WorkflowNotFoundError(workflow_id)
        return instance

    async def active_workflows(
        self, category: str = ALL_CATEGORIES, search: str = ""
    ) -> List[ActiveWorkflow]:
        instances = await self._repository.list_workflows()
        return filter_workflows(
            (i.to_active_workflow() for i in instances), category, search
        )

    async def update_task_status(
        self, workflow_id: str, task_id: str, status: TaskStatus | str
    ) -> ActiveWorkflow:
        async with self._lock:
            instance = await self.get_workflow(workflow_id)
            previous = instance.set_task_status(task_id, status)
            await self._repository.save_workflow(instance)
        logger.info(
            f"Workflow {workflow_id}: task {task_id} {previous.value} -> {TaskStatus(status).value}"
        )
        return instance.to_active_workflow()

    async def reopen_task(self, workflow_id: str, task_id: str) -> ActiveWorkflow:
        async with self._lock:
            instance = await self.get_workflow(workflow_id)
            instance.reopen_task(task_id)
            await self._repository.save_workflow(instance)
        return instance.to_active_workflow()

    async def pause_workflow(self, workflow_id: str) -> ActiveWorkflow:
        async with self._lock:
            instance = await self.get_workflow(workflow_id)
            instance.pause()
            await self._repository.save_workflow(instance)
        logger.info(f"Workflow {workflow_id} paused")
        return instance.to_active_workflow()

    async def resume_workflow(self, workflow_id: str) -> ActiveWorkflow:
        async with self._lock:
            instance = await self.get_workflow(workflow_id)
            instance.resume()
            await self._repository.save_workflow(instance)
        logger.info(f"Workflow {workflow_id} resumed")
        return instance.to_active_workflow()
