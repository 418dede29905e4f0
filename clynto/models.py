"""Account and workflow summary models."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .contracts import Phase, Task, TaskStatus, find_task, get_phase_progress
from .contracts import reopen_task as _reopen_task
from .contracts import update_task_status
from .exceptions import InvalidTransitionError, PhaseNotFoundError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkflowCategory(str, Enum):
    ONBOARDING = "onboarding"
    AT_RISK = "at_risk"
    RENEWAL = "renewal"
    EXPANSION = "expansion"


class WorkflowStatus(str, Enum):
    RUNNING = "running"
    ATTENTION = "attention"
    PAUSED = "paused"
    COMPLETED = "completed"


class AccountSource(str, Enum):
    CRM = "CRM"
    BULK_UPLOAD = "Bulk Upload"
    MANUAL = "Manual"


class AccountSummary(BaseModel):
    name: str
    segment: str
    arr: int = Field(ge=0, description="Annual recurring revenue in USD")
    health_score: Optional[int] = Field(default=None, ge=0, le=100)


class PlaybookRef(BaseModel):
    """Which playbook a workflow runs, as shown on workflow cards."""

    id: str
    name: str
    last_activity: str = "Just now"


class WorkflowProgress(BaseModel):
    current_phase: int
    total_phases: int
    percentage: int = Field(ge=0, le=100)


class ActiveWorkflow(BaseModel):
    """Card-level summary of one account running one playbook."""

    id: str
    account: AccountSummary
    playbook: PlaybookRef
    category: WorkflowCategory
    progress: WorkflowProgress
    current_phase_name: str
    phase_timeline: str
    status: WorkflowStatus


class AwaitingAccount(BaseModel):
    """Account registered without a playbook."""

    id: str
    name: str
    segment: str
    arr: int = Field(ge=0)
    source: AccountSource
    days_since_creation: int = Field(default=0, ge=0)
    suggested_stage: str = "onboarding"
    health_score: Optional[int] = Field(default=None, ge=0, le=100)

    def to_summary(self) -> AccountSummary:
        return AccountSummary(
            name=self.name,
            segment=self.segment,
            arr=self.arr,
            health_score=self.health_score,
        )


class WorkflowInstance(BaseModel):
    """A playbook instantiated against one account.

    Holds the full phase/task tree; the card summary (progress, current phase)
    is always derived from that tree.
    """

    id: str = Field(default_factory=lambda: f"wf-{uuid.uuid4().hex[:12]}")
    account: AccountSummary
    playbook: PlaybookRef
    category: WorkflowCategory
    phases: List[Phase] = Field(default_factory=list)
    status: WorkflowStatus = WorkflowStatus.RUNNING
    # status to return to on resume()
    paused_from: Optional[WorkflowStatus] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def enabled_phases(self) -> List[Phase]:
        return [p for p in self.phases if p.enabled]

    @property
    def current_phase(self) -> Optional[Phase]:
        """First enabled phase with unfinished work, or the last one."""
        phases = self.enabled_phases
        if not phases:
            return None
        return next((p for p in phases if not p.is_finished), phases[-1])

    @property
    def progress(self) -> WorkflowProgress:
        phases = self.enabled_phases
        current = self.current_phase
        tasks = [t for p in phases for t in p.tasks]
        done = sum(1 for t in tasks if t.completed)
        return WorkflowProgress(
            current_phase=phases.index(current) + 1 if current else 0,
            total_phases=len(phases),
            percentage=round(done * 100 / len(tasks)) if tasks else 0,
        )

    @property
    def current_phase_name(self) -> str:
        current = self.current_phase
        return current.name if current else ""

    @property
    def phase_timeline(self) -> str:
        current = self.current_phase
        return current.timeline if current else ""

    @property
    def is_finished(self) -> bool:
        phases = self.enabled_phases
        return bool(phases) and all(p.is_finished for p in phases)

    def phase_progress(self) -> dict[str, float]:
        return {p.id: get_phase_progress(p) for p in self.phases}

    def find_task(self, task_id: str) -> Task:
        return find_task(self.phases, task_id)

    def to_active_workflow(self) -> ActiveWorkflow:
        return ActiveWorkflow(
            id=self.id,
            account=self.account,
            playbook=self.playbook,
            category=self.category,
            progress=self.progress,
            current_phase_name=self.current_phase_name,
            phase_timeline=self.phase_timeline,
            status=self.status,
        )

    # ------------------------------------------------------------------
    # Mutations
    def _touch(self) -> None:
        self.updated_at = _utcnow()
        self.playbook.last_activity = "Just now"

    def _ensure_not_paused(self, action: str) -> None:
        if self.status is WorkflowStatus.PAUSED:
            raise InvalidTransitionError(self.status.value, action, subject="workflow")

    def _sync_completion(self) -> None:
        if self.status is WorkflowStatus.PAUSED:
            return
        if self.is_finished and self.status is not WorkflowStatus.COMPLETED:
            self.status = WorkflowStatus.COMPLETED
            logger.info(f"Workflow {self.id} for {self.account.name} completed")
        elif not self.is_finished and self.status is WorkflowStatus.COMPLETED:
            self.status = WorkflowStatus.RUNNING

    def set_task_status(self, task_id: str, status: TaskStatus | str) -> TaskStatus:
        """Apply a status change to ``task_id`` and return its previous status."""
        self._ensure_not_paused(f"update task {task_id}")
        previous = update_task_status(self.find_task(task_id), status)
        self._touch()
        self._sync_completion()
        return previous

    def reopen_task(self, task_id: str) -> TaskStatus:
        self._ensure_not_paused(f"reopen task {task_id}")
        previous = _reopen_task(self.find_task(task_id))
        self._touch()
        self._sync_completion()
        return previous

    def pause(self) -> None:
        if self.status is WorkflowStatus.COMPLETED:
            raise InvalidTransitionError(
                self.status.value, WorkflowStatus.PAUSED.value, subject="workflow"
            )
        if self.status is not WorkflowStatus.PAUSED:
            self.paused_from = self.status
        self.status = WorkflowStatus.PAUSED
        self._touch()

    def resume(self) -> None:
        if self.status is not WorkflowStatus.PAUSED:
            raise InvalidTransitionError(
                self.status.value, WorkflowStatus.RUNNING.value, subject="workflow"
            )
        self.status = self.paused_from or WorkflowStatus.RUNNING
        self.paused_from = None
        self._touch()
        # phases may have been disabled while paused
        self._sync_completion()

    def flag_attention(self) -> None:
        if self.status is WorkflowStatus.COMPLETED:
            raise InvalidTransitionError(
                self.status.value, WorkflowStatus.ATTENTION.value, subject="workflow"
            )
        self.status = WorkflowStatus.ATTENTION
        self._touch()

    def set_phase_enabled(self, phase_id: str, enabled: bool) -> bool:
        """Include or exclude ``phase_id`` from progress; return whether it changed.

        Disabling the last open phases completes the workflow, re-enabling an
        unfinished one reopens it.
        """
        phase = next((p for p in self.phases if p.id == phase_id), None)
        if phase is None:
            raise PhaseNotFoundError(phase_id)
        if phase.enabled == enabled:
            return False
        phase.enabled = enabled
        self._touch()
        self._sync_completion()
        return True
