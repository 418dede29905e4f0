"""Presentation state for the workflow phase board."""

from __future__ import annotations

import logging
from typing import List, Optional, Set

from pydantic import BaseModel

from .contracts import Phase, TaskStatus, get_phase_progress
from .exceptions import PhaseNotFoundError
from .models import WorkflowInstance

logger = logging.getLogger(__name__)


class PhaseColumn(BaseModel):
    """One column of the horizontally scrolling phase board."""

    id: str
    name: str
    timeline: str
    enabled: bool
    progress: float
    completed_tasks: int
    total_tasks: int
    is_active: bool = False


class WorkflowBoard:
    """Expand/collapse, active phase and edit state for one workflow.

    Expansion is view state only. Completion toggles go through the task
    state machine of the underlying instance.
    """

    def __init__(self, instance: WorkflowInstance) -> None:
        self.instance = instance
        self.expanded_tasks: Set[str] = set()
        self.active_phase: Optional[str] = instance.phases[0].id if instance.phases else None
        self.has_unsaved_changes = False
        first_running = next(
            (
                t.id
                for p in instance.phases
                for t in p.tasks
                if t.status is TaskStatus.IN_PROGRESS
            ),
            None,
        )
        if first_running:
            self.expanded_tasks.add(first_running)

    def _phase(self, phase_id: str) -> Phase:
        for phase in self.instance.phases:
            if phase.id == phase_id:
                return phase
        raise PhaseNotFoundError(phase_id)

    def columns(self) -> List[PhaseColumn]:
        return [
            PhaseColumn(
                id=p.id,
                name=p.name,
                timeline=p.timeline,
                enabled=p.enabled,
                progress=get_phase_progress(p),
                completed_tasks=p.completed_count,
                total_tasks=len(p.tasks),
                is_active=p.id == self.active_phase,
            )
            for p in self.instance.phases
        ]

    def toggle_task_expansion(self, task_id: str) -> bool:
        """Flip ``task_id`` in the expanded set; return whether it is now expanded."""
        if task_id in self.expanded_tasks:
            self.expanded_tasks.discard(task_id)
            return False
        self.expanded_tasks.add(task_id)
        return True

    def is_expanded(self, task_id: str) -> bool:
        return task_id in self.expanded_tasks

    def set_active_phase(self, phase_id: str) -> None:
        self._phase(phase_id)
        self.active_phase = phase_id

    def toggle_task_completion(self, task_id: str) -> TaskStatus:
        """Complete an open task, or reopen a completed one. Returns the new status."""
        task = self.instance.find_task(task_id)
        if task.completed:
            self.instance.reopen_task(task_id)
        else:
            if task.status is TaskStatus.SKIPPED:
                self.instance.reopen_task(task_id)
            self.instance.set_task_status(task_id, TaskStatus.COMPLETED)
        self.has_unsaved_changes = True
        logger.debug(f"Toggled completion of {task_id}: now {task.status.value}")
        return task.status

    def set_phase_enabled(self, phase_id: str, enabled: bool) -> None:
        if self.instance.set_phase_enabled(phase_id, enabled):
            self.has_unsaved_changes = True

    def mark_saved(self) -> None:
        self.has_unsaved_changes = False
