"""Core workflow contracts: phases, tasks and sub-tasks of a playbook run."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .exceptions import InvalidTransitionError, TaskNotFoundError

logger = logging.getLogger(__name__)


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


class TriggerType(str, Enum):
    PLAYBOOK = "playbook"
    SYSTEM = "system"
    EVENT = "event"


TERMINAL_STATUSES: FrozenSet[TaskStatus] = frozenset(
    {TaskStatus.COMPLETED, TaskStatus.SKIPPED}
)

# Terminal states have no outgoing edges; leaving them requires reopen_task().
TASK_TRANSITIONS: Dict[TaskStatus, FrozenSet[TaskStatus]] = {
    TaskStatus.PENDING: frozenset(
        {TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED, TaskStatus.SKIPPED}
    ),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.COMPLETED, TaskStatus.SKIPPED}),
    TaskStatus.COMPLETED: frozenset(),
    TaskStatus.SKIPPED: frozenset(),
}


class _CamelModel(BaseModel):
    """Accepts both the camelCase payloads of the dashboard and snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AttributeUpdate(_CamelModel):
    """Account attribute a task writes when it runs."""

    name: str
    value: str
    auto_updated: bool = False


class SubTask(_CamelModel):
    id: str
    name: str
    completed: bool = False
    attribute_update: Optional[str] = None


class Task(_CamelModel):
    """One unit of work inside a phase.

    ``status`` is the single source of truth for completion. ``completed`` is
    derived from it and only accepted on input for payloads that still carry
    the legacy boolean.
    """

    id: str
    name: str
    description: str = ""
    end_goal: str = ""
    attributes_to_update: List[AttributeUpdate] = Field(default_factory=list)
    expectations: List[str] = Field(default_factory=list)
    sub_tasks: List[SubTask] = Field(default_factory=list)
    status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[str] = None
    owner: Optional[str] = None
    trigger_type: Optional[TriggerType] = None
    trigger_label: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _fold_completed_flag(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "completed" not in data:
            return data
        data = dict(data)
        flag = bool(data.pop("completed"))
        status = data.get("status")
        if status is None:
            if flag:
                data["status"] = TaskStatus.COMPLETED
            return data
        is_completed = TaskStatus(status) is TaskStatus.COMPLETED
        if flag != is_completed:
            raise ValueError(
                f"completed={flag} contradicts status '{TaskStatus(status).value}'"
            )
        return data

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "status":
            raise AttributeError(
                "Task.status is read-only; use update_task_status() or reopen_task()"
            )
        super().__setattr__(name, value)

    @property
    def completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    @property
    def subtask_progress(self) -> float:
        """Percentage of sub-tasks ticked off, independent of ``status``."""
        if not self.sub_tasks:
            return 0
        done = sum(1 for sub in self.sub_tasks if sub.completed)
        return done * 100 / len(self.sub_tasks)

    def _set_status(self, status: TaskStatus) -> None:
        BaseModel.__setattr__(self, "status", status)


class Phase(_CamelModel):
    """Ordered stage of a playbook run. Task order is execution order."""

    id: str
    name: str
    timeline: str = ""
    enabled: bool = True
    tasks: List[Task] = Field(default_factory=list)

    def find_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    @property
    def is_finished(self) -> bool:
        """``True`` when every task reached a terminal status."""
        return all(t.status.is_terminal for t in self.tasks)

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.tasks if t.completed)


def get_phase_progress(phase: Phase) -> float:
    """Return the share of completed tasks in ``phase`` as a percentage.

    An empty phase reports 0. The value is computed from the current task
    statuses on every call.
    """
    if not phase.tasks:
        return 0
    return phase.completed_count * 100 / len(phase.tasks)


def can_transition(current: TaskStatus, requested: TaskStatus) -> bool:
    return current == requested or requested in TASK_TRANSITIONS[current]


def update_task_status(task: Task, status: TaskStatus | str) -> TaskStatus:
    """Move ``task`` to ``status`` and return the previous status.

    Raises:
        InvalidTransitionError: If the state machine does not allow the move,
            e.g. leaving ``completed`` without :func:`reopen_task`.
    """
    requested = TaskStatus(status)
    previous = task.status
    if previous == requested:
        return previous
    if not can_transition(previous, requested):
        logger.warning(
            f"Rejected status change for task {task.id}: {previous.value} -> {requested.value}"
        )
        raise InvalidTransitionError(previous.value, requested.value)
    task._set_status(requested)
    logger.debug(f"Task {task.id}: {previous.value} -> {requested.value}")
    return previous


def reopen_task(task: Task) -> TaskStatus:
    """Explicitly move a completed or skipped task back to ``pending``."""
    previous = task.status
    if not previous.is_terminal:
        raise InvalidTransitionError(previous.value, "reopened")
    task._set_status(TaskStatus.PENDING)
    logger.info(f"Reopened task {task.id} (was {previous.value})")
    return previous


def find_task(phases: List[Phase], task_id: str) -> Task:
    """Locate ``task_id`` across ``phases``."""
    for phase in phases:
        task = phase.find_task(task_id)
        if task is not None:
            return task
    raise TaskNotFoundError(task_id)
