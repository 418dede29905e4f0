"""Pydantic models describing playbook templates."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..contracts import AttributeUpdate, Phase, SubTask, Task, TriggerType
from ..models import WorkflowCategory


class TaskTemplate(BaseModel):
    """Blueprint for a task; instantiated as ``pending``."""

    id: str
    name: str
    description: str = ""
    end_goal: str = ""
    attributes_to_update: List[AttributeUpdate] = Field(default_factory=list)
    expectations: List[str] = Field(default_factory=list)
    sub_tasks: List[str] = Field(default_factory=list)
    owner: Optional[str] = None
    due_date: Optional[str] = None
    trigger_type: Optional[TriggerType] = None

    def instantiate(self) -> Task:
        return Task(
            id=self.id,
            name=self.name,
            description=self.description,
            end_goal=self.end_goal,
            attributes_to_update=[a.model_copy() for a in self.attributes_to_update],
            expectations=list(self.expectations),
            sub_tasks=[
                SubTask(id=f"{self.id}-{idx}", name=name)
                for idx, name in enumerate(self.sub_tasks, start=1)
            ],
            due_date=self.due_date,
            owner=self.owner,
            trigger_type=self.trigger_type or TriggerType.PLAYBOOK,
        )


class PhaseTemplate(BaseModel):
    id: str
    name: str
    timeline: str = ""
    enabled: bool = True
    tasks: List[TaskTemplate] = Field(default_factory=list)

    def instantiate(self) -> Phase:
        return Phase(
            id=self.id,
            name=self.name,
            timeline=self.timeline,
            enabled=self.enabled,
            tasks=[t.instantiate() for t in self.tasks],
        )


class PlaybookTemplate(BaseModel):
    """Named, reusable plan of phases applied to an account."""

    id: str
    name: str
    category: WorkflowCategory
    description: Optional[str] = None
    avg_duration: str = ""
    segments: List[str] = Field(default_factory=list)
    min_arr: int = 0
    success_rate: Optional[int] = Field(default=None, ge=0, le=100)
    phases: List[PhaseTemplate] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def _ensure_id(cls, v: str) -> str:
        if not v or v.strip() != v:
            raise ValueError("playbook id must be a non-empty slug")
        return v

    @field_validator("phases")
    @classmethod
    def _unique_ids(cls, v: List[PhaseTemplate]) -> List[PhaseTemplate]:
        ids = [p.id for p in v]
        if len(ids) != len(set(ids)):
            raise ValueError("phase ids must be unique within a playbook")
        task_ids = [t.id for p in v for t in p.tasks]
        duplicates = sorted({i for i in task_ids if task_ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"task ids must be unique within a playbook: {duplicates}")
        return v

    def instantiate(self) -> List[Phase]:
        """Return a fresh phase tree with every task pending."""
        return [p.instantiate() for p in self.phases]


class PlaybookRecommendation(BaseModel):
    playbook_id: str
    name: str
    match_score: int = Field(ge=0, le=100)
    reasons: List[str] = Field(default_factory=list)
    phases: int
    avg_duration: str = ""
    is_recommended: bool = False
