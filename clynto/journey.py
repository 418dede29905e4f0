"""Customer journey view: workflows grouped by lifecycle stage."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from pydantic import BaseModel

from .models import ActiveWorkflow, WorkflowCategory, WorkflowStatus


class JourneyStage(BaseModel):
    id: str
    label: str
    description: str
    category: WorkflowCategory


# "Adoption" buckets the at_risk category; there is no separate At Risk stage.
JOURNEY_STAGES: Tuple[JourneyStage, ...] = (
    JourneyStage(
        id="onboarding",
        label="Onboarding",
        description="New customers getting started",
        category=WorkflowCategory.ONBOARDING,
    ),
    JourneyStage(
        id="adoption",
        label="Adoption",
        description="Driving product usage & value",
        category=WorkflowCategory.AT_RISK,
    ),
    JourneyStage(
        id="renewal",
        label="Renewal",
        description="Contract renewal cycle",
        category=WorkflowCategory.RENEWAL,
    ),
    JourneyStage(
        id="expansion",
        label="Expansion",
        description="Growth opportunities",
        category=WorkflowCategory.EXPANSION,
    ),
)


class StageSummary(BaseModel):
    stage: JourneyStage
    workflows: List[ActiveWorkflow]
    attention_count: int
    average_progress: float

    @property
    def count(self) -> int:
        return len(self.workflows)


def get_stage(stage_id: str) -> JourneyStage:
    for stage in JOURNEY_STAGES:
        if stage.id == stage_id:
            return stage
    raise ValueError(f"Unknown journey stage: {stage_id}")


def stage_category(stage_id: str) -> WorkflowCategory:
    """Workflow category bucketed under ``stage_id``."""
    return get_stage(stage_id).category


def workflows_for_stage(
    workflows: Iterable[ActiveWorkflow], stage_id: str
) -> List[ActiveWorkflow]:
    category = stage_category(stage_id)
    return [w for w in workflows if w.category is category]


def _summarize(stage: JourneyStage, workflows: List[ActiveWorkflow]) -> StageSummary:
    bucket = [w for w in workflows if w.category is stage.category]
    average = (
        sum(w.progress.percentage for w in bucket) / len(bucket) if bucket else 0
    )
    return StageSummary(
        stage=stage,
        workflows=bucket,
        attention_count=sum(1 for w in bucket if w.status is WorkflowStatus.ATTENTION),
        average_progress=average,
    )


def summarize_stages(workflows: Iterable[ActiveWorkflow]) -> List[StageSummary]:
    """One summary per fixed stage, in journey order, including empty ones."""
    items = list(workflows)
    return [_summarize(stage, items) for stage in JOURNEY_STAGES]


def grouped_view(workflows: Iterable[ActiveWorkflow]) -> List[StageSummary]:
    """Stage summaries with empty stages left out."""
    return [s for s in summarize_stages(workflows) if s.count]
