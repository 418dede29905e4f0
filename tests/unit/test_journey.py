"""Tests for the lifecycle stage grouping."""

import pytest

from clynto.journey import (
    JOURNEY_STAGES,
    grouped_view,
    stage_category,
    summarize_stages,
    workflows_for_stage,
)
from clynto.models import WorkflowCategory
from clynto.samples import demo_workflows


def _cards():
    return [w.to_active_workflow() for w in demo_workflows()]


def test_stage_order_is_fixed():
    assert [s.id for s in JOURNEY_STAGES] == [
        "onboarding",
        "adoption",
        "renewal",
        "expansion",
    ]


def test_adoption_buckets_at_risk_workflows():
    assert stage_category("adoption") is WorkflowCategory.AT_RISK
    names = [w.account.name for w in workflows_for_stage(_cards(), "adoption")]
    assert names == ["MidMarket Solutions"]


def test_summaries_cover_every_stage():
    summaries = summarize_stages(_cards())
    counts = {s.stage.id: s.count for s in summaries}
    assert counts == {"onboarding": 2, "adoption": 1, "renewal": 1, "expansion": 1}

    renewal = next(s for s in summaries if s.stage.id == "renewal")
    assert renewal.attention_count == 1


def test_empty_stages_kept_in_summary_but_not_grouped_view():
    cards = [c for c in _cards() if c.category is WorkflowCategory.ONBOARDING]
    summaries = summarize_stages(cards)
    assert len(summaries) == 4
    assert summaries[1].count == 0
    assert summaries[1].average_progress == 0
    assert [s.stage.id for s in grouped_view(cards)] == ["onboarding"]


def test_unknown_stage():
    with pytest.raises(ValueError):
        workflows_for_stage([], "churn")
