"""Tests for playbook templates, the library and YAML loading."""

import pytest

from clynto.contracts import TaskStatus
from clynto.exceptions import PlaybookNotFoundError
from clynto.models import AccountSource, AwaitingAccount, WorkflowCategory
from clynto.playbooks import (
    BUILTIN_PLAYBOOKS,
    PLAYBOOKS,
    PlaybookLibrary,
    PlaybookTemplate,
    extend_library,
    load_playbooks,
    recommend_playbooks,
)

PLAYBOOK_YAML = """
id: champion-reengagement
name: Champion Re-engagement
category: at_risk
avg_duration: 14 days
segments: [SMB]
phases:
  - id: reach-out
    name: Reach Out
    timeline: Days 1-7
    tasks:
      - id: ro-1
        name: Identify new champion
        sub_tasks: [Review org chart, Ask executive sponsor]
"""


def test_builtin_library_contents():
    assert len(PLAYBOOKS) == len(BUILTIN_PLAYBOOKS)
    assert PLAYBOOKS.get("enterprise-onboarding").name == "Enterprise Onboarding"
    assert [t.id for t in PLAYBOOKS.by_category("at_risk")] == ["health-recovery"]


def test_unknown_playbook_raises():
    with pytest.raises(PlaybookNotFoundError):
        PLAYBOOKS.get("does-not-exist")


def test_instantiate_produces_fresh_pending_tree():
    template = PLAYBOOKS.get("enterprise-onboarding")
    first = template.instantiate()
    second = template.instantiate()

    assert [p.id for p in first] == [p.id for p in template.phases]
    assert all(t.status is TaskStatus.PENDING for p in first for t in p.tasks)
    assert first[0].tasks[0].sub_tasks[0].id == "kick-1-1"
    assert first[0].tasks[0] is not second[0].tasks[0]


def test_duplicate_registration_rejected():
    library = PlaybookLibrary(BUILTIN_PLAYBOOKS[:1])
    with pytest.raises(ValueError):
        library.register(BUILTIN_PLAYBOOKS[0])
    library.register(BUILTIN_PLAYBOOKS[0], replace=True)
    assert len(library) == 1


def test_duplicate_phase_ids_rejected():
    with pytest.raises(ValueError):
        PlaybookTemplate(
            id="dup",
            name="Dup",
            category="renewal",
            phases=[{"id": "a", "name": "A"}, {"id": "a", "name": "B"}],
        )


def test_duplicate_task_ids_rejected():
    with pytest.raises(ValueError, match="task ids must be unique"):
        PlaybookTemplate(
            id="dup-tasks",
            name="Dup Tasks",
            category="onboarding",
            phases=[
                {"id": "a", "name": "A", "tasks": [{"id": "t1", "name": "One"}]},
                {"id": "b", "name": "B", "tasks": [{"id": "t1", "name": "Again"}]},
            ],
        )


def test_load_playbooks_from_yaml(tmp_path):
    (tmp_path / "reengage.yaml").write_text(PLAYBOOK_YAML)
    (tmp_path / "notes.txt").write_text("ignored")

    templates = load_playbooks(tmp_path)
    assert len(templates) == 1
    template = templates[0]
    assert template.category is WorkflowCategory.AT_RISK
    assert template.phases[0].tasks[0].sub_tasks == [
        "Review org chart",
        "Ask executive sponsor",
    ]

    library = PlaybookLibrary(BUILTIN_PLAYBOOKS)
    assert extend_library(library, tmp_path) == 1
    assert "champion-reengagement" in library


def test_invalid_yaml_playbook(tmp_path):
    (tmp_path / "broken.yml").write_text("id: broken\nname: Broken\n")
    with pytest.raises(ValueError):
        load_playbooks(tmp_path)


def test_missing_playbook_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_playbooks(tmp_path / "missing")


def test_recommendations_rank_enterprise_onboarding_first():
    account = AwaitingAccount(
        id="aw-1",
        name="Quantum Dynamics",
        segment="Enterprise",
        arr=320_000,
        source=AccountSource.CRM,
        suggested_stage="onboarding",
    )
    recs = recommend_playbooks(account, PLAYBOOKS)
    assert len(recs) == 3
    assert recs[0].playbook_id == "enterprise-onboarding"
    assert recs[0].is_recommended
    assert not any(r.is_recommended for r in recs[1:])
    assert recs[0].match_score >= recs[1].match_score >= recs[2].match_score
    assert "Enterprise segment match" in recs[0].reasons


def test_adoption_stage_prefers_at_risk_playbook():
    account = AwaitingAccount(
        id="aw-2",
        name="TechFlow Industries",
        segment="Enterprise",
        arr=450_000,
        source=AccountSource.CRM,
        suggested_stage="adoption",
    )
    recs = recommend_playbooks(account, PLAYBOOKS, limit=1)
    assert recs[0].playbook_id == "health-recovery"
