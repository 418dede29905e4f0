"""Playbook templates, the default library and recommendation helpers."""

from __future__ import annotations

from .builtin import BUILTIN_PLAYBOOKS
from .library import PlaybookLibrary
from .loader import extend_library, load_playbook_file, load_playbooks
from .models import (
    PhaseTemplate,
    PlaybookRecommendation,
    PlaybookTemplate,
    TaskTemplate,
)
from .recommend import recommend_playbooks, score_playbook

# Default library, pre-loaded with the built-in templates. Additional
# templates from ``playbooks_path`` are merged in by ``default_library``.
PLAYBOOKS = PlaybookLibrary(BUILTIN_PLAYBOOKS)


def default_library(playbooks_path: str | None = None) -> PlaybookLibrary:
    """Return ``PLAYBOOKS``, extended with templates from ``playbooks_path``."""
    if playbooks_path:
        extend_library(PLAYBOOKS, playbooks_path)
    return PLAYBOOKS


__all__ = [
    "BUILTIN_PLAYBOOKS",
    "PLAYBOOKS",
    "PhaseTemplate",
    "PlaybookLibrary",
    "PlaybookRecommendation",
    "PlaybookTemplate",
    "TaskTemplate",
    "default_library",
    "extend_library",
    "load_playbook_file",
    "load_playbooks",
    "recommend_playbooks",
    "score_playbook",
]
