"""Load playbook templates from YAML files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import yaml
from pydantic import ValidationError

from .library import PlaybookLibrary
from .models import PlaybookTemplate

logger = logging.getLogger(__name__)

_SUFFIXES = {".yaml", ".yml"}


def load_playbook_file(path: str | Path) -> PlaybookTemplate:
    """Parse a single YAML playbook definition."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    return PlaybookTemplate.model_validate(data)


def load_playbooks(directory: str | Path) -> List[PlaybookTemplate]:
    """Load every ``*.yaml``/``*.yml`` template in ``directory``.

    Raises:
        FileNotFoundError: If ``directory`` does not exist.
        ValueError: If a file is not a valid playbook definition.
    """
    root = Path(directory).expanduser()
    if not root.is_dir():
        raise FileNotFoundError(f"Playbook directory not found: {root}")

    templates = []
    for file in sorted(root.iterdir()):
        if file.suffix not in _SUFFIXES:
            continue
        try:
            templates.append(load_playbook_file(file))
        except (yaml.YAMLError, ValidationError) as exc:
            raise ValueError(f"Invalid playbook file {file.name}: {exc}") from exc
        logger.info(f"Loaded playbook template from {file}")
    return templates


def extend_library(library: PlaybookLibrary, directory: str | Path) -> int:
    """Register templates from ``directory``; file definitions win over built-ins."""
    templates = load_playbooks(directory)
    for template in templates:
        library.register(template, replace=True)
    return len(templates)
