"""In-memory store of playbook templates."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from ..exceptions import PlaybookNotFoundError
from ..models import WorkflowCategory
from .models import PlaybookTemplate

logger = logging.getLogger(__name__)


class PlaybookLibrary:
    """Keeps playbook templates keyed by id, in registration order."""

    def __init__(self, templates: Optional[Iterable[PlaybookTemplate]] = None) -> None:
        self._templates: Dict[str, PlaybookTemplate] = {}
        for template in templates or []:
            self.register(template)

    def register(self, template: PlaybookTemplate, replace: bool = False) -> None:
        if template.id in self._templates and not replace:
            raise ValueError(f"Playbook '{template.id}' is already registered")
        self._templates[template.id] = template
        logger.debug(f"Registered playbook {template.id}")

    def get(self, playbook_id: str) -> PlaybookTemplate:
        try:
            return self._templates[playbook_id]
        except KeyError:
            raise PlaybookNotFoundError(playbook_id) from None

    def list(self) -> List[PlaybookTemplate]:
        return list(self._templates.values())

    def by_category(self, category: WorkflowCategory | str) -> List[PlaybookTemplate]:
        wanted = WorkflowCategory(category)
        return [t for t in self._templates.values() if t.category is wanted]

    def __contains__(self, playbook_id: object) -> bool:
        return playbook_id in self._templates

    def __len__(self) -> int:
        return len(self._templates)
