"""Persistence layer for clynto accounts and workflows."""

from __future__ import annotations

from typing import Optional

from ..config import ClyntoConfig, load_config
from .inmemory import InMemoryWorkflowRepository
from .repository import WorkflowRepository

_repository_instance: WorkflowRepository | None = None


def get_repository(config: Optional[ClyntoConfig] = None) -> WorkflowRepository:
    """Factory function to obtain a workflow repository.

    The backend is selected by ``persistence.backend`` in the loaded
    configuration. Only the in-memory backend ships with clynto; the instance
    is cached so that every caller in a process shares the same state.
    """

    global _repository_instance
    if _repository_instance is not None and config is None:
        return _repository_instance

    config = config or load_config()
    backend = config.persistence.backend
    if backend == "inmemory":
        _repository_instance = InMemoryWorkflowRepository()
    else:
        raise ValueError(f"Unsupported persistence backend: {backend}")
    return _repository_instance


def reset_repository() -> None:
    """Drop the cached repository instance."""
    global _repository_instance
    _repository_instance = None


__all__ = [
    "InMemoryWorkflowRepository",
    "WorkflowRepository",
    "get_repository",
    "reset_repository",
]
