"""Error types raised by clynto."""

from __future__ import annotations


class ClyntoError(Exception):
    """Base class for all clynto errors."""


class WizardValidationError(ClyntoError, ValueError):
    """User-correctable input problem surfaced by the onboarding wizard."""


class InvalidTransitionError(ClyntoError, ValueError):
    """Raised when a task or workflow status change is not allowed."""

    def __init__(self, current: str, requested: str, subject: str = "task") -> None:
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot move {subject} from '{current}' to '{requested}'"
        )


class NotFoundError(ClyntoError, LookupError):
    """Base class for failed lookups by identifier."""

    kind = "item"

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"{self.kind} '{identifier}' not found")


class AccountNotFoundError(NotFoundError):
    kind = "Account"


class PlaybookNotFoundError(NotFoundError):
    kind = "Playbook"


class WorkflowNotFoundError(NotFoundError):
    kind = "Workflow"


class PhaseNotFoundError(NotFoundError):
    kind = "Phase"


class TaskNotFoundError(NotFoundError):
    kind = "Task"


class TransientError(ClyntoError):
    """Temporary failure of an external call; safe to retry."""


class FatalError(ClyntoError):
    """Unrecoverable failure; the caller should stop and report."""


class RecordNotFoundError(NotFoundError):
    kind = "Record"
