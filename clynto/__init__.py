"""clynto: customer success workflow orchestration."""

from .contracts import (
    Phase,
    SubTask,
    Task,
    TaskStatus,
    get_phase_progress,
    reopen_task,
    update_task_status,
)
from .journey import JOURNEY_STAGES, summarize_stages, workflows_for_stage
from .models import ActiveWorkflow, AwaitingAccount, WorkflowInstance
from .orchestrator import Orchestrator, filter_workflows
from .persistence import get_repository
from .playbooks import PLAYBOOKS
from .visualization import WorkflowBoard

__version__ = "0.1.0"
__all__ = [
    "ActiveWorkflow",
    "AwaitingAccount",
    "JOURNEY_STAGES",
    "Orchestrator",
    "PLAYBOOKS",
    "Phase",
    "SubTask",
    "Task",
    "TaskStatus",
    "WorkflowBoard",
    "WorkflowInstance",
    "filter_workflows",
    "get_phase_progress",
    "get_repository",
    "reopen_task",
    "summarize_stages",
    "update_task_status",
    "workflows_for_stage",
]
