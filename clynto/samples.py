"""Demo data for the dashboard and the CLI.

``seed_repository`` fills a repository with awaiting accounts and a handful
of running workflows built from the built-in playbooks.
"""

from __future__ import annotations

import datetime
import logging
from typing import List

from .contracts import TaskStatus
from .models import (
    AccountSource,
    AccountSummary,
    AwaitingAccount,
    PlaybookRef,
    WorkflowInstance,
    WorkflowStatus,
)
from .persistence import WorkflowRepository
from .playbooks import PLAYBOOKS, PlaybookLibrary
from .canvas import (
    AccountRow,
    AccountTable,
    CsmTask,
    CsmTaskList,
    Meeting,
    MeetingLog,
    RevenueMatrix,
    RevenueRow,
    Ticket,
    TicketBoard,
    TicketEmail,
    Variance,
)

logger = logging.getLogger(__name__)


def awaiting_accounts() -> List[AwaitingAccount]:
    return [
        AwaitingAccount(
            id="aw-1",
            name="Quantum Dynamics",
            segment="Enterprise",
            arr=320_000,
            source=AccountSource.CRM,
            days_since_creation=2,
            suggested_stage="onboarding",
        ),
        AwaitingAccount(
            id="aw-2",
            name="TechFlow Industries",
            segment="Enterprise",
            arr=450_000,
            source=AccountSource.CRM,
            days_since_creation=3,
            suggested_stage="adoption",
            health_score=45,
        ),
        AwaitingAccount(
            id="aw-3",
            name="DataStream Corp",
            segment="Mid-Market",
            arr=120_000,
            source=AccountSource.BULK_UPLOAD,
            days_since_creation=5,
            suggested_stage="adoption",
            health_score=62,
        ),
        AwaitingAccount(
            id="aw-4",
            name="CloudFirst Solutions",
            segment="Enterprise",
            arr=280_000,
            source=AccountSource.CRM,
            days_since_creation=1,
            suggested_stage="renewal",
            health_score=78,
        ),
        AwaitingAccount(
            id="aw-5",
            name="ScaleUp Inc",
            segment="Mid-Market",
            arr=95_000,
            source=AccountSource.MANUAL,
            days_since_creation=2,
            suggested_stage="onboarding",
        ),
    ]


def _demo_workflow(
    workflow_id: str,
    account: AccountSummary,
    playbook_id: str,
    done: int,
    library: PlaybookLibrary,
    status: WorkflowStatus = WorkflowStatus.RUNNING,
    last_activity: str = "2 hours ago",
) -> WorkflowInstance:
    """Instantiate ``playbook_id`` with its first ``done`` tasks completed."""
    template = library.get(playbook_id)
    instance = WorkflowInstance(
        id=workflow_id,
        account=account,
        playbook=PlaybookRef(id=template.id, name=template.name),
        category=template.category,
        phases=template.instantiate(),
    )
    tasks = [t for p in instance.phases for t in p.tasks]
    for task in tasks[:done]:
        instance.set_task_status(task.id, TaskStatus.COMPLETED)
    if done < len(tasks):
        instance.set_task_status(tasks[done].id, TaskStatus.IN_PROGRESS)
    if status is WorkflowStatus.PAUSED:
        instance.pause()
    elif status is WorkflowStatus.ATTENTION:
        instance.flag_attention()
    instance.playbook.last_activity = last_activity
    return instance


def demo_workflows(library: PlaybookLibrary = PLAYBOOKS) -> List[WorkflowInstance]:
    return [
        _demo_workflow(
            "wf-acme",
            AccountSummary(name="Acme Corporation", segment="Enterprise", arr=125_000, health_score=85),
            "enterprise-onboarding",
            5,
            library,
        ),
        _demo_workflow(
            "wf-globaltech",
            AccountSummary(name="GlobalTech Inc", segment="Enterprise", arr=340_000, health_score=58),
            "renewal-preparation",
            3,
            library,
            status=WorkflowStatus.ATTENTION,
            last_activity="1 day ago",
        ),
        _demo_workflow(
            "wf-startuphub",
            AccountSummary(name="StartupHub", segment="SMB", arr=36_000, health_score=74),
            "tech-fast-track",
            4,
            library,
            last_activity="30 mins ago",
        ),
        _demo_workflow(
            "wf-midmarket",
            AccountSummary(name="MidMarket Solutions", segment="Mid-Market", arr=88_000, health_score=41),
            "health-recovery",
            2,
            library,
            status=WorkflowStatus.PAUSED,
            last_activity="3 days ago",
        ),
        _demo_workflow(
            "wf-enterpriseplus",
            AccountSummary(name="Enterprise Plus", segment="Enterprise", arr=510_000, health_score=92),
            "expansion-opportunity",
            1,
            library,
            last_activity="4 hours ago",
        ),
    ]


async def seed_repository(
    repository: WorkflowRepository, library: PlaybookLibrary = PLAYBOOKS
) -> None:
    """Load the demo accounts and workflows into ``repository``."""
    for account in awaiting_accounts():
        await repository.add_awaiting_account(account)
    for instance in demo_workflows(library):
        await repository.create_workflow(instance)
    logger.debug("Seeded repository with demo data")


# ----------------------------------------------------------------------
# Account canvas datasets


def account_table() -> AccountTable:
    rows = [
        (1, "Acme Corporation", "Adoption", "Healthy", 125_000, 45, "Large", 85, 5),
        (2, "TechStart Inc", "Onboarding", "At Risk", 45_000, 120, "Mid", 45, -12),
        (3, "Global Systems Ltd", "Renewal", "Critical", 89_000, 15, "Large", 28, -8),
        (4, "Innovate Labs", "Adoption", "Healthy", 32_000, 90, "Small", 78, 2),
        (5, "Enterprise Solutions", "Adoption", "Healthy", 210_000, 180, "Large", 92, 1),
        (6, "DataDrive Co", "Onboarding", "Healthy", 28_000, 340, "Small", 72, 0),
        (7, "CloudNine Systems", "Renewal", "At Risk", 67_000, 30, "Mid", 52, -6),
        (8, "Nexus Technologies", "Adoption", "At Risk", 156_000, 75, "Large", 58, -3),
    ]
    return AccountTable(
        AccountRow(
            id=id_,
            name=name,
            stage=stage,
            health=health,
            arr=arr,
            renewal_days=renewal,
            size=size,
            health_score=score,
            score_change=change,
        )
        for id_, name, stage, health, arr, renewal, size, score, change in rows
    )


def _flat(amount: int, collected_months: int = 11) -> tuple:
    return [amount] * 12, [amount] * collected_months + [None] * (12 - collected_months)


def revenue_matrix() -> RevenueMatrix:
    rows = []
    for name, monthly, overrides in [
        ("Acme Corporation", 10_400, {}),
        ("TechStart Inc", 3_750, {5: (0, "Payment delay due to budget freeze")}),
        ("Global Systems Ltd", 7_400, {10: (5_000, "Downgrade due to reduced usage")}),
        ("Innovate Labs", 2_660, {}),
        ("Enterprise Solutions", 17_500, {8: (19_000, "Expansion - added 5 seats")}),
        ("Nexus Technologies", 13_000, {9: (10_000, "Churned 2 business units")}),
    ]:
        projections, collections = _flat(monthly)
        variances = [None] * 12
        for month, (collected, reason) in overrides.items():
            collections[month] = collected
            variances[month] = Variance(amount=collected - monthly, reason=reason)
        rows.append(
            RevenueRow(
                name=name,
                projections=projections,
                collections=collections,
                variances=variances,
            )
        )
    return RevenueMatrix(rows)


def ticket_board() -> TicketBoard:
    d = datetime.date
    return TicketBoard(
        [
            Ticket(
                id="TKT-001",
                title="Integration sync failing intermittently",
                account="TechStart Inc",
                status="open",
                priority="high",
                created=d(2024, 12, 20),
                due_today=True,
                emails=[
                    TicketEmail(
                        sender="john@techstart.com",
                        date=d(2024, 12, 20),
                        content="We are experiencing intermittent sync failures with the CRM integration.",
                    )
                ],
                attachments=["error_log.txt", "screenshot.png"],
            ),
            Ticket(
                id="TKT-002",
                title="Request for custom report template",
                account="Acme Corporation",
                status="open",
                priority="medium",
                created=d(2024, 12, 18),
                attachments=["report_requirements.pdf"],
            ),
            Ticket(
                id="TKT-003",
                title="User permissions not applying correctly",
                account="Global Systems Ltd",
                status="unresolved",
                priority="high",
                created=d(2024, 12, 15),
                due_today=True,
            ),
            Ticket(
                id="TKT-006",
                title="API rate limiting question",
                account="DataDrive Co",
                status="closed",
                priority="low",
                created=d(2024, 12, 5),
                due_today=True,
            ),
        ]
    )


def meeting_log() -> MeetingLog:
    d = datetime.date
    return MeetingLog(
        [
            Meeting(id=1, title="Quarterly Business Review", account="Acme Corporation",
                    date=d(2024, 12, 16), time="10:00 AM", status="completed",
                    summary="Reviewed Q4 adoption and renewal timeline.",
                    action_items=["Share usage report", "Book renewal call"]),
            Meeting(id=3, title="Escalation Call", account="TechStart Inc",
                    date=d(2024, 12, 19), time="2:00 PM", status="completed",
                    summary="Addressed critical integration issues.",
                    action_items=["Deploy hotfix by Friday"]),
            Meeting(id=4, title="Renewal Discussion", account="Global Systems Ltd",
                    date=d(2024, 12, 28), time="3:00 PM", status="upcoming"),
            Meeting(id=5, title="Feature Demo", account="Enterprise Solutions",
                    date=d(2024, 12, 30), time="10:30 AM", status="upcoming"),
            Meeting(id=6, title="Monthly Check-in", account="Innovate Labs",
                    date=d(2024, 12, 10), time="4:00 PM", status="cancelled"),
        ]
    )


def csm_tasks() -> CsmTaskList:
    return CsmTaskList(
        [
            CsmTask(id="1", title="Quarterly Business Review", account="Acme Corp", category="meeting",
                    due_time="10:00 AM", source="Calendar"),
            CsmTask(id="2", title="Send onboarding materials", account="TechStart Inc", category="workflow",
                    due_time="11:30 AM", source="Orchestrator AI"),
            CsmTask(id="3", title="Review usage decline", account="GlobalTech", category="ai",
                    due_time="2:00 PM", source="Larry AI"),
            CsmTask(id="4", title="Follow up on feature request", account="Innovate Labs", category="manual"),
            CsmTask(id="5", title="Renewal reminder - 30 days", account="DataFlow Systems", category="reminder",
                    source="System"),
            CsmTask(id="6", title="Product demo call", account="Enterprise Solutions", category="meeting",
                    due_time="4:00 PM", status="completed", source="Calendar"),
        ]
    )
