"""Playbook templates shipped with clynto."""

from __future__ import annotations

from typing import List

from ..contracts import AttributeUpdate
from ..models import WorkflowCategory
from .models import PhaseTemplate, PlaybookTemplate, TaskTemplate


def _attrs(*pairs: tuple[str, str, bool]) -> List[AttributeUpdate]:
    return [AttributeUpdate(name=n, value=v, auto_updated=a) for n, v, a in pairs]


ENTERPRISE_ONBOARDING = PlaybookTemplate(
    id="enterprise-onboarding",
    name="Enterprise Onboarding",
    category=WorkflowCategory.ONBOARDING,
    description="Structured onboarding for large, multi-stakeholder accounts.",
    avg_duration="45 days",
    segments=["Enterprise"],
    min_arr=100_000,
    success_rate=92,
    phases=[
        PhaseTemplate(
            id="kickoff",
            name="Kickoff & Alignment",
            timeline="Days 1-3",
            tasks=[
                TaskTemplate(
                    id="kick-1",
                    name="Schedule Kickoff Meeting",
                    description=(
                        "Coordinate with key stakeholders to schedule the initial "
                        "kickoff meeting. Ensure all decision-makers are included."
                    ),
                    end_goal=(
                        "Meeting scheduled with all key stakeholders, calendar "
                        "invites sent, agenda prepared."
                    ),
                    attributes_to_update=_attrs(
                        ("Kickoff Date", "Pending", True),
                        ("Primary POC", "Pending", True),
                        ("Meeting Notes", "Pending capture", False),
                    ),
                    expectations=[
                        "Calendar invite will be automatically synced",
                        "Meeting notes will be auto-extracted post-meeting",
                        "Action items will create follow-up tasks automatically",
                    ],
                    sub_tasks=[
                        "Send calendar invite to stakeholders",
                        "Prepare meeting agenda",
                        "Confirm attendee availability",
                    ],
                    owner="CSM",
                    due_date="Day 1",
                ),
                TaskTemplate(
                    id="kick-2",
                    name="Document POC Details",
                    description=(
                        "Capture and verify primary point of contact information "
                        "for ongoing communication."
                    ),
                    end_goal="POC details verified and stored in account record.",
                    attributes_to_update=_attrs(
                        ("POC Name", "Pending", True),
                        ("POC Email", "Pending", True),
                        ("POC Designation", "Pending", False),
                        ("Communication Channel", "Slack", False),
                    ),
                    expectations=[
                        "Contact details auto-populate from meeting invites",
                        "Email verification runs automatically",
                    ],
                    owner="CSM",
                    due_date="Day 2",
                ),
            ],
        ),
        PhaseTemplate(
            id="setup",
            name="Setup & Configuration",
            timeline="Days 4-10",
            tasks=[
                TaskTemplate(
                    id="setup-1",
                    name="Technical Environment Setup",
                    description=(
                        "Configure the technical environment according to "
                        "customer specifications and requirements."
                    ),
                    end_goal="Environment fully configured and validated for customer use.",
                    attributes_to_update=_attrs(
                        ("Environment Status", "Pending", False),
                        ("Configuration Completion", "0%", True),
                    ),
                    expectations=[
                        "Configuration progress tracked automatically",
                        "Health checks run on completion",
                    ],
                    sub_tasks=[
                        "Provision customer workspace",
                        "Configure SSO settings",
                        "Set up user roles and permissions",
                    ],
                    owner="Technical Team",
                ),
            ],
        ),
        PhaseTemplate(
            id="integrations",
            name="Integrations & Data Migration",
            timeline="Days 11-20",
            tasks=[
                TaskTemplate(
                    id="int-1",
                    name="Connect Core Integrations",
                    description="Establish connections with customer's existing systems and tools.",
                    end_goal="All required integrations active and data flowing.",
                    attributes_to_update=_attrs(
                        ("Integration Status", "Not Started", True),
                        ("Connected Systems", "0/4", True),
                    ),
                    expectations=[
                        "Integration health monitored continuously",
                        "Data sync validation runs automatically",
                    ],
                    owner="Integration Team",
                    trigger_type="system",
                ),
                TaskTemplate(
                    id="int-2",
                    name="Historical Data Migration",
                    description="Migrate historical data from legacy systems with validation.",
                    end_goal="All historical data migrated and verified.",
                    attributes_to_update=_attrs(
                        ("Migration Status", "Scheduled", True),
                        ("Records Migrated", "0", True),
                    ),
                    expectations=[
                        "Migration progress tracked in real-time",
                        "Data integrity checks run automatically",
                    ],
                    owner="Data Team",
                ),
            ],
        ),
        PhaseTemplate(
            id="training",
            name="Training & Enablement",
            timeline="Days 21-28",
            tasks=[
                TaskTemplate(
                    id="train-1",
                    name="End User Training Sessions",
                    description="Conduct comprehensive training sessions for all end users.",
                    end_goal="All designated users trained and certified.",
                    attributes_to_update=_attrs(
                        ("Training Completion", "0%", True),
                        ("Users Certified", "0", True),
                    ),
                    expectations=[
                        "Attendance tracked automatically",
                        "Quiz scores recorded per user",
                        "Certification status updated on completion",
                    ],
                    owner="Training Team",
                ),
            ],
        ),
        PhaseTemplate(
            id="uat",
            name="Testing, UAT & Optimization",
            timeline="Days 29-35",
            tasks=[
                TaskTemplate(
                    id="uat-1",
                    name="User Acceptance Testing",
                    description=(
                        "Coordinate UAT process with customer team to validate "
                        "all requirements."
                    ),
                    end_goal="Customer sign-off on UAT, all critical issues resolved.",
                    attributes_to_update=_attrs(
                        ("UAT Status", "Not Started", False),
                        ("Issues Identified", "0", True),
                        ("Issues Resolved", "0", True),
                    ),
                    expectations=[
                        "Issue tracking integrated automatically",
                        "Resolution status monitored in real-time",
                    ],
                    owner="QA Team",
                ),
            ],
        ),
        PhaseTemplate(
            id="golive",
            name="Go-Live & Transition",
            timeline="Day 36+",
            tasks=[
                TaskTemplate(
                    id="go-1",
                    name="Production Go-Live",
                    description="Transition customer to production environment with full monitoring.",
                    end_goal="Customer fully operational in production.",
                    attributes_to_update=_attrs(
                        ("Go-Live Date", "Scheduled", False),
                        ("Production Status", "Pending", True),
                    ),
                    expectations=[
                        "Health monitoring begins automatically",
                        "Support escalation paths activated",
                    ],
                    owner="CSM",
                ),
            ],
        ),
    ],
)


def _simple_playbook(
    id: str,
    name: str,
    category: WorkflowCategory,
    avg_duration: str,
    phases: List[tuple[str, str, List[str]]],
    **extra,
) -> PlaybookTemplate:
    """Build a template whose tasks only carry a name."""
    phase_templates = []
    for p_idx, (phase_name, timeline, task_names) in enumerate(phases, start=1):
        phase_id = f"p{p_idx}"
        phase_templates.append(
            PhaseTemplate(
                id=phase_id,
                name=phase_name,
                timeline=timeline,
                tasks=[
                    TaskTemplate(id=f"{phase_id}-t{t_idx}", name=task_name)
                    for t_idx, task_name in enumerate(task_names, start=1)
                ],
            )
        )
    return PlaybookTemplate(
        id=id,
        name=name,
        category=category,
        avg_duration=avg_duration,
        phases=phase_templates,
        **extra,
    )


STANDARD_ONBOARDING = _simple_playbook(
    "standard-onboarding",
    "Standard Onboarding",
    WorkflowCategory.ONBOARDING,
    "30 days",
    [
        ("Kickoff & Discovery", "3-5 days", ["Kickoff call", "Capture success criteria"]),
        ("Technical Setup", "5-7 days", ["Provision workspace", "Configure SSO"]),
        ("Configuration", "5-10 days", ["Import data", "Configure dashboards"]),
        ("Training & Enablement", "3-5 days", ["Admin training", "End user training"]),
        ("Go-Live & Handoff", "2-3 days", ["Go-live check", "Handoff to CSM"]),
    ],
    description="General purpose onboarding with faster time-to-value.",
    segments=["Mid-Market", "SMB"],
    success_rate=85,
)

TECH_FAST_TRACK = _simple_playbook(
    "tech-fast-track",
    "Tech Fast-Track",
    WorkflowCategory.ONBOARDING,
    "21 days",
    [
        ("Kickoff", "Days 1-2", ["Kickoff call"]),
        ("Technical Setup", "Days 3-9", ["API access", "Integration setup"]),
        ("Enablement", "Days 10-16", ["Developer workshop"]),
        ("Go-Live", "Days 17-21", ["Production go-live"]),
    ],
    description="Accelerated implementation for technical teams.",
    segments=["SMB", "Mid-Market"],
    success_rate=78,
)

RENEWAL_PREPARATION = _simple_playbook(
    "renewal-preparation",
    "Renewal Preparation",
    WorkflowCategory.RENEWAL,
    "60 days",
    [
        ("Value Review", "Days 1-14", ["Compile usage report", "Prepare ROI summary"]),
        ("Stakeholder Alignment", "Days 15-30", ["Executive sponsor meeting", "Confirm decision makers"]),
        ("Commercials", "Days 31-50", ["Send renewal proposal", "Negotiate terms"]),
        ("Close", "Days 51-60", ["Contract signature"]),
    ],
    description="Secure renewal ahead of contract end.",
    segments=["Enterprise", "Mid-Market", "SMB"],
    success_rate=88,
)

HEALTH_RECOVERY = _simple_playbook(
    "health-recovery",
    "Health Recovery",
    WorkflowCategory.AT_RISK,
    "42 days",
    [
        ("Diagnosis", "Days 1-7", ["Review usage decline", "Review open tickets"]),
        ("Engagement", "Days 8-21", ["Re-engage champion", "Run health check call"]),
        ("Recovery Plan", "Days 22-42", ["Agree recovery plan", "Track adoption weekly"]),
    ],
    description="Structured intervention for declining accounts.",
    segments=["Enterprise", "Mid-Market", "SMB"],
    success_rate=71,
)

EXPANSION_OPPORTUNITY = _simple_playbook(
    "expansion-opportunity",
    "Expansion Opportunity",
    WorkflowCategory.EXPANSION,
    "56 days",
    [
        ("Discovery", "Weeks 1-2", ["Schedule business review", "Prepare usage analysis"]),
        ("Proposal", "Weeks 3-5", ["Draft expansion proposal", "Align with account executive"]),
        ("Close", "Weeks 6-8", ["Present proposal", "Close expansion"]),
    ],
    description="Proactive engagement for high-usage accounts.",
    segments=["Enterprise", "Mid-Market"],
    min_arr=50_000,
    success_rate=64,
)

BUILTIN_PLAYBOOKS: List[PlaybookTemplate] = [
    ENTERPRISE_ONBOARDING,
    STANDARD_ONBOARDING,
    TECH_FAST_TRACK,
    RENEWAL_PREPARATION,
    HEALTH_RECOVERY,
    EXPANSION_OPPORTUNITY,
]
