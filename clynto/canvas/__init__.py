"""Read-mostly account canvas views: accounts, health, revenue and activity."""

from .accounts import AccountRow, AccountTable
from .activity import (
    CsmTask,
    CsmTaskCategory,
    CsmTaskList,
    CsmTaskStatus,
    Meeting,
    MeetingLog,
    MeetingStatus,
    Ticket,
    TicketBoard,
    TicketEmail,
)
from .revenue import MONTHS, RevenueCell, RevenueMatrix, RevenueRow, Variance

__all__ = [
    "AccountRow",
    "AccountTable",
    "CsmTask",
    "CsmTaskCategory",
    "CsmTaskList",
    "CsmTaskStatus",
    "MONTHS",
    "Meeting",
    "MeetingLog",
    "MeetingStatus",
    "RevenueCell",
    "RevenueMatrix",
    "RevenueRow",
    "Ticket",
    "TicketBoard",
    "TicketEmail",
    "Variance",
]
