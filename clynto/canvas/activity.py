"""Tickets, meetings and CSM task lists for an account portfolio."""

from __future__ import annotations

import logging
import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .base import RowTable, matches

logger = logging.getLogger(__name__)


def _in_range(
    value: datetime.date,
    start: Optional[datetime.date],
    end: Optional[datetime.date],
) -> bool:
    return (start is None or value >= start) and (end is None or value <= end)


class TicketEmail(BaseModel):
    sender: str
    date: datetime.date
    content: str


class Ticket(BaseModel):
    id: str
    title: str
    account: str
    status: str  # open, unresolved, closed
    priority: str  # high, medium, low
    created: datetime.date
    due_today: bool = False
    emails: List[TicketEmail] = Field(default_factory=list)
    attachments: List[str] = Field(default_factory=list)


class TicketBoard(RowTable[Ticket]):
    def filter(
        self,
        account: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        created_from: Optional[datetime.date] = None,
        created_to: Optional[datetime.date] = None,
    ) -> List[Ticket]:
        return [
            t
            for t in self.rows
            if matches(t.account, account)
            and matches(t.status, status)
            and matches(t.priority, priority)
            and _in_range(t.created, created_from, created_to)
        ]

    def count_by_status(self) -> Dict[str, int]:
        return {s: sum(1 for t in self.rows if t.status == s) for s in self.distinct("status")}

    def due_today(self) -> List[Ticket]:
        return [t for t in self.rows if t.due_today and t.status != "closed"]


class MeetingStatus(str, Enum):
    COMPLETED = "completed"
    UPCOMING = "upcoming"
    CANCELLED = "cancelled"


class Meeting(BaseModel):
    id: int
    title: str
    account: str
    date: datetime.date
    time: str
    status: MeetingStatus
    summary: Optional[str] = None
    action_items: List[str] = Field(default_factory=list)


class MeetingLog(RowTable[Meeting]):
    def filter(
        self,
        account: Optional[str] = None,
        status: Optional[MeetingStatus | str] = None,
        start: Optional[datetime.date] = None,
        end: Optional[datetime.date] = None,
    ) -> List[Meeting]:
        wanted = MeetingStatus(status) if status not in (None, "all") else None
        return [
            m
            for m in self.rows
            if matches(m.account, account)
            and matches(m.status, wanted)
            and _in_range(m.date, start, end)
        ]

    def upcoming(self, account: Optional[str] = None) -> List[Meeting]:
        return self.filter(account=account, status=MeetingStatus.UPCOMING)

    def previous(self, account: Optional[str] = None) -> List[Meeting]:
        return [
            m
            for m in self.filter(account=account)
            if m.status is not MeetingStatus.UPCOMING
        ]


class CsmTaskCategory(str, Enum):
    MEETING = "meeting"
    WORKFLOW = "workflow"
    AI = "ai"
    MANUAL = "manual"
    REMINDER = "reminder"


class CsmTaskStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    SNOOZED = "snoozed"


class CsmTask(BaseModel):
    """Day-to-day to-do item of a customer success manager."""

    id: str
    title: str
    account: str = "Unassigned"
    category: CsmTaskCategory = CsmTaskCategory.MANUAL
    due_time: Optional[str] = None
    status: CsmTaskStatus = CsmTaskStatus.PENDING
    source: str = "Manual"
    description: Optional[str] = None


class CsmTaskList(RowTable[CsmTask]):
    def filter(
        self,
        category: Optional[CsmTaskCategory | str] = None,
        status: Optional[CsmTaskStatus | str] = None,
        account: Optional[str] = None,
    ) -> List[CsmTask]:
        cat = CsmTaskCategory(category) if category not in (None, "all") else None
        st = CsmTaskStatus(status) if status not in (None, "all") else None
        return [
            t
            for t in self.rows
            if matches(t.category, cat)
            and matches(t.status, st)
            and matches(t.account, account)
        ]

    def grouped(self) -> Dict[CsmTaskCategory, List[CsmTask]]:
        """Tasks by category in display order, empty groups dropped."""
        groups = {c: [t for t in self.rows if t.category is c] for c in CsmTaskCategory}
        return {c: items for c, items in groups.items() if items}

    def add(self, title: str, **fields) -> CsmTask:
        if not title.strip():
            raise ValueError("task title is required")
        task = CsmTask(id=str(len(self.rows) + 1), title=title, **fields)
        while any(t.id == task.id for t in self.rows):
            task.id = str(int(task.id) + 1)
        self.rows.append(task)
        return task

    def complete(self, task_id: str) -> CsmTask:
        task = self.get(task_id)
        task.status = CsmTaskStatus.COMPLETED
        logger.debug(f"CSM task {task_id} completed")
        return task

    def snooze(self, task_id: str) -> CsmTask:
        task = self.get(task_id)
        task.status = CsmTaskStatus.SNOOZED
        return task
