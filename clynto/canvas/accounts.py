"""Account list and health views."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .base import RowTable, contains_text, matches

HEALTH_LEVELS = ("Healthy", "At Risk", "Critical")
ACCOUNT_SIZES = ("Small", "Mid", "Large")


class AccountRow(BaseModel):
    id: int
    name: str
    stage: str
    health: str
    arr: int
    renewal_days: int
    size: str
    health_score: Optional[int] = Field(default=None, ge=0, le=100)
    score_change: int = 0
    health_factors: List[str] = Field(default_factory=list)


class AccountTable(RowTable[AccountRow]):
    def search(self, text: str) -> List[AccountRow]:
        """Rows whose name contains ``text``, ignoring case."""
        return [a for a in self.rows if contains_text(a.name, text)]

    def filter(
        self,
        stage: Optional[str] = None,
        health: Optional[str] = None,
        size: Optional[str] = None,
        search: str = "",
    ) -> List[AccountRow]:
        return [
            a
            for a in self.rows
            if matches(a.stage, stage)
            and matches(a.health, health)
            and matches(a.size, size)
            and contains_text(a.name, search)
        ]

    def count_by_stage(self, stages: Optional[List[str]] = None) -> Dict[str, int]:
        keys = stages or self.distinct("stage")
        return {s: sum(1 for a in self.rows if a.stage == s) for s in keys}

    def count_by_health(self) -> Dict[str, int]:
        return {h: sum(1 for a in self.rows if a.health == h) for h in HEALTH_LEVELS}

    def arr_by_size(self) -> Dict[str, int]:
        return {s: sum(a.arr for a in self.rows if a.size == s) for s in ACCOUNT_SIZES}

    def renewals_within(self, days: int) -> List[AccountRow]:
        """Accounts renewing in ``days`` or fewer, soonest first."""
        due = [a for a in self.rows if a.renewal_days <= days]
        return sorted(due, key=lambda a: a.renewal_days)

    def declining(self, threshold: int = 10) -> List[AccountRow]:
        """Accounts whose health score fell by more than ``threshold`` points."""
        return [a for a in self.rows if a.score_change < -threshold]
