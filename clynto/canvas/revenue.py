"""Projection vs. collection matrix for the revenue forecast."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from ..exceptions import RecordNotFoundError

MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


class Variance(BaseModel):
    amount: int
    reason: str


class RevenueRow(BaseModel):
    name: str
    projections: List[int] = Field(min_length=12, max_length=12)
    collections: List[Optional[int]] = Field(min_length=12, max_length=12)
    variances: List[Optional[Variance]] = Field(
        default_factory=lambda: [None] * 12, min_length=12, max_length=12
    )

    @model_validator(mode="after")
    def _collections_are_contiguous(self) -> "RevenueRow":
        # future months are None; nothing may be collected after a gap
        seen_gap = False
        for value in self.collections:
            if value is None:
                seen_gap = True
            elif seen_gap:
                raise ValueError(f"{self.name}: collection recorded after an open month")
        return self


class RevenueCell(BaseModel):
    account: str
    month: str
    projected: int
    collected: Optional[int]
    variance: Optional[Variance] = None


class RevenueMatrix:
    def __init__(self, rows: List[RevenueRow]) -> None:
        self.rows = rows

    def _row(self, name: str) -> RevenueRow:
        for row in self.rows:
            if row.name == name:
                return row
        raise RecordNotFoundError(name)

    def cells(self, name: str) -> List[RevenueCell]:
        row = self._row(name)
        return [
            RevenueCell(
                account=row.name,
                month=MONTHS[i],
                projected=row.projections[i],
                collected=row.collections[i],
                variance=row.variances[i],
            )
            for i in range(12)
        ]

    def variance_at(self, name: str, month: int) -> Optional[Variance]:
        """Variance annotation for ``month`` (0-based) or ``None``."""
        if not 0 <= month < 12:
            raise ValueError(f"month must be in 0..11, got {month}")
        return self._row(name).variances[month]

    def annotated_cells(self) -> List[RevenueCell]:
        return [c for row in self.rows for c in self.cells(row.name) if c.variance]

    @property
    def total_projected(self) -> int:
        return sum(sum(row.projections) for row in self.rows)

    @property
    def total_collected(self) -> int:
        return sum(v for row in self.rows for v in row.collections if v is not None)

    @property
    def net_variance(self) -> int:
        return sum(v.amount for row in self.rows for v in row.variances if v)
