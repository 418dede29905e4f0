from __future__ import annotations

from typing import Any, Generic, Iterable, List, Optional, TypeVar

from pydantic import BaseModel

from ..constants import ALL_CATEGORIES
from ..exceptions import RecordNotFoundError

R = TypeVar("R", bound=BaseModel)


def matches(value: Any, wanted: Optional[Any]) -> bool:
    """Filter predicate where ``None`` or ``"all"`` matches everything."""
    return wanted is None or wanted == ALL_CATEGORIES or value == wanted


def contains_text(value: str, text: str) -> bool:
    needle = text.strip().lower()
    return not needle or needle in value.lower()


class RowTable(Generic[R]):
    """Read-mostly list of rows with lookup by ``id`` for the detail drawer."""

    def __init__(self, rows: Iterable[R]) -> None:
        self.rows: List[R] = list(rows)

    def get(self, row_id: Any) -> R:
        for row in self.rows:
            if row.id == row_id:
                return row
        raise RecordNotFoundError(str(row_id))

    def distinct(self, field: str) -> List[Any]:
        """Unique values of ``field`` in first-seen order, for filter dropdowns."""
        seen = []
        for row in self.rows:
            value = getattr(row, field)
            if value not in seen:
                seen.append(value)
        return seen

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)
