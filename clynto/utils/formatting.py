"""Display helpers shared by the CLI and the canvas views."""

from __future__ import annotations

_SUFFIXES = ((1_000_000_000, "B"), (1_000_000, "M"), (1_000, "K"))


def format_currency(value: float, compact: bool = True) -> str:
    """Format a USD amount, e.g. ``125000 -> "$125K"``.

    Compact notation keeps at most one decimal and drops a trailing ``.0``.
    """
    sign = "-" if value < 0 else ""
    amount = abs(value)
    if not compact:
        return f"{sign}${amount:,.0f}"
    for threshold, suffix in _SUFFIXES:
        if amount >= threshold:
            scaled = f"{amount / threshold:.1f}".rstrip("0").rstrip(".")
            return f"{sign}${scaled}{suffix}"
    return f"{sign}${amount:,.0f}"


def format_percentage(value: float) -> str:
    return f"{round(value)}%"
