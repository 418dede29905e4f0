from __future__ import annotations

import random

from ..constants import DEFAULT_BACKOFF_BASE, DEFAULT_BACKOFF_JITTER


def compute_backoff(
    attempt: int,
    base: float = DEFAULT_BACKOFF_BASE,
    jitter: float = DEFAULT_BACKOFF_JITTER,
) -> float:
    """Delay in seconds before retry number ``attempt`` (1-based).

    Grows as ``base ** attempt`` plus up to ``jitter`` seconds of noise so
    that sessions retrying the same integration do not line up.
    """
    delay = base ** attempt
    return delay + random.uniform(0, jitter)
