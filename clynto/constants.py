"""Shared constants for clynto."""

WIZARD_FIRST_STEP = 1
WIZARD_LAST_STEP = 10

DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_BACKOFF_BASE = 1.5
DEFAULT_BACKOFF_JITTER = 0.5

ALL_CATEGORIES = "all"
