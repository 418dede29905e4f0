from __future__ import annotations

import logging
import os
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from .constants import (
    DEFAULT_BACKOFF_BASE,
    DEFAULT_BACKOFF_JITTER,
    DEFAULT_RETRY_ATTEMPTS,
)


class PersistenceConfig(BaseModel):
    """Repository backend settings."""

    backend: str = "inmemory"


class RetryConfig(BaseModel):
    """Retry policy for calls to external systems."""

    max_attempts: int = Field(default=DEFAULT_RETRY_ATTEMPTS, ge=1)
    base: float = Field(default=DEFAULT_BACKOFF_BASE, gt=0)
    jitter: float = Field(default=DEFAULT_BACKOFF_JITTER, ge=0)


class ClyntoConfig(BaseModel):
    """Top-level configuration model."""

    persistence: PersistenceConfig = PersistenceConfig()
    retry: RetryConfig = RetryConfig()
    playbooks_path: Optional[str] = None
    seed_demo_data: bool = True
    log_level: str = "INFO"


def load_config(path: Optional[str] = None) -> ClyntoConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to CLYNTO_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("CLYNTO_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = ClyntoConfig(**data)
    else:
        config = ClyntoConfig()

    env_level = os.getenv("CLYNTO_LOG_LEVEL")
    if env_level:
        config.log_level = env_level
    env_playbooks = os.getenv("CLYNTO_PLAYBOOKS_PATH")
    if env_playbooks:
        config.playbooks_path = env_playbooks
    return config


def configure_logging(config: ClyntoConfig) -> None:
    """Apply ``config.log_level`` to the root logger."""
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {config.log_level}")
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    logging.getLogger().setLevel(level)
