"""Tests for configuration loading."""

import logging

import pytest

import clynto.persistence as persistence
from clynto.config import ClyntoConfig, configure_logging, load_config
from clynto.persistence import InMemoryWorkflowRepository, get_repository


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
persistence:
  backend: inmemory
retry:
  max_attempts: 5
  base: 2.0
seed_demo_data: false
log_level: DEBUG
"""
    )
    monkeypatch.setenv("CLYNTO_CONFIG", str(config_path))
    monkeypatch.delenv("CLYNTO_LOG_LEVEL", raising=False)

    config = load_config()
    assert config.retry.max_attempts == 5
    assert config.retry.base == 2.0
    assert config.seed_demo_data is False
    assert config.log_level == "DEBUG"


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.setenv("CLYNTO_CONFIG", str(tmp_path / "missing.yaml"))
    config = load_config()
    assert config.persistence.backend == "inmemory"
    assert config.retry.max_attempts == 3
    assert config.playbooks_path is None


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("CLYNTO_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("CLYNTO_LOG_LEVEL", "warning")
    monkeypatch.setenv("CLYNTO_PLAYBOOKS_PATH", str(tmp_path))
    config = load_config()
    assert config.log_level == "warning"
    assert config.playbooks_path == str(tmp_path)


def test_configure_logging_levels():
    configure_logging(ClyntoConfig(log_level="warning"))
    assert logging.getLogger().level == logging.WARNING
    with pytest.raises(ValueError):
        configure_logging(ClyntoConfig(log_level="LOUD"))


def test_get_repository_uses_config():
    persistence.reset_repository()
    repo = get_repository(ClyntoConfig())
    assert isinstance(repo, InMemoryWorkflowRepository)
    assert get_repository() is repo

    with pytest.raises(ValueError):
        get_repository(ClyntoConfig(persistence={"backend": "postgres"}))
    persistence.reset_repository()
