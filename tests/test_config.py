"""Tests for environment-driven bus settings."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from hermes.config import BusSettings, configure_logging
from hermes.domain.models import IdentityRule


def test_defaults_when_environment_is_empty():
    settings = BusSettings.from_env({})

    assert settings.identity_rule == IdentityRule.REFERENCE
    assert settings.log_level == "WARNING"


def test_reads_hermes_variables():
    settings = BusSettings.from_env(
        {"HERMES_IDENTITY_RULE": " Structural ", "HERMES_LOG_LEVEL": "debug"}
    )

    assert settings.identity_rule == IdentityRule.STRUCTURAL
    assert settings.log_level == "DEBUG"


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("HERMES_IDENTITY_RULE", "structural")
    monkeypatch.delenv("HERMES_LOG_LEVEL", raising=False)

    assert BusSettings.from_env().identity_rule == IdentityRule.STRUCTURAL


def test_unknown_identity_rule_is_rejected():
    with pytest.raises(ValidationError):
        BusSettings.from_env({"HERMES_IDENTITY_RULE": "by-name"})


def test_unknown_log_level_is_rejected():
    with pytest.raises(ValidationError):
        BusSettings(log_level="LOUD")


def test_configure_logging_sets_package_level():
    logger = logging.getLogger("hermes")
    previous = logger.level
    try:
        configure_logging(BusSettings(log_level="DEBUG"))
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(previous)
