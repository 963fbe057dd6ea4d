"""Runtime settings for a bus, read from the environment."""

from __future__ import annotations

import logging
import os
from typing import Mapping

from pydantic import BaseModel, field_validator

from hermes.domain.models import IdentityRule

ENV_IDENTITY_RULE = "HERMES_IDENTITY_RULE"
ENV_LOG_LEVEL = "HERMES_LOG_LEVEL"


class BusSettings(BaseModel):
    identity_rule: IdentityRule = IdentityRule.REFERENCE
    log_level: str = "WARNING"

    @field_validator("identity_rule", mode="before")
    @classmethod
    def _lowercase_rule(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BusSettings:
        """Build settings from ``HERMES_*`` variables, defaulting the rest."""
        env = os.environ if environ is None else environ
        values: dict[str, str] = {}
        if env.get(ENV_IDENTITY_RULE):
            values["identity_rule"] = env[ENV_IDENTITY_RULE]
        if env.get(ENV_LOG_LEVEL):
            values["log_level"] = env[ENV_LOG_LEVEL]
        return cls(**values)


def configure_logging(settings: BusSettings) -> None:
    """Apply the configured level to the ``hermes`` logger tree."""
    logging.getLogger("hermes").setLevel(settings.log_level)
