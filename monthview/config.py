"""Runtime settings read from ``MONTHVIEW_*`` environment variables."""

from __future__ import annotations

import logging
import os
from typing import Mapping

from pydantic import BaseModel, Field, field_validator

from monthview.services.reminders import MAX_POLL_SECONDS

_PREFIX = "MONTHVIEW_"


class Settings(BaseModel):
    log_level: str = "INFO"
    reminder_poll_seconds: float = Field(default=60, gt=0, le=MAX_POLL_SECONDS)
    seed_sample_events: bool = True
    notifications_enabled: bool = True
    inbox_size: int = Field(default=50, ge=1)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {value!r}")
        return level

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from the environment; unset variables keep defaults."""
        environ = os.environ if environ is None else environ
        values = {
            name: environ[_PREFIX + name.upper()]
            for name in cls.model_fields
            if _PREFIX + name.upper() in environ
        }
        return cls(**values)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
