"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions. Settings load from
environment variables (or a ``.env`` file) with the ``IMS_`` prefix:

    IMS_DATA_DIR            directory holding store.json (default: <repo>/data)
    IMS_STORE_TIMEOUT       seconds to wait for the store lock (default: 5)
    IMS_LOG_LEVEL           logging level name (default: WARNING)
    IMS_TREND_WINDOW_DAYS   window used for price suggestions (default: 30)
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field, ValidationError as SettingsError, field_validator
from pydantic_settings import BaseSettings

from ims.application.operations import InventoryOperations
from ims.domain.exceptions import ValidationError
from ims.domain.service.windows import DEFAULT_WINDOW_DAYS, validate_window_days
from ims.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

ENV_PREFIX = "IMS_"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseSettings):
    """Runtime settings; every field can be overridden as ``IMS_<FIELD>``."""

    data_dir: Path = Field(default=_DEFAULT_DATA_DIR, description="Directory holding store.json")
    store_timeout: float = Field(default=5.0, gt=0, description="Seconds to wait for the store lock")
    log_level: str = Field(default="WARNING", description="Logging level name")
    trend_window_days: int = Field(
        default=DEFAULT_WINDOW_DAYS, description="Trailing window used for price suggestions"
    )

    model_config = {
        "env_prefix": ENV_PREFIX,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_ignore_empty": True,
        "extra": "ignore",
        "frozen": True,
    }

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown logging level '{value}'")
        return level

    @field_validator("trend_window_days")
    @classmethod
    def _usable_window(cls, value: int) -> int:
        try:
            return validate_window_days(value)
        except ValidationError as exc:
            raise ValueError(str(exc)) from exc

    @property
    def store_path(self) -> Path:
        return self.data_dir / "store.json"

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings, reporting bad values as a domain ValidationError."""
        try:
            return cls()
        except SettingsError as exc:
            problems = "; ".join(
                f"{ENV_PREFIX}{'_'.join(str(part) for part in err['loc']).upper()}: {err['msg']}"
                for err in exc.errors()
            )
            raise ValidationError(f"Invalid settings: {problems}") from exc


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)


def unit_of_work(settings: Settings | None = None) -> JsonUnitOfWork:
    settings = settings or Settings.from_env()
    return JsonUnitOfWork(settings.store_path, timeout=settings.store_timeout)


def operations(settings: Settings | None = None) -> InventoryOperations:
    settings = settings or Settings.from_env()
    return InventoryOperations(
        unit_of_work(settings),
        suggestion_window_days=settings.trend_window_days,
    )
