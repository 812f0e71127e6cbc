"""Configuration models and loading for the logger and its event bus."""

from __future__ import annotations

from copy import deepcopy
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigValidationError

import tomllib  # stdlib since Python 3.11 (project requires >=3.11)

LOGGER = logging.getLogger(__name__)

VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class EventBusOptions(BaseModel):
    """Behavior switches for an ``EventBus``, fixed at construction."""

    debug: bool = False
    warn_on_no_listeners: bool = True
    catch_errors: bool = True
    max_listeners: int | None = Field(default=None, ge=0)


class LoggerOptions(BaseModel):
    """Console behavior of a ``Logger`` and the children it creates."""

    clear_on_init: bool = True
    use_timestamps: bool = True


class LoggingConfig(BaseModel):
    """Stdlib/structlog bootstrap settings."""

    level: str = "INFO"
    structured: bool = True

    @field_validator("level", mode="before")
    @classmethod
    def _validate_level(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Logging level must be a string.")
        normalized = value.strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(f"Unsupported log level {normalized!r}.")
        return normalized


class Config(BaseModel):
    """Root configuration model for all sections."""

    logger: LoggerOptions = LoggerOptions()
    logging: LoggingConfig = LoggingConfig()


DEFAULT_CONFIG: dict[str, dict[str, Any]] = Config().model_dump()


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override values onto base values."""
    merged: dict[str, Any] = deepcopy(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _validate_config(raw: dict[str, Any]) -> Config:
    """Validate merged config and fallback to safe defaults when possible."""
    try:
        return Config.model_validate(raw)
    except ValidationError as exc:
        LOGGER.warning("Configuration validation failed, using safe defaults: %s", exc)
        return Config()
    except Exception as exc:  # noqa: BLE001 - unexpected model construction failure.
        raise ConfigValidationError(f"Unable to validate configuration: {exc}") from exc


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from TOML, merge with defaults, and validate.

    Without ``config_path``, or when the file does not exist, the defaults
    are returned.
    """
    raw_data: dict[str, Any] = {}
    if config_path is not None and config_path.exists():
        try:
            raw_data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            LOGGER.warning("Failed to parse config at %s: %s", config_path, exc)
            raw_data = {}

    merged = _deep_merge(DEFAULT_CONFIG, raw_data)
    return _validate_config(merged)
