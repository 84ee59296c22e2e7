"""Configuration for the fieldwise check layer.

Settings come from the ``[tool.fieldwise]`` table of the nearest
``pyproject.toml``, then from ``FIELDWISE_*`` environment variables (a ``.env``
file is honoured).
"""

from __future__ import annotations

import logging
import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from fieldwise.reflection.scope import ScopeSelection, select

logger = logging.getLogger(__name__)

ENV_PREFIX = "FIELDWISE_"


class FieldwiseConfig(BaseModel):
    """Settings of the check layer.

    Attributes
    ----------
    default_scope
        Scope toggle names used by ``has_fields_with_same_values``.
    max_value_length
        Maximum length of a rendered value before it is truncated.
    report_all
        Render every mismatch instead of only the first one.
    subject
        How failure messages name the object under test.
    """

    default_scope: list[str] = Field(default_factory=lambda: ["all_fields"])
    max_value_length: int = Field(default=80, ge=10)
    report_all: bool = False
    subject: str = "checked value"

    @field_validator("default_scope", mode="before")
    @classmethod
    def _split_scope(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [part for part in (p.strip() for p in value.split(",")) if part]
        return value

    @field_validator("default_scope")
    @classmethod
    def _known_toggles(cls, value: list[str]) -> list[str]:
        select(*value)
        return value

    @property
    def scope(self) -> ScopeSelection:
        return select(*self.default_scope)


def find_pyproject(start: Path | None = None) -> Path | None:
    """Return the nearest pyproject.toml at or above ``start``."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _env_overrides() -> dict[str, str]:
    overrides: dict[str, str] = {}
    for name in FieldwiseConfig.model_fields:
        value = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value is not None:
            overrides[name] = value
    return overrides


def load_config(start: Path | None = None) -> FieldwiseConfig:
    """Load the configuration for the project containing ``start`` (default: cwd)."""
    settings: dict[str, Any] = {}

    pyproject = find_pyproject(start)
    project_root = pyproject.parent if pyproject is not None else (start or Path.cwd())
    load_dotenv(project_root / ".env")

    if pyproject is not None:
        with pyproject.open("rb") as fh:
            data = tomllib.load(fh)
        settings.update(data.get("tool", {}).get("fieldwise", {}))
        logger.debug("Loaded fieldwise settings from %s", pyproject)

    settings.update(_env_overrides())
    return FieldwiseConfig.model_validate(settings)


_config: FieldwiseConfig | None = None
_config_lock = threading.Lock()


def get_config() -> FieldwiseConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    with _config_lock:
        if _config is None:
            _config = load_config()
        return _config


def set_config(config: FieldwiseConfig) -> None:
    """Replace the process-wide configuration."""
    global _config
    with _config_lock:
        _config = config


def reset_config() -> None:
    """Forget the loaded configuration; the next ``get_config`` reloads it."""
    global _config
    with _config_lock:
        _config = None
