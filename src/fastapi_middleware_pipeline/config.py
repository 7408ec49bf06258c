"""Application settings and feature flags, loaded once at startup."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from fastapi_middleware_pipeline.exceptions import ConfigurationError

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class FeatureFlags(BaseModel):
    """Boolean switches gating optional behaviour. Immutable."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    show_debug_info: bool = False
    enable_logging: bool = False


class AppSettings(BaseSettings):
    """Process-wide settings.

    Environment variables use the ``APP_`` prefix and ``__`` for nesting,
    e.g. ``APP_FEATURES__SHOW_DEBUG_INFO=true``, and win over values passed
    to the constructor (which is how file values arrive).
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_nested_delimiter="__",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    features: FeatureFlags = Field(default_factory=FeatureFlags)
    environment: str = Field(default="Production")
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def _snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _normalize_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {_snake_case(k): _normalize_keys(v) for k, v in value.items()}
    return value


def read_settings_file(path: str | Path, section: str | None = "AppSettings") -> dict[str, Any]:
    """Read one section of an ``appsettings.json`` style file as snake_case keys."""
    file_path = Path(path)
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Settings file not found: {file_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Settings file is not valid JSON: {file_path}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Settings file must hold a JSON object: {file_path}")
    if section is not None:
        raw = raw.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Settings section '{section}' must be an object")
    result: dict[str, Any] = _normalize_keys(raw)
    return result


def load_settings(
    path: str | Path | None = None, *, section: str | None = "AppSettings"
) -> AppSettings:
    """Build AppSettings from an optional file, with environment overrides."""
    values = read_settings_file(path, section) if path is not None else {}
    return AppSettings(**values)
