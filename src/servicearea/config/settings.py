"""
Application settings (Pydantic).

Settings are loaded from `src/servicearea/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `SERVICEAREA_CONFIG_PATH`
- environment variables (e.g., `SERVICEAREA_RADIUS_MILES`, `MAPBOX_ACCESS_TOKEN`)

Design rule:
- The service center and radius live in YAML, not hard-coded in business logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any
from servicearea.core.env import load_dotenv_if_present
from servicearea.core.errors import InvalidServiceConfig
from servicearea.core.geo import ring_vertex_count

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `servicearea.config`."""
    text = resources.files("servicearea.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "ServiceArea"
    http_timeout_seconds: float = 10
    log_level: str = "INFO"


class ServiceSettings(BaseModel):
    # Coordinate range checks happen in `servicearea.service.area.load_service_config`;
    # type errors here are re-raised as `InvalidServiceConfig` by `get_settings`.
    center_latitude: float = 34.1
    center_longitude: float = -84.5
    radius_miles: float = 25
    polygon_step_degrees: float = Field(5, gt=0, le=360)

    @field_validator("polygon_step_degrees")
    @classmethod
    def _validate_step_divides_circle(cls, step: float) -> float:
        ring_vertex_count(step)
        return step


class GeocodingSettings(BaseModel):
    base_url: str = "https://api.mapbox.com/geocoding/v5/mapbox.places"
    access_token: str | None = None
    country: str | None = "us"
    limit: int = Field(1, ge=1, le=10)
    user_agent: str = "servicearea/0.1.0"


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    service: ServiceSettings = Field(default_factory=ServiceSettings)
    geocoding: GeocodingSettings = Field(default_factory=GeocodingSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: the whitelist is kept small on purpose.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("SERVICEAREA_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    for env_name, key in [
        ("SERVICEAREA_CENTER_LAT", "center_latitude"),
        ("SERVICEAREA_CENTER_LON", "center_longitude"),
        ("SERVICEAREA_RADIUS_MILES", "radius_miles"),
    ]:
        value = os.getenv(env_name)
        if value:
            data.setdefault("service", {})[key] = value

    token = os.getenv("MAPBOX_ACCESS_TOKEN")
    if token:
        data.setdefault("geocoding", {})["access_token"] = token

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("SERVICEAREA_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    try:
        return Settings.model_validate(raw)
    except ValidationError as e:
        # A bad service section is a fatal configuration error, reported in domain terms.
        if any(err["loc"][:1] == ("service",) for err in e.errors()):
            raise InvalidServiceConfig(f"Malformed service configuration: {e}") from e
        raise


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
