"""Configuration loading, validation, and access."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from energy_projections.core.exceptions import ConfigError

# Credential variable names used by the upstream providers' own docs.
_BARE_CREDENTIAL_VARS = {
    "EIA_API_KEY": "eia_api_key",
    "FRED_API_KEY": "fred_api_key",
}


class ProvidersConfig(BaseModel):
    """Upstream price provider access configuration."""

    model_config = ConfigDict(frozen=True)

    eia_api_key: str | None = None
    fred_api_key: str | None = None
    request_timeout: float = 10.0
    rate_limit: int = 5

    @field_validator("eia_api_key", "fred_api_key")
    @classmethod
    def blank_key_is_missing(cls, v: str | None) -> str | None:
        if v is not None and not str(v).strip():
            return None
        return v

    @field_validator("request_timeout")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout must be > 0")
        return v

    @field_validator("rate_limit")
    @classmethod
    def rate_limit_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("rate_limit must be >= 1")
        return v

    @property
    def eia_configured(self) -> bool:
        return self.eia_api_key is not None

    @property
    def fred_configured(self) -> bool:
        return self.fred_api_key is not None


class CacheConfig(BaseModel):
    """In-memory response cache configuration."""

    model_config = ConfigDict(frozen=True)

    ttl_seconds: float = 300.0
    max_entries: int | None = None

    @field_validator("ttl_seconds")
    @classmethod
    def ttl_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("ttl_seconds must be > 0")
        return v

    @field_validator("max_entries")
    @classmethod
    def max_entries_positive(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError("max_entries must be >= 1")
        return v


class APIConfig(BaseModel):
    """FastAPI server configuration."""

    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: list[str] = ["*"]


class ProjectionsConfig(BaseModel):
    """Root configuration for the entire energy-projections system."""

    model_config = ConfigDict(frozen=True)

    providers: ProvidersConfig = ProvidersConfig()
    cache: CacheConfig = CacheConfig()
    api: APIConfig = APIConfig()


def load_config(
    config_path: str | None = None,
    env_prefix: str = "ENERGY_PROJECTIONS_",
    dotenv_path: str | None = None,
) -> ProjectionsConfig:
    """Load configuration from environment + YAML file + defaults.

    Resolution order (highest priority first):
    1. Environment variables (ENERGY_PROJECTIONS_PROVIDERS__EIA_API_KEY, etc.)
    2. Bare provider credentials (EIA_API_KEY, FRED_API_KEY)
    3. YAML file at config_path
    4. Built-in defaults

    A ``.env`` file is read into the environment first without overriding
    variables that are already set.

    Nested keys use double-underscore in env vars:
        ENERGY_PROJECTIONS_CACHE__TTL_SECONDS=60  ->  cache.ttl_seconds = 60
    """
    try:
        load_dotenv(dotenv_path, override=False)
        yaml_path = _resolve_config_path(config_path)
        base: dict = {}
        if yaml_path is not None:
            base = _load_yaml(yaml_path)

        merged = _merge_bare_credentials(base)
        merged = _merge_env_vars(merged, env_prefix)
        return ProjectionsConfig.model_validate(merged)
    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(str(e), context={"source": "load_config"}) from e


def _resolve_config_path(explicit: str | None) -> Path | None:
    """Determine config file path."""
    if explicit is not None:
        p = Path(explicit)
        if not p.exists():
            raise ConfigError(
                f"Config file not found: {explicit}",
                context={"field": "config_path", "value": explicit},
            )
        return p

    env_path = os.environ.get("ENERGY_PROJECTIONS_CONFIG")
    if env_path:
        p = Path(env_path)
        if not p.exists():
            raise ConfigError(
                f"Config file from ENERGY_PROJECTIONS_CONFIG not found: {env_path}",
                context={"field": "ENERGY_PROJECTIONS_CONFIG", "value": env_path},
            )
        return p

    default = Path("energy-projections.yml")
    if default.exists():
        return default

    return None


def _load_yaml(path: Path) -> dict:
    """Load and parse YAML file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"YAML config must be a mapping, got {type(data).__name__}",
                context={"field": "config_file", "value": str(path)},
            )
        return data
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Failed to parse YAML config: {e}",
            context={"field": "config_file", "value": str(path)},
        ) from e


def _merge_bare_credentials(base: dict) -> dict:
    """Overlay EIA_API_KEY / FRED_API_KEY onto the providers section."""
    result = dict(base)
    providers = dict(result.get("providers") or {})
    for var, field in _BARE_CREDENTIAL_VARS.items():
        value = os.environ.get(var)
        if value:
            providers[field] = value
    if providers:
        result["providers"] = providers
    return result


def _merge_env_vars(base: dict, prefix: str) -> dict:
    """Overlay environment variables onto base config dict.

    Double-underscore separates nesting levels.
    Values are auto-cast: "true"/"false" -> bool, numeric strings -> int/float.
    Credential fields are never cast.
    """
    result = dict(base)

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        remainder = key[len(prefix) :]
        parts = [p.lower() for p in remainder.split("__")]

        # Skip the CONFIG env var itself
        if parts == ["config"]:
            continue

        cast_value = value if parts[-1].endswith("_api_key") else _auto_cast(value)

        target = result
        for part in parts[:-1]:
            if not isinstance(target.get(part), dict):
                target[part] = {}
            else:
                target[part] = dict(target[part])
            target = target[part]
        target[parts[-1]] = cast_value

    return result


def _auto_cast(value: str) -> str | int | float | bool:
    """Auto-cast string values from environment variables."""
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value
