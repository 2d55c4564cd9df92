from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator

from graph_http.core.common.exceptions import ConfigurationError
from graph_http.core.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    GRAPH_SERVER,
    REST_SERVER,
)
from graph_http.core.interfaces.model_bases import DomainModel

logger = logging.getLogger(__name__)

ENV_PREFIX = "GRAPH_HTTP_"


def _env_to_bool(name: str, default: bool, env: Mapping[str, str]) -> bool:
    """Return an environment variable parsed as a boolean flag."""
    value = env.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_float(value: str, fallback: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return fallback


def _get_env_value(
    env: Mapping[str, str],
    name: str,
    default: Any,
    *,
    transform: Callable[[str], Any] | None = None,
) -> Any:
    """Return an environment variable value, optionally transformed."""
    if name in env:
        raw_value = env[name]
        return transform(raw_value) if transform is not None else raw_value
    return default


class LogLevel(str, Enum):
    """Log levels for configuration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(DomainModel):
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    log_file: str | None = None
    redact_access_tokens: bool = True


class ServiceConfig(DomainModel):
    """Settings shared by every request a service instance sends."""

    # Send every request over TLS, not only those carrying an access token
    always_use_ssl: bool = False
    # Skip certificate verification on TLS connections; off unless opted in
    insecure_skip_verify: bool = False
    graph_server: str = GRAPH_SERVER
    rest_server: str = REST_SERVER
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    # Registered transport used by create_http_service()
    http_service: str = "direct"

    @field_validator("graph_server", "rest_server")
    @classmethod
    def validate_server(cls, v: str) -> str:
        """Hosts are bare names; the scheme is chosen per request."""
        if not v or "://" in v or "/" in v:
            raise ValueError("Server must be a bare host name without scheme or path")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v


class AppConfig(DomainModel):
    """Complete library configuration."""

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, *, environ: Mapping[str, str] | None = None) -> AppConfig:
        """Create AppConfig from ``GRAPH_HTTP_*`` environment variables."""
        env: Mapping[str, str] = environ if environ is not None else os.environ
        return cls.model_validate(_config_from_env(env))


def _config_from_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Return only the settings that are present in ``env``."""
    service: dict[str, Any] = {}
    for key, name in (
        ("always_use_ssl", "ALWAYS_USE_SSL"),
        ("insecure_skip_verify", "INSECURE_SKIP_VERIFY"),
    ):
        if f"{ENV_PREFIX}{name}" in env:
            service[key] = _env_to_bool(f"{ENV_PREFIX}{name}", False, env)

    for key, name in (
        ("http_service", "SERVICE"),
        ("graph_server", "GRAPH_SERVER"),
        ("rest_server", "REST_SERVER"),
    ):
        value = _get_env_value(env, f"{ENV_PREFIX}{name}", None)
        if value is not None:
            service[key] = value

    timeout = _get_env_value(
        env,
        f"{ENV_PREFIX}TIMEOUT",
        None,
        transform=lambda value: _to_float(value, DEFAULT_TIMEOUT_SECONDS),
    )
    if timeout is not None:
        service["timeout"] = timeout

    config: dict[str, Any] = {}
    if service:
        config["service"] = service
    level = _get_env_value(env, f"{ENV_PREFIX}LOG_LEVEL", None, transform=str.upper)
    if level is not None:
        config["logging"] = {"level": level}
    return config


def _merge_dicts(base: dict[str, Any], override: Mapping[str, Any]) -> None:
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            _merge_dicts(base[key], value)
        else:
            base[key] = value


def load_config(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """
    Load configuration from a YAML file and the environment.

    Environment variables take precedence over values from the file.

    Args:
        config_path: Optional path to a ``.yaml``/``.yml`` configuration file
        environ: Environment mapping, defaults to ``os.environ``

    Returns:
        AppConfig instance

    Raises:
        ConfigurationError: If the file has an unsupported format or does
            not validate.
    """
    env = environ if environ is not None else os.environ
    config_data: dict[str, Any] = AppConfig().model_dump(mode="json")

    if config_path:
        path = Path(config_path)
        if not path.exists():
            logger.warning("Configuration file not found: %s", config_path)
        else:
            if path.suffix.lower() not in [".yaml", ".yml"]:
                raise ConfigurationError(
                    f"Unsupported configuration file format: {path.suffix}. Use YAML (.yaml/.yml).",
                    details={"path": str(path)},
                )
            with path.open(encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
            if not isinstance(file_config, Mapping):
                raise ConfigurationError(
                    "Configuration file must contain a mapping",
                    details={"path": str(path)},
                )
            _merge_dicts(config_data, file_config)

    _merge_dicts(config_data, _config_from_env(env))

    try:
        return AppConfig.model_validate(config_data)
    except ValueError as exc:
        logger.critical("Invalid configuration: %s", exc)
        raise ConfigurationError("Invalid configuration", details={"error": str(exc)}) from exc
