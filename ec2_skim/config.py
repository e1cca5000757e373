"""Frozen dataclasses for configuration and YAML loader with env-var interpolation."""

from __future__ import annotations

import dataclasses
import os
import re
import typing
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")

_LOG_FORMATS = ("json", "text")


def _interpolate_env(value: str) -> str:
    """Replace ${ENV_VAR} placeholders with environment variable values."""

    def _replace(match: re.Match) -> str:
        env_key = match.group(1)
        env_val = os.environ.get(env_key)
        if env_val is None:
            raise ConfigError(f"Environment variable '{env_key}' is not set")
        return env_val

    return _ENV_PATTERN.sub(_replace, value)


def _walk_and_interpolate(obj: Any) -> Any:
    """Recursively interpolate env vars in strings throughout a nested structure."""
    if isinstance(obj, str):
        return _interpolate_env(obj)
    if isinstance(obj, dict):
        return {k: _walk_and_interpolate(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_interpolate(v) for v in obj]
    return obj


@dataclass(frozen=True)
class AWSConfig:
    credential_profile: str = ""  # empty = use default boto3 credential chain
    page_size: int = 1000  # MaxResults per describe_instances page
    max_pages: int = 10000  # safety bound on continuation tokens per fetch
    connect_timeout_seconds: float = 10
    read_timeout_seconds: float = 60
    max_attempts: int = 1  # botocore attempts per request, 1 disables retries
    max_workers: int = 1  # > 1 fetches (region, filter group) pairs in parallel


@dataclass(frozen=True)
class DisplayConfig:
    tags: list[str] = field(default_factory=lambda: ["Name"])
    id_width: int = 19
    multi_select: bool = False


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "WARNING"
    format: str = "text"  # "json" or "text"


@dataclass(frozen=True)
class AppConfig:
    aws: AWSConfig = field(default_factory=AWSConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _get_dataclass_type(ft: Any) -> type | None:
    """Return the dataclass type behind a field annotation, or None for plain values."""
    if isinstance(ft, type) and dataclasses.is_dataclass(ft):
        return ft
    return None


def _build_nested(cls: type, data: dict[str, Any]) -> Any:
    """Construct a frozen dataclass, recursively building nested dataclass fields."""
    if not isinstance(data, dict):
        return data
    field_types = typing.get_type_hints(cls)
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key not in field_types:
            continue
        dc_type = _get_dataclass_type(field_types[key])
        if dc_type is not None:
            if not isinstance(value, dict):
                raise ConfigError(f"Section '{key}' must be a mapping")
            kwargs[key] = _build_nested(dc_type, value)
        else:
            kwargs[key] = value
    return cls(**kwargs)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate configuration from a YAML file, or return defaults when no path is given."""
    if path is None:
        config = AppConfig()
        _validate(config)
        return config

    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    with open(path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Cannot parse configuration file {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("Configuration file must be a YAML mapping")

    raw = _walk_and_interpolate(raw)
    config = _build_nested(AppConfig, raw)
    _validate(config)
    return config


def _validate(config: AppConfig) -> None:
    """Validate configuration values."""
    aws = config.aws
    if not 5 <= aws.page_size <= 1000:
        raise ConfigError("aws.page_size must be between 5 and 1000")
    if aws.max_pages < 1:
        raise ConfigError("aws.max_pages must be >= 1")
    if aws.connect_timeout_seconds <= 0 or aws.read_timeout_seconds <= 0:
        raise ConfigError("aws timeouts must be > 0")
    if aws.max_attempts < 1:
        raise ConfigError("aws.max_attempts must be >= 1")
    if aws.max_workers < 1:
        raise ConfigError("aws.max_workers must be >= 1")

    if not isinstance(config.display.tags, list) or not all(isinstance(t, str) for t in config.display.tags):
        raise ConfigError("display.tags must be a list of tag names")
    if config.display.id_width < 1:
        raise ConfigError("display.id_width must be >= 1")

    if config.logging.format not in _LOG_FORMATS:
        raise ConfigError("logging.format must be 'json' or 'text'")
