"""Configuration loading utilities."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from subgloss import logging_manager

from .settings import AnnotationConfig, load_environment_overrides

logger = logging_manager.get_logger().getChild("config")

DEFAULT_CONFIG_FILENAME = "config.yaml"


class ConfigError(ValueError):
    """Raised when the configuration file is missing or invalid."""


def _read_config_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8-sig") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {path}") from exc
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Problem reading configuration {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"Configuration {path} must contain a YAML mapping")
    logger.debug("Loaded configuration from %s", path, extra={"event": "config.loaded"})
    return dict(data)


def build_annotation_config(
    payload: Mapping[str, Any],
    overrides: Optional[Mapping[str, Any]] = None,
) -> AnnotationConfig:
    """Validate ``payload`` merged with ``overrides`` (later values win)."""

    merged = dict(payload)
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value
    try:
        return AnnotationConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def load_annotation_config(
    path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> AnnotationConfig:
    """Read the YAML configuration, apply environment then explicit overrides."""

    payload: Dict[str, Any] = _read_config_yaml(Path(path)) if path is not None else {}
    combined: Dict[str, Any] = dict(load_environment_overrides())
    combined.update({key: value for key, value in (overrides or {}).items() if value is not None})
    return build_annotation_config(payload, combined)


__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_FILENAME",
    "build_annotation_config",
    "load_annotation_config",
]
