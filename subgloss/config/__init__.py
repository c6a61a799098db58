"""Annotation configuration."""

from .loader import ConfigError, build_annotation_config, load_annotation_config
from .settings import AnnotationConfig, EnvironmentOverrides

__all__ = [
    "AnnotationConfig",
    "ConfigError",
    "EnvironmentOverrides",
    "build_annotation_config",
    "load_annotation_config",
]
