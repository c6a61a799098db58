"""Common subtitle processing exceptions."""

from __future__ import annotations


class SubtitleProcessingError(RuntimeError):
    """Raised when subtitle parsing or writing fails."""


class AnnotationCancelled(RuntimeError):
    """Raised when an annotation run is cancelled between files."""


__all__ = ["AnnotationCancelled", "SubtitleProcessingError"]
