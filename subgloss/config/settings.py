"""Pydantic models for the annotation configuration file."""
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from subgloss import logging_manager
from subgloss.language import Language
from subgloss.subtitles.common import SUPPORTED_EXTENSIONS
from subgloss.subtitles.models import SubtitleStyles, normalise_hex_color

logger = logging_manager.get_logger().getChild("config")

DEFAULT_HIGHLIGHT_COLORS = ("#FFFFFF",)
DEFAULT_IGNORE_TAGS = ("kana",)
DEFAULT_DEFINITION_SIZE = 8


def _split_csv(value: Any) -> Any:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class AnnotationConfig(BaseModel):
    """Typed representation of the YAML annotation configuration."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    dictionary: Optional[str] = None
    language: Optional[Language] = None
    highlight_colors: List[str] = Field(
        default_factory=lambda: list(DEFAULT_HIGHLIGHT_COLORS),
        validation_alias=_alias("highlight_colors", "highlightColors"),
    )
    display_other_lemma: bool = Field(
        default=False, validation_alias=_alias("display_other_lemma", "displayOtherLemma")
    )
    ignore_words: List[str] = Field(
        default_factory=list, validation_alias=_alias("ignore_words", "ignoreWords")
    )
    ignore_tags: List[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE_TAGS),
        validation_alias=_alias("ignore_tags", "ignoreTags"),
    )
    ignore_frequencies: List[int] = Field(
        default_factory=list,
        validation_alias=_alias("ignore_frequencies", "ignoreFrequencies"),
    )
    part_of_speech_to_annotate: Optional[List[str]] = Field(
        default=None,
        validation_alias=_alias("part_of_speech_to_annotate", "partOfSpeechToAnnotate"),
    )
    definition_size: int = Field(
        default=DEFAULT_DEFINITION_SIZE,
        gt=0,
        validation_alias=_alias("definition_size", "definitionSize"),
    )
    dictionary_cleanup_regexp: Optional[str] = Field(
        default=None,
        validation_alias=_alias("dictionary_cleanup_regexp", "dictionaryCleanupRegexp"),
    )
    pronunciation_fallback: bool = Field(
        default=False,
        validation_alias=_alias("pronunciation_fallback", "pronunciationFallback"),
    )
    pronunciation_min_length: int = Field(
        default=2,
        ge=1,
        validation_alias=_alias("pronunciation_min_length", "pronunciationMinLength"),
    )
    subtitle_extensions: List[str] = Field(
        default_factory=lambda: list(SUPPORTED_EXTENSIONS),
        validation_alias=_alias("subtitle_extensions", "subtitleExtensions"),
    )

    @field_validator("language", mode="before")
    @classmethod
    def _parse_language(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return Language.parse(value)

    @field_validator("highlight_colors", mode="before")
    @classmethod
    def _check_colors(cls, value: Any) -> Any:
        colors = _split_csv(value)
        if not colors:
            raise ValueError("highlight_colors must list at least one colour")
        return [normalise_hex_color("highlight_colors", str(color)) for color in colors]

    @field_validator("ignore_words", "ignore_tags", "ignore_frequencies", mode="before")
    @classmethod
    def _split_lists(cls, value: Any) -> Any:
        if value is None:
            return []
        return _split_csv(value)

    @field_validator("part_of_speech_to_annotate", mode="before")
    @classmethod
    def _parse_pos(cls, value: Any) -> Any:
        from subgloss.annotation.models import PosTag

        value = _split_csv(value)
        if value is None:
            return None
        return [PosTag.parse(str(tag)).value for tag in value]

    @field_validator("dictionary_cleanup_regexp")
    @classmethod
    def _check_regexp(cls, value: Optional[str]) -> Optional[str]:
        if value:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"dictionary_cleanup_regexp is not a valid regexp: {exc}") from exc
        return value or None

    @field_validator("subtitle_extensions", mode="before")
    @classmethod
    def _normalize_extensions(cls, value: Any) -> Any:
        extensions = _split_csv(value) or []
        return [
            ext if ext.startswith(".") else f".{ext}"
            for ext in (str(item).strip().lower() for item in extensions)
            if ext
        ]

    def subtitle_styles(self) -> SubtitleStyles:
        return SubtitleStyles(definition_font_size=self.definition_size)


class EnvironmentOverrides(BaseSettings):
    """Configuration overrides sourced from environment variables."""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    dictionary: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("SUBGLOSS_DICTIONARY")
    )
    language: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("SUBGLOSS_LANGUAGE")
    )


def load_environment_overrides() -> Dict[str, Any]:
    """Return configuration overrides sourced from environment variables."""

    try:
        overrides = EnvironmentOverrides()
    except ValidationError as exc:
        logger.warning(
            "Invalid environment configuration detected; ignoring it.",
            extra={"event": "config.env.validation_error", "error": str(exc)},
        )
        return {}
    return overrides.model_dump(exclude_none=True)


__all__ = [
    "AnnotationConfig",
    "DEFAULT_DEFINITION_SIZE",
    "DEFAULT_HIGHLIGHT_COLORS",
    "DEFAULT_IGNORE_TAGS",
    "EnvironmentOverrides",
    "load_environment_overrides",
]
