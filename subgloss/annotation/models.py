"""Typed containers for tokens, dictionary entries and dictionary matches."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Tuple

from subgloss import logging_manager as log_mgr

from .errors import TokenContractError

logger = log_mgr.get_logger().getChild("annotation.models")

FREQUENCY_TAG_PREFIX = "freq"


class PosTag(str, Enum):
    """Universal part-of-speech tags (https://universaldependencies.org/u/pos/)."""

    ADJ = "ADJ"
    ADV = "ADV"
    INTJ = "INTJ"
    NOUN = "NOUN"
    PROPN = "PROPN"
    VERB = "VERB"
    ADP = "ADP"
    AUX = "AUX"
    CCONJ = "CCONJ"
    DET = "DET"
    NUM = "NUM"
    PART = "PART"
    PRON = "PRON"
    SCONJ = "SCONJ"
    PUNCT = "PUNCT"
    SYM = "SYM"
    X = "X"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: "str | PosTag") -> "PosTag":
        if isinstance(value, PosTag):
            return value
        candidate = (value or "").strip().upper()
        try:
            return cls(candidate)
        except ValueError:
            raise ValueError(f"Unknown part-of-speech tag {value!r}") from None


@dataclass(frozen=True, slots=True)
class TextToken:
    """One tagged unit of text as produced by a tokenizer.

    Missing canonical forms default to the lower-cased text form.
    """

    text_form: str
    part_of_speech: PosTag = PosTag.UNKNOWN
    first_canonical_form: str = ""
    second_canonical_form: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.text_form, str) or not self.text_form:
            raise TokenContractError("Cannot create a TextToken from an empty string.")
        fallback = self.text_form.lower()
        object.__setattr__(self, "part_of_speech", PosTag.parse(self.part_of_speech))
        object.__setattr__(
            self, "first_canonical_form", self.first_canonical_form or fallback
        )
        object.__setattr__(
            self, "second_canonical_form", self.second_canonical_form or fallback
        )


def _parse_frequency(lemmas: Tuple[str, ...], tags: FrozenSet[str]) -> Optional[int]:
    frequency_tags = sorted(tag for tag in tags if tag.startswith(FREQUENCY_TAG_PREFIX))
    if not frequency_tags:
        return None
    if len(frequency_tags) > 1:
        logger.error(
            "Dictionary entry %s has multiple frequency tags.",
            ", ".join(lemmas),
            extra={"event": "dictionary.entry.frequency_conflict", "tags": frequency_tags},
        )
        return None
    suffix = frequency_tags[0][len(FREQUENCY_TAG_PREFIX) :]
    try:
        return int(suffix)
    except ValueError:
        logger.warning(
            "Dictionary entry %s has an unreadable frequency tag %r.",
            ", ".join(lemmas),
            frequency_tags[0],
            extra={"event": "dictionary.entry.frequency_invalid"},
        )
        return None


@dataclass(frozen=True, slots=True)
class DictionaryEntry:
    """One definition group: headwords, senses and optional metadata."""

    lemmas: Tuple[str, ...]
    senses: Tuple[str, ...]
    pronunciations: Tuple[str, ...] = ()
    tags: FrozenSet[str] = frozenset()
    frequency: Optional[int] = field(init=False, default=None, compare=False)

    def __post_init__(self) -> None:
        lemmas = tuple(self.lemmas or ())
        senses = tuple(self.senses or ())
        if not lemmas:
            raise ValueError("DictionaryEntry lemmas should not be empty")
        if not senses:
            raise ValueError("DictionaryEntry senses should not be empty")
        tags = frozenset(self.tags or ())
        object.__setattr__(self, "lemmas", lemmas)
        object.__setattr__(self, "senses", senses)
        object.__setattr__(self, "pronunciations", tuple(self.pronunciations or ()))
        object.__setattr__(self, "tags", tags)
        object.__setattr__(self, "frequency", _parse_frequency(lemmas, tags))

    def with_tag(self, tag: str) -> "DictionaryEntry":
        if tag in self.tags:
            return self
        return DictionaryEntry(
            lemmas=self.lemmas,
            senses=self.senses,
            pronunciations=self.pronunciations,
            tags=self.tags | {tag},
        )


@dataclass(frozen=True, slots=True)
class DictionaryMatch:
    """Successive tokens that together resolve to one or more dictionary entries."""

    tokens: Tuple[TextToken, ...]
    entries: Tuple[DictionaryEntry, ...]
    word_separator: str = " "

    def __post_init__(self) -> None:
        tokens = tuple(self.tokens)
        if not tokens:
            raise ValueError("DictionaryMatch needs at least one token")
        object.__setattr__(self, "tokens", tokens)
        object.__setattr__(self, "entries", tuple(self.entries))

    def _join(self, parts: Iterable[str]) -> str:
        return self.word_separator.join(parts)

    @property
    def text_form(self) -> str:
        return self._join(token.text_form for token in self.tokens)

    @property
    def first_canonical_form(self) -> str:
        return self._join(token.first_canonical_form for token in self.tokens)

    @property
    def second_canonical_form(self) -> str:
        return self._join(token.second_canonical_form for token in self.tokens)

    @property
    def forms(self) -> Tuple[str, str, str]:
        return (self.first_canonical_form, self.second_canonical_form, self.text_form)

    @property
    def has_verb(self) -> bool:
        return any(token.part_of_speech is PosTag.VERB for token in self.tokens)

    @property
    def tags(self) -> FrozenSet[str]:
        """Union of every entry's tags; a multi-sense match carries them all."""

        collected: set[str] = set()
        for entry in self.entries:
            collected.update(entry.tags)
        return frozenset(collected)

    @property
    def frequencies(self) -> Tuple[Optional[int], ...]:
        return tuple(entry.frequency for entry in self.entries)

    @property
    def frequency(self) -> Optional[int]:
        """Smallest known frequency among the entries, if any."""

        known = [value for value in self.frequencies if value is not None]
        return min(known) if known else None

    def __len__(self) -> int:
        return len(self.tokens)


__all__ = [
    "DictionaryEntry",
    "DictionaryMatch",
    "FREQUENCY_TAG_PREFIX",
    "PosTag",
    "TextToken",
]
