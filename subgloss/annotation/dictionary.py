"""Lemma and pronunciation index consumed by the matcher, plus file loaders.

The index is built once per dictionary file and then only read. Loaders for
the YAML "jiji" dictionary format and for per-language tag files live here as
well; the matcher itself only ever calls :meth:`DictionaryIndex.lookup_by_lemma`
and :meth:`DictionaryIndex.lookup_by_pronunciation`.
"""

from __future__ import annotations

import re
from collections import defaultdict
from pathlib import Path
from typing import Any, DefaultDict, Dict, Iterable, List, Mapping, Optional, Sequence

import yaml

from subgloss import logging_manager as log_mgr
from subgloss.language import Language

from .errors import DictionaryLoadError
from .models import DictionaryEntry

logger = log_mgr.get_logger().getChild("annotation.dictionary")

# Example sentences in Japanese dictionaries are not worth the screen space.
DEFAULT_CLEANUP_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"【例】.*"),
    re.compile(r"\(用例\).*"),
)

DICT_INFO_KEY = "_about_this_dictionary"
DICT_TITLE_KEY = "title"
DICT_LANGUAGES_KEY = "languages"
DICT_LANGUAGES_FROM_KEY = "from"
SENSE_KEY = "sense"
SENSES_KEY = "senses"
PRONUNCIATION_KEY = "pronunciation"
TAGS_KEY = "tags"
_LIST_SPLIT_PATTERN = re.compile(r"\s*,\s*")


class DictionaryIndex:
    """Entries indexed by lemma and by pronunciation (many entries per key)."""

    def __init__(self, title: str = "", language: Optional[Language] = None) -> None:
        self.title = title
        self.language = language
        self._entries: List[DictionaryEntry] = []
        self._by_lemma: DefaultDict[str, List[DictionaryEntry]] = defaultdict(list)
        self._by_pronunciation: DefaultDict[str, List[DictionaryEntry]] = defaultdict(list)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    def add_entry(self, entry: DictionaryEntry) -> DictionaryEntry:
        self._entries.append(entry)
        for lemma in entry.lemmas:
            self._by_lemma[lemma].append(entry)
        for pronunciation in entry.pronunciations:
            self._by_pronunciation[pronunciation].append(entry)
        return entry

    def add(
        self,
        lemmas: Sequence[str],
        senses: Sequence[str],
        pronunciations: Sequence[str] = (),
        tags: Iterable[str] = (),
    ) -> DictionaryEntry:
        return self.add_entry(
            DictionaryEntry(
                lemmas=tuple(lemmas),
                senses=tuple(senses),
                pronunciations=tuple(pronunciations),
                tags=frozenset(tags),
            )
        )

    def lookup_by_lemma(self, key: str) -> List[DictionaryEntry]:
        return list(self._by_lemma.get(key, ()))

    def lookup_by_pronunciation(self, key: str) -> List[DictionaryEntry]:
        return list(self._by_pronunciation.get(key, ()))

    def apply_tag(self, tag: str, lemmas: Iterable[str]) -> int:
        """Add ``tag`` to every entry reachable from ``lemmas``; return how many changed."""

        targets = {
            id(entry): entry
            for lemma in lemmas
            for entry in self._by_lemma.get(lemma.strip(), ())
            if tag not in entry.tags
        }
        if not targets:
            return 0
        replacements = {key: entry.with_tag(tag) for key, entry in targets.items()}
        self._entries = [replacements.get(id(entry), entry) for entry in self._entries]
        for index in (self._by_lemma, self._by_pronunciation):
            for key, bucket in index.items():
                index[key] = [replacements.get(id(entry), entry) for entry in bucket]
        return len(replacements)


def clean_senses(senses: Iterable[str], extra_pattern: Optional[str] = None) -> List[str]:
    """Strip example sentences and the user cleanup pattern from every sense."""

    extra = re.compile(extra_pattern) if extra_pattern else None
    cleaned: List[str] = []
    for sense in senses:
        value = str(sense)
        for pattern in DEFAULT_CLEANUP_PATTERNS:
            value = pattern.sub("", value)
        if extra is not None:
            value = extra.sub("", value)
        value = value.strip()
        if value:
            cleaned.append(value)
    return cleaned


def _split_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    return [part for part in _LIST_SPLIT_PATTERN.split(str(value).strip()) if part]


def _parse_info(payload: Any, path: Path) -> tuple[str, Optional[Language]]:
    if not isinstance(payload, Mapping):
        return "", None
    title = str(payload.get(DICT_TITLE_KEY) or "").strip()
    languages = payload.get(DICT_LANGUAGES_KEY)
    language: Optional[Language] = None
    if isinstance(languages, Mapping) and languages.get(DICT_LANGUAGES_FROM_KEY):
        try:
            language = Language.parse(str(languages[DICT_LANGUAGES_FROM_KEY]))
        except ValueError as exc:
            raise DictionaryLoadError(f"{path}: {exc}") from exc
    return title, language


def _parse_entry(
    key: str,
    payload: Mapping[str, Any],
    cleanup_pattern: Optional[str],
) -> Optional[DictionaryEntry]:
    if SENSE_KEY in payload:
        raw_senses = [payload[SENSE_KEY]]
    elif SENSES_KEY in payload:
        raw_senses = list(payload[SENSES_KEY] or [])
    else:
        logger.error("Jiji dictionary entry %s has no sense defined.", key)
        return None
    senses = clean_senses(raw_senses, cleanup_pattern)
    lemmas = _split_list(key)
    if not senses or not lemmas:
        logger.warning("Jiji dictionary entry %s is empty after cleanup; skipped.", key)
        return None
    return DictionaryEntry(
        lemmas=tuple(lemmas),
        senses=tuple(senses),
        pronunciations=tuple(_split_list(payload.get(PRONUNCIATION_KEY))),
        tags=frozenset(_split_list(payload.get(TAGS_KEY))),
    )


def build_index(
    document: Mapping[str, Any],
    *,
    source: Path,
    cleanup_pattern: Optional[str] = None,
) -> DictionaryIndex:
    """Build an index from an already parsed jiji document."""

    title, language = _parse_info(document.get(DICT_INFO_KEY), source)
    index = DictionaryIndex(title=title or source.stem, language=language)
    for key, payload in document.items():
        if key == DICT_INFO_KEY:
            continue
        if not isinstance(payload, Mapping):
            logger.error("Jiji dictionary entry %s is not a mapping; skipped.", key)
            continue
        entry = _parse_entry(str(key), payload, cleanup_pattern)
        if entry is not None:
            index.add_entry(entry)
    return index


def load_jiji_dictionary(
    path: Path | str,
    *,
    cleanup_pattern: Optional[str] = None,
) -> DictionaryIndex:
    """Load a YAML jiji dictionary file into a :class:`DictionaryIndex`."""

    dictionary_path = Path(path)
    try:
        with dictionary_path.open("r", encoding="utf-8-sig") as handle:
            document = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise DictionaryLoadError(f"Dictionary file not found: {dictionary_path}") from exc
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise DictionaryLoadError(f"Problem reading dictionary {dictionary_path}: {exc}") from exc

    if not isinstance(document, Mapping):
        raise DictionaryLoadError(f"Dictionary {dictionary_path} must contain a YAML mapping")

    index = build_index(document, source=dictionary_path, cleanup_pattern=cleanup_pattern)
    logger.info(
        "Using %s dictionary '%s' (%d entries)",
        index.language.value if index.language else "unknown-language",
        index.title,
        len(index),
        extra={"event": "dictionary.loaded"},
    )
    return index


def load_language_tags(index: DictionaryIndex, directory: Path | str) -> Dict[str, int]:
    """Tag entries listed in ``<tag>.txt`` files (one lemma per line)."""

    tags_dir = Path(directory)
    if not tags_dir.is_dir():
        logger.debug("No language tags directory at %s", tags_dir)
        return {}
    applied: Dict[str, int] = {}
    for tag_file in sorted(tags_dir.glob("*.txt")):
        try:
            lemmas = [line for line in tag_file.read_text(encoding="utf-8").splitlines() if line.strip()]
        except (OSError, UnicodeDecodeError) as exc:
            raise DictionaryLoadError(f"Error while loading language tags {tag_file}") from exc
        applied[tag_file.stem] = index.apply_tag(tag_file.stem, lemmas)
    return applied


__all__ = [
    "DEFAULT_CLEANUP_PATTERNS",
    "DictionaryIndex",
    "build_index",
    "clean_senses",
    "load_jiji_dictionary",
    "load_language_tags",
]
