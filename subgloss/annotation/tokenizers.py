"""Tokenizers turning caption text into tagged :class:`TextToken` lists.

The engine never analyses text itself; it only consumes what a tokenizer hands
over. :class:`FugashiTokenizer` wraps MeCab with UniDic for Japanese and maps
UniDic features to universal part-of-speech tags following
https://universaldependencies.org/ja/overview/morphology.html.
:class:`RegexTokenizer` is a plain word splitter for everything else.
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence

import regex

from subgloss.language import Language, word_separator

from .common import logger
from .errors import TokenizerUnavailable
from .models import PosTag, TextToken


class Tokenizer(Protocol):
    language: Language

    def parse(self, text: str) -> List[TextToken]: ...


_WORD_TOKEN_PATTERN = regex.compile(
    r"(?P<word>\p{L}[\p{L}\p{M}'’\-]*)"
    r"|(?P<number>\p{N}+(?:[.,]\p{N}+)*)"
    r"|(?P<punct>\p{P}+)"
    r"|(?P<symbol>\p{S}+)"
    r"|(?P<space>\s+)"
)
_CHARACTER_TOKEN_PATTERN = regex.compile(
    r"(?P<word>[\p{Han}\p{Hiragana}\p{Katakana}ー])"
    r"|(?P<latin>\p{L}[\p{L}\p{M}]*)"
    r"|(?P<number>\p{N}+)"
    r"|(?P<punct>\p{P})"
    r"|(?P<symbol>\p{S})"
    r"|(?P<space>\s+)"
)

_GROUP_POS = {
    "word": PosTag.UNKNOWN,
    "latin": PosTag.UNKNOWN,
    "number": PosTag.NUM,
    "punct": PosTag.PUNCT,
    "symbol": PosTag.SYM,
    "space": PosTag.X,
}


class RegexTokenizer:
    """Split text into words, numbers and punctuation.

    For languages written with spaces the spaces are dropped. For the others
    CJK text is cut per character (the matcher regroups characters into
    dictionary words) and spaces are kept as ``X`` tokens so a multi-syllable
    span still joins back to its spelling.
    """

    def __init__(self, language: Language) -> None:
        self.language = language
        self.word_separator = word_separator(language)
        self._pattern = (
            _CHARACTER_TOKEN_PATTERN if self.word_separator == "" else _WORD_TOKEN_PATTERN
        )

    def parse(self, text: str) -> List[TextToken]:
        tokens: List[TextToken] = []
        for match in self._pattern.finditer(text):
            group = match.lastgroup or "symbol"
            if group == "space" and self.word_separator:
                continue
            tokens.append(TextToken(text_form=match.group(), part_of_speech=_GROUP_POS[group]))
        logger.debug("Parsed %r into %d tokens", text, len(tokens))
        return tokens


_MISSING_FORM = "*"
_PUNCTUATION_TOKENS = frozenset({"｡", "…｡", "｢", "｣", "、", "。", "（", "）", "."})
_DETERMINER_RENTAISHI = frozenset({"その", "どの", "この"})
_NOUN_CONJUNCTIONS = frozenset({"と", "か"})

_POS2_TAGS = {
    "数詞": PosTag.NUM,
    "固有名詞": PosTag.PROPN,
    "副助詞": PosTag.PART,
    "終助詞": PosTag.PART,
    "接続助詞": PosTag.SCONJ,
    "準体助詞": PosTag.SCONJ,
    "普通名詞": PosTag.NOUN,
}
_POS1_TAGS = {
    "形状詞": PosTag.ADJ,
    "副詞": PosTag.ADV,
    "感動詞": PosTag.INTJ,
    "接頭辞": PosTag.NOUN,
    "接尾辞": PosTag.NOUN,
    "助動詞": PosTag.AUX,
    "接続詞": PosTag.CCONJ,
    "代名詞": PosTag.PRON,
    "補助記号": PosTag.SYM,
    "空白": PosTag.X,
}


def _feature(word: Any, name: str) -> Optional[str]:
    value = getattr(word.feature, name, None)
    if not value or value == _MISSING_FORM:
        return None
    return str(value)


def unidic_pos_tag(pos1: str, pos2: str, text: str, previous_pos1: Optional[str]) -> PosTag:
    """Map UniDic ``pos1``/``pos2`` features to a universal tag."""

    if text in _PUNCTUATION_TOKENS:
        return PosTag.PUNCT
    if pos2 == "格助詞":
        return PosTag.CCONJ if text in _NOUN_CONJUNCTIONS else PosTag.ADP
    if pos2 in _POS2_TAGS:
        return _POS2_TAGS[pos2]
    if pos1 == "連体詞":
        return PosTag.DET if text in _DETERMINER_RENTAISHI else PosTag.ADJ
    if pos1 == "形容詞":
        # Auxiliary adjective after another adjective (美し-くない).
        if pos2 == "非自立可能" and previous_pos1 in ("形容詞", "形状詞"):
            return PosTag.AUX
        return PosTag.ADJ
    if pos1 == "動詞":
        if pos2 == "非自立可能" and previous_pos1 == "動詞":
            return PosTag.AUX
        return PosTag.VERB
    return _POS1_TAGS.get(pos1, PosTag.UNKNOWN)


class FugashiTokenizer:
    """Japanese tokenizer backed by ``fugashi`` and a UniDic dictionary."""

    language = Language.JAPANESE

    def __init__(self, tagger_args: str = "") -> None:
        try:
            import fugashi
        except ImportError as exc:
            raise TokenizerUnavailable(
                "Japanese parsing needs fugashi and a UniDic dictionary; "
                "install them with `pip install subgloss[japanese]`."
            ) from exc
        try:
            self._tagger = fugashi.Tagger(tagger_args)
        except RuntimeError as exc:
            raise TokenizerUnavailable(f"Could not start the MeCab tagger: {exc}") from exc
        logger.debug("Parsing Japanese language using fugashi with UniDic")

    def parse(self, text: str) -> List[TextToken]:
        words: Sequence[Any] = self._tagger(text)
        tokens: List[TextToken] = []
        previous_pos1: Optional[str] = None
        for word in words:
            surface = word.surface
            if not surface:
                continue
            pos1 = _feature(word, "pos1") or ""
            pos2 = _feature(word, "pos2") or ""
            tokens.append(
                TextToken(
                    text_form=surface,
                    part_of_speech=unidic_pos_tag(pos1, pos2, surface, previous_pos1),
                    first_canonical_form=_feature(word, "orthBase") or "",
                    second_canonical_form=_feature(word, "lemma") or "",
                )
            )
            previous_pos1 = pos1
        logger.debug(
            "Parsed %r into %s",
            text,
            " | ".join(f"{token.text_form}/{token.part_of_speech.value}" for token in tokens),
        )
        return tokens


def tokenizer_for_language(language: Language) -> Tokenizer:
    """Return the tokenizer used for ``language``."""

    if language is Language.JAPANESE:
        return FugashiTokenizer()
    return RegexTokenizer(language)


__all__ = [
    "FugashiTokenizer",
    "RegexTokenizer",
    "Tokenizer",
    "tokenizer_for_language",
    "unidic_pos_tag",
]
