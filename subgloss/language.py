"""Supported source languages and their word separators."""

from __future__ import annotations

from enum import Enum
from typing import Dict


class Language(str, Enum):
    """Languages a dictionary or tokenizer can declare as its source."""

    ANCIENT_GREEK = "Ancient_Greek"
    ARABIC = "Arabic"
    BASQUE = "Basque"
    BELARUSIAN = "Belarusian"
    BULGARIAN = "Bulgarian"
    CATALAN = "Catalan"
    CHINESE = "Chinese"
    COPTIC = "Coptic"
    CROATIAN = "Croatian"
    CZECH = "Czech"
    DANISH = "Danish"
    DUTCH = "Dutch"
    ENGLISH = "English"
    ESTONIAN = "Estonian"
    FINNISH = "Finnish"
    FRENCH = "French"
    GALICIAN = "Galician"
    GERMAN = "German"
    GOTHIC = "Gothic"
    GREEK = "Greek"
    HEBREW = "Hebrew"
    HINDI = "Hindi"
    HUNGARIAN = "Hungarian"
    INDONESIAN = "Indonesian"
    IRISH = "Irish"
    ITALIAN = "Italian"
    JAPANESE = "Japanese"
    KAZAKH = "Kazakh"
    KOREAN = "Korean"
    LATIN = "Latin"
    LATVIAN = "Latvian"
    LITHUANIAN = "Lithuanian"
    NORWEGIAN = "Norwegian"
    OLD_CHURCH_SLAVONIC = "Old_Church_Slavonic"
    PERSIAN = "Persian"
    POLISH = "Polish"
    PORTUGUESE = "Portuguese"
    ROMANIAN = "Romanian"
    RUSSIAN = "Russian"
    SANSKRIT = "Sanskrit"
    SLOVAK = "Slovak"
    SLOVENIAN = "Slovenian"
    SPANISH = "Spanish"
    SWEDISH = "Swedish"
    TAMIL = "Tamil"
    TURKISH = "Turkish"
    UKRAINIAN = "Ukrainian"
    URDU = "Urdu"
    UYGHUR = "Uyghur"
    VIETNAMESE = "Vietnamese"

    @classmethod
    def parse(cls, value: "str | Language") -> "Language":
        """Resolve a language name or ISO-639-1 code (case-insensitive)."""

        if isinstance(value, Language):
            return value
        normalized = _normalize_language_label(value)
        if not normalized:
            raise ValueError("Language must be a non-empty string")
        if normalized in ISO_639_LANGUAGES:
            return ISO_639_LANGUAGES[normalized]
        for member in cls:
            if _normalize_language_label(member.value) == normalized:
                return member
        supported = ", ".join(member.value for member in cls)
        raise ValueError(f"Unsupported language {value!r}, should be one of: {supported}")


def _normalize_language_label(value: str) -> str:
    normalized = (value or "").strip().casefold()
    normalized = normalized.replace("-", "").replace("_", "").replace(" ", "")
    return normalized


ISO_639_LANGUAGES: Dict[str, Language] = {
    "ar": Language.ARABIC,
    "eu": Language.BASQUE,
    "be": Language.BELARUSIAN,
    "bg": Language.BULGARIAN,
    "ca": Language.CATALAN,
    "zh": Language.CHINESE,
    "hr": Language.CROATIAN,
    "cs": Language.CZECH,
    "da": Language.DANISH,
    "nl": Language.DUTCH,
    "en": Language.ENGLISH,
    "et": Language.ESTONIAN,
    "fi": Language.FINNISH,
    "fr": Language.FRENCH,
    "gl": Language.GALICIAN,
    "de": Language.GERMAN,
    "el": Language.GREEK,
    "he": Language.HEBREW,
    "hi": Language.HINDI,
    "hu": Language.HUNGARIAN,
    "id": Language.INDONESIAN,
    "ga": Language.IRISH,
    "it": Language.ITALIAN,
    "ja": Language.JAPANESE,
    "kk": Language.KAZAKH,
    "ko": Language.KOREAN,
    "la": Language.LATIN,
    "lv": Language.LATVIAN,
    "lt": Language.LITHUANIAN,
    "no": Language.NORWEGIAN,
    "cu": Language.OLD_CHURCH_SLAVONIC,
    "fa": Language.PERSIAN,
    "pl": Language.POLISH,
    "pt": Language.PORTUGUESE,
    "ro": Language.ROMANIAN,
    "ru": Language.RUSSIAN,
    "sa": Language.SANSKRIT,
    "sk": Language.SLOVAK,
    "sl": Language.SLOVENIAN,
    "es": Language.SPANISH,
    "sv": Language.SWEDISH,
    "ta": Language.TAMIL,
    "tr": Language.TURKISH,
    "uk": Language.UKRAINIAN,
    "ur": Language.URDU,
    "ug": Language.UYGHUR,
    "vi": Language.VIETNAMESE,
}

LANGUAGES_WITHOUT_SPACES: frozenset[Language] = frozenset(
    {Language.JAPANESE, Language.CHINESE, Language.VIETNAMESE}
)


def word_separator(language: Language) -> str:
    """Return the string joining token forms before a dictionary lookup."""

    return "" if language in LANGUAGES_WITHOUT_SPACES else " "


__all__ = [
    "ISO_639_LANGUAGES",
    "LANGUAGES_WITHOUT_SPACES",
    "Language",
    "word_separator",
]
