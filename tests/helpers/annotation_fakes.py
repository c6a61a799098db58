"""Small builders shared by the annotation tests."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from subgloss.annotation.dictionary import DictionaryIndex
from subgloss.annotation.models import PosTag, TextToken
from subgloss.language import Language


def tok(
    text: str,
    pos: PosTag | str = PosTag.UNKNOWN,
    first: str = "",
    second: str = "",
) -> TextToken:
    return TextToken(
        text_form=text,
        part_of_speech=PosTag.parse(pos),
        first_canonical_form=first,
        second_canonical_form=second,
    )


class FakeTokenizer:
    """Return scripted tokens per text, or a whitespace split for anything else."""

    def __init__(
        self,
        script: Optional[Mapping[str, Sequence[TextToken]]] = None,
        *,
        language: Language = Language.ENGLISH,
        failing: Iterable[str] = (),
    ) -> None:
        self.language = language
        self.script: Dict[str, List[TextToken]] = {
            key: list(value) for key, value in (script or {}).items()
        }
        self.failing = set(failing)
        self.calls: List[str] = []

    def parse(self, text: str) -> List[TextToken]:
        self.calls.append(text)
        if text in self.failing:
            # An empty text form breaks the token contract.
            return [TextToken(text_form="")]
        if text in self.script:
            return list(self.script[text])
        return [tok(word) for word in text.split()]


def build_index(
    entries: Iterable[Mapping[str, object]],
    *,
    title: str = "Test dictionary",
    language: Optional[Language] = None,
) -> DictionaryIndex:
    index = DictionaryIndex(title=title, language=language)
    for entry in entries:
        index.add(
            lemmas=entry["lemmas"],  # type: ignore[arg-type]
            senses=entry["senses"],  # type: ignore[arg-type]
            pronunciations=entry.get("pronunciations", ()),  # type: ignore[arg-type]
            tags=entry.get("tags", ()),  # type: ignore[arg-type]
        )
    return index
