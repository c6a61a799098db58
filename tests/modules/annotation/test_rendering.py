import re

import pytest

from subgloss.annotation.errors import FrequencyGlyphError
from subgloss.annotation.models import DictionaryEntry, DictionaryMatch, PosTag
from subgloss.annotation.rendering import (
    AnnotationRenderer,
    AssStyler,
    CaptionColorState,
    RenderedCaption,
    frequency_glyph,
)
from tests.helpers.annotation_fakes import tok

pytestmark = pytest.mark.annotation

WHITE = "{\\c&HFFFFFF&}"
RESET = "{\\r}"
_TAG_PATTERN = re.compile(r"\{[^}]*\}")


def _entry(lemmas, senses, pronunciations=(), tags=()) -> DictionaryEntry:
    return DictionaryEntry(
        lemmas=tuple(lemmas),
        senses=tuple(senses),
        pronunciations=tuple(pronunciations),
        tags=frozenset(tags),
    )


def _render(matches, palette=("#FFFFFF",), **kwargs) -> RenderedCaption:
    return AnnotationRenderer(**kwargs).render(matches, CaptionColorState(palette))


def test_frequency_glyph_covers_one_to_twenty() -> None:
    assert frequency_glyph(1) == "①"
    assert frequency_glyph(2) == "②"
    assert frequency_glyph(20) == "⑳"


@pytest.mark.parametrize("value", [0, 21, -3, True, "3"])
def test_frequency_glyph_rejects_out_of_range(value) -> None:
    with pytest.raises(FrequencyGlyphError):
        frequency_glyph(value)


def test_styler_wraps_text_in_ass_override_tags() -> None:
    styler = AssStyler()

    assert styler.color("word", "#112233") == "{\\c&H332211&}word{\\r}"
    assert styler.bold("①") == "{\\b1}①{\\r}"


def test_inflected_verb_line_reads_lemma_then_sense() -> None:
    match = DictionaryMatch(
        (tok("走っ", PosTag.VERB, "走る"),), (_entry(["走る"], ["to run"]),), ""
    )

    rendered = _render([match])

    assert len(rendered.lines) == 1
    assert _TAG_PATTERN.sub("", rendered.lines[0]) == "★ 走る to run"
    assert rendered.lines[0] == f"★ {WHITE}走る{RESET} to run"


def test_line_shows_frequency_glyph_and_joins_senses() -> None:
    match = DictionaryMatch(
        (tok("bank"),), (_entry(["bank"], ["money place", "river side"], tags=["freq2"]),)
    )

    rendered = _render([match])

    assert rendered.lines == [f"★ {WHITE}bank{RESET} {{\\b1}}②{RESET} money place --- river side"]


def test_frequency_without_glyph_falls_back_to_number() -> None:
    match = DictionaryMatch((tok("bank"),), (_entry(["bank"], ["money place"], tags=["freq25"]),))

    rendered = _render([match])

    assert rendered.lines == [f"★ {WHITE}bank{RESET} {{\\b1}}25{RESET} money place"]


def test_pronunciation_is_shown_after_lemma() -> None:
    match = DictionaryMatch(
        (tok("橋", PosTag.NOUN),), (_entry(["橋"], ["bridge"], pronunciations=["はし"]),), ""
    )

    rendered = _render([match])

    assert rendered.lines == [f"★ {WHITE}橋{RESET} [はし]  bridge"]


def test_pronunciation_is_coloured_when_it_carried_the_match() -> None:
    match = DictionaryMatch(
        (tok("はし", PosTag.NOUN),), (_entry(["橋"], ["bridge"], pronunciations=["はし"]),), ""
    )

    rendered = _render([match])

    assert rendered.lines == [f"★ {WHITE} [はし] {RESET} bridge"]


def test_pronunciation_is_omitted_when_already_a_lemma() -> None:
    match = DictionaryMatch(
        (tok("はし", PosTag.NOUN),),
        (_entry(["はし", "橋"], ["bridge"], pronunciations=["はし"]),),
        "",
    )

    rendered = _render([match])

    assert rendered.lines == [f"★ {WHITE}はし{RESET} bridge"]


def test_other_lemmas_are_shown_on_request() -> None:
    match = DictionaryMatch((tok("run"),), (_entry(["run", "sprint"], ["to move fast"]),))

    hidden = _render([match])
    shown = _render([match], show_other_lemmas=True)

    assert hidden.lines == [f"★ {WHITE}run{RESET} to move fast"]
    assert shown.lines == [f"★ {WHITE}run{RESET}, sprint to move fast"]


def test_one_line_per_entry_and_annotation_joined_with_ass_breaks() -> None:
    match = DictionaryMatch(
        (tok("bank"),),
        (_entry(["bank"], ["money place"]), _entry(["bank"], ["river side"])),
    )

    rendered = _render([match])

    assert len(rendered.lines) == 2
    assert rendered.annotation == "\\N".join(rendered.lines)
    assert len(rendered.highlights) == 1


def test_repeated_word_is_annotated_once() -> None:
    entry = _entry(["cat"], ["small feline"])
    first = DictionaryMatch((tok("cat"),), (entry,))
    second = DictionaryMatch((tok("cat"),), (entry,))

    rendered = _render([first, second])

    assert len(rendered.lines) == 1
    assert [instruction.text for instruction in rendered.highlights] == ["cat"]


def test_colours_rotate_per_annotated_match() -> None:
    matches = [
        DictionaryMatch((tok(word),), (_entry([word], [f"{word} sense"]),))
        for word in ("cat", "dog", "cow")
    ]

    rendered = _render(matches, palette=("#FF0000", "#00FF00"))

    assert [instruction.color for instruction in rendered.highlights] == [
        "#FF0000",
        "#00FF00",
        "#FF0000",
    ]
    assert rendered.lines[1].startswith("★ {\\c&H00FF00&}dog")


def test_match_without_entries_does_not_consume_a_colour() -> None:
    empty = DictionaryMatch((tok("ghost"),), ())
    cat = DictionaryMatch((tok("cat"),), (_entry(["cat"], ["small feline"]),))

    rendered = _render([empty, cat], palette=("#FF0000", "#00FF00"))

    assert [instruction.color for instruction in rendered.highlights] == ["#FF0000"]
    assert not _render([empty])


def test_rendering_is_deterministic() -> None:
    matches = [
        DictionaryMatch((tok(word),), (_entry([word], [f"{word} sense"], tags=["freq3"]),))
        for word in ("cat", "dog")
    ]

    first = _render(matches, palette=("#FF0000", "#00FF00"))
    second = _render(matches, palette=("#FF0000", "#00FF00"))

    assert first.lines == second.lines
    assert first.highlights == second.highlights


def test_colour_state_validates_palette() -> None:
    with pytest.raises(ValueError):
        CaptionColorState([])
    with pytest.raises(ValueError):
        CaptionColorState(["red"])

    state = CaptionColorState(["ff0000", "#00ff00"])
    assert state.current_color == "#FF0000"
    state.commit("cat")
    assert state.is_annotated("cat")
    assert state.current_color == "#00FF00"
