import pytest

from subgloss.annotation.common import NOT_A_WORD_POS
from subgloss.annotation.langrules import JapaneseLangRules
from subgloss.annotation.matcher import DictionaryMatcher, LookupOptions
from subgloss.annotation.models import PosTag
from tests.helpers.annotation_fakes import build_index, tok

pytestmark = pytest.mark.annotation


def test_inflected_verb_matches_its_lemma() -> None:
    index = build_index([{"lemmas": ["走る"], "senses": ["to run"]}])
    tokens = [tok("走っ", PosTag.VERB, "走る"), tok("た", PosTag.AUX)]

    matches = DictionaryMatcher(index, "").match(tokens)

    assert len(matches) == 1
    assert matches[0].tokens == (tokens[0],)
    assert matches[0].first_canonical_form == "走る"


def test_longest_span_wins_over_shorter_prefix() -> None:
    index = build_index(
        [
            {"lemmas": ["make"], "senses": ["to build"]},
            {"lemmas": ["make it up"], "senses": ["to invent"]},
        ]
    )
    tokens = [
        tok("He", PosTag.PRON),
        tok("made", PosTag.VERB, "make"),
        tok("it", PosTag.PRON),
        tok("up", PosTag.ADP),
    ]

    matches = DictionaryMatcher(index, " ").match(tokens)

    assert [match.text_form for match in matches] == ["made it up"]
    assert matches[0].entries[0].senses == ("to invent",)


def test_matches_are_ordered_and_do_not_overlap() -> None:
    index = build_index(
        [
            {"lemmas": ["new"], "senses": ["not old"]},
            {"lemmas": ["new york"], "senses": ["a city"]},
            {"lemmas": ["city"], "senses": ["a town"]},
        ]
    )
    tokens = [tok("New"), tok("York"), tok("is"), tok("a"), tok("new"), tok("city")]

    matches = DictionaryMatcher(index, " ").match(tokens)

    assert [match.text_form for match in matches] == ["New York", "new", "city"]
    covered = [token for match in matches for token in match.tokens]
    assert covered == [tokens[0], tokens[1], tokens[4], tokens[5]]


def test_non_word_tokens_never_start_a_match() -> None:
    index = build_index(
        [
            {"lemmas": ["3"], "senses": ["three"]},
            {"lemmas": ["!"], "senses": ["bang"]},
        ]
    )
    tokens = [tok("3", PosTag.NUM), tok("!", PosTag.PUNCT), tok(" ", PosTag.X)]

    assert DictionaryMatcher(index, " ").match(tokens) == []


def test_lookup_tries_first_canonical_then_text_then_second_canonical() -> None:
    index = build_index(
        [
            {"lemmas": ["by-text"], "senses": ["text form"]},
            {"lemmas": ["by-first"], "senses": ["first canonical"]},
            {"lemmas": ["by-second"], "senses": ["second canonical"]},
        ]
    )
    matcher = DictionaryMatcher(index, " ")

    both = matcher.match([tok("By-Text", first="by-first", second="by-second")])
    text_only = matcher.match([tok("By-Text", first="nothing", second="by-second")])
    second_only = matcher.match([tok("unknown", first="nothing", second="by-second")])

    assert both[0].entries[0].senses == ("first canonical",)
    assert text_only[0].entries[0].senses == ("text form",)
    assert second_only[0].entries[0].senses == ("second canonical",)


def test_every_entry_under_the_key_is_kept() -> None:
    index = build_index(
        [
            {"lemmas": ["bank"], "senses": ["money place"], "tags": ["freq1"]},
            {"lemmas": ["bank"], "senses": ["river side"]},
        ]
    )

    (match,) = DictionaryMatcher(index, " ").match([tok("bank", PosTag.NOUN)])

    assert [entry.senses for entry in match.entries] == [("money place",), ("river side",)]


def test_pronunciation_fallback_is_opt_in() -> None:
    index = build_index([{"lemmas": ["橋"], "senses": ["bridge"], "pronunciations": ["はし"]}])
    tokens = [tok("はし", PosTag.NOUN)]

    assert DictionaryMatcher(index, "").match(tokens) == []

    enabled = DictionaryMatcher(index, "", lookup=LookupOptions(pronunciation_fallback=True))
    (match,) = enabled.match(tokens)
    assert match.entries[0].lemmas == ("橋",)


def test_pronunciation_fallback_respects_minimum_length() -> None:
    index = build_index([{"lemmas": ["橋"], "senses": ["bridge"], "pronunciations": ["はし"]}])
    lookup = LookupOptions(pronunciation_fallback=True, pronunciation_min_length=3)

    assert DictionaryMatcher(index, "", lookup=lookup).match([tok("はし", PosTag.NOUN)]) == []


def test_lookup_options_reject_zero_minimum_length() -> None:
    with pytest.raises(ValueError):
        LookupOptions(pronunciation_min_length=0)


def test_rejected_match_resumes_at_next_token() -> None:
    index = build_index(
        [
            {"lemmas": ["あの"], "senses": ["that"]},
            {"lemmas": ["の駅"], "senses": ["of the station"]},
        ]
    )
    tokens = [tok("あ", PosTag.PRON), tok("の", PosTag.PART), tok("駅", PosTag.NOUN)]

    matches = DictionaryMatcher(index, "", rules=JapaneseLangRules()).match(tokens)

    assert [match.text_form for match in matches] == ["の駅"]


def test_lookup_span_of_nothing_is_none() -> None:
    assert DictionaryMatcher(build_index([]), " ").lookup_span([]) is None


COVERAGE_INDEX = [
    {"lemmas": ["new"], "senses": ["not old"]},
    {"lemmas": ["new york"], "senses": ["a city"]},
    {"lemmas": ["york city"], "senses": ["a football club"]},
    {"lemmas": ["city"], "senses": ["a town"]},
    {"lemmas": ["big apple"], "senses": ["new york"]},
    {"lemmas": ["3"], "senses": ["three"]},
]


def _words(*items):
    return [tok(item) if isinstance(item, str) else tok(*item) for item in items]


@pytest.mark.parametrize(
    "tokens",
    [
        [],
        _words("New", "York", "city"),
        _words("york", "city", "new", "york"),
        _words("the", "big", "apple", (",", PosTag.PUNCT), ("3", PosTag.NUM), "new"),
        _words(("!", PosTag.PUNCT), ("?", PosTag.PUNCT), ("#", PosTag.SYM)),
        _words("nothing", "known", "here"),
        _words("new", (",", PosTag.PUNCT), "york", "new"),
        _words("city", "city", ("x", PosTag.X), "big", "apple", "big"),
    ],
)
def test_tokens_are_covered_exactly_once(tokens) -> None:
    matcher = DictionaryMatcher(build_index(COVERAGE_INDEX), " ")

    matches = matcher.match(tokens)

    pending = list(matches)
    kinds = []
    position = 0
    while position < len(tokens):
        if pending and pending[0].tokens[0] is tokens[position]:
            span = pending.pop(0).tokens
            assert all(a is b for a, b in zip(span, tokens[position:position + len(span)]))
            kinds.extend(["matched"] * len(span))
            position += len(span)
        elif tokens[position].part_of_speech in NOT_A_WORD_POS:
            kinds.append("not-a-word")
            position += 1
        else:
            assert matcher.longest_match(tokens[position:]) is None
            kinds.append("unmatched")
            position += 1

    assert pending == []
    assert len(kinds) == len(tokens)
