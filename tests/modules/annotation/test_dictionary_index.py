import textwrap
from pathlib import Path

import pytest

from subgloss.annotation.dictionary import (
    DictionaryIndex,
    clean_senses,
    load_jiji_dictionary,
    load_language_tags,
)
from subgloss.annotation.errors import DictionaryLoadError
from subgloss.language import Language

pytestmark = pytest.mark.annotation


def _write_dictionary(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "dict.yaml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_load_jiji_dictionary_reads_entries_and_metadata(tmp_path: Path) -> None:
    path = _write_dictionary(
        tmp_path,
        """
        _about_this_dictionary:
          title: Tiny JA-EN
          languages:
            from: ja
            to: en
        走る:
          sense: to run
          pronunciation: はしる
          tags: v5r, freq2
        橋, 箸:
          senses:
            - bridge
            - chopsticks 【例】箸で食べる
        """,
    )

    index = load_jiji_dictionary(path)

    assert index.title == "Tiny JA-EN"
    assert index.language is Language.JAPANESE
    assert len(index) == 2

    (run,) = index.lookup_by_lemma("走る")
    assert run.senses == ("to run",)
    assert run.pronunciations == ("はしる",)
    assert run.tags == frozenset({"v5r", "freq2"})
    assert run.frequency == 2
    assert index.lookup_by_pronunciation("はしる") == [run]

    (bridge,) = index.lookup_by_lemma("箸")
    assert bridge.lemmas == ("橋", "箸")
    assert bridge.senses == ("bridge", "chopsticks")


def test_load_jiji_dictionary_applies_cleanup_pattern(tmp_path: Path) -> None:
    path = _write_dictionary(
        tmp_path,
        """
        bank:
          senses:
            - "money place (finance)"
            - "(finance)"
        """,
    )

    index = load_jiji_dictionary(path, cleanup_pattern=r"\s*\(finance\)")

    (entry,) = index.lookup_by_lemma("bank")
    assert entry.senses == ("money place",)


def test_load_jiji_dictionary_skips_entries_without_sense(tmp_path: Path) -> None:
    path = _write_dictionary(
        tmp_path,
        """
        bank:
          pronunciation: baŋk
        river:
          sense: flowing water
        """,
    )

    index = load_jiji_dictionary(path)

    assert index.lookup_by_lemma("bank") == []
    assert len(index) == 1
    assert index.title == "dict"
    assert index.language is None


def test_load_jiji_dictionary_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(DictionaryLoadError):
        load_jiji_dictionary(tmp_path / "missing.yaml")


def test_load_jiji_dictionary_rejects_non_mapping(tmp_path: Path) -> None:
    path = _write_dictionary(tmp_path, "- just\n- a list\n")

    with pytest.raises(DictionaryLoadError):
        load_jiji_dictionary(path)


def test_load_jiji_dictionary_rejects_unknown_language(tmp_path: Path) -> None:
    path = _write_dictionary(
        tmp_path,
        """
        _about_this_dictionary:
          languages:
            from: klingon
        """,
    )

    with pytest.raises(DictionaryLoadError):
        load_jiji_dictionary(path)


def test_lookup_returns_every_entry_sharing_a_key() -> None:
    index = DictionaryIndex()
    first = index.add(["bank"], ["money place"], tags=["freq1"])
    second = index.add(["bank"], ["river side"])

    assert index.lookup_by_lemma("bank") == [first, second]
    assert index.lookup_by_lemma("banks") == []


def test_lookup_results_do_not_leak_internal_state() -> None:
    index = DictionaryIndex()
    index.add(["bank"], ["money place"])

    index.lookup_by_lemma("bank").clear()

    assert len(index.lookup_by_lemma("bank")) == 1


def test_load_language_tags_tags_listed_lemmas(tmp_path: Path) -> None:
    index = DictionaryIndex()
    index.add(["走る"], ["to run"], pronunciations=["はしる"])
    index.add(["橋"], ["bridge"])
    tags_dir = tmp_path / "tags"
    tags_dir.mkdir()
    (tags_dir / "jlpt5.txt").write_text("走る\n\n知らない\n", encoding="utf-8")

    applied = load_language_tags(index, tags_dir)

    assert applied == {"jlpt5": 1}
    assert "jlpt5" in index.lookup_by_lemma("走る")[0].tags
    assert "jlpt5" in index.lookup_by_pronunciation("はしる")[0].tags
    assert "jlpt5" not in index.lookup_by_lemma("橋")[0].tags


def test_load_language_tags_without_directory_is_a_no_op(tmp_path: Path) -> None:
    assert load_language_tags(DictionaryIndex(), tmp_path / "absent") == {}


def test_clean_senses_drops_examples_and_blank_senses() -> None:
    assert clean_senses(["to run (用例) 走って行く", "  ", "to dash"]) == ["to run", "to dash"]
