import textwrap
from pathlib import Path

import pytest

from subgloss.subtitles import (
    SubtitleCue,
    SubtitleDocument,
    SubtitleProcessingError,
    is_annotated_file,
    load_subtitle_document,
)
from subgloss.subtitles.common import ANNOTATION_SIGNATURE
from subgloss.subtitles.io import _timestamp_to_seconds
from subgloss.subtitles.text import collapse_dots, replace_line_breaks, strip_markup

pytestmark = pytest.mark.subtitles


def _write(tmp_path: Path, name: str, body: str, encoding: str = "utf-8") -> Path:
    path = tmp_path / name
    path.write_text(textwrap.dedent(body).lstrip(), encoding=encoding)
    return path


def test_load_srt_document(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "episode.srt",
        """
        1
        00:00:01,000 --> 00:00:02,500
        Hello there
        General Kenobi

        2
        00:00:03,000 --> 00:00:04,000
        <i>Second</i> caption
        """,
    )

    document = load_subtitle_document(path)

    assert document.signature is None
    captions = [cue for _, cue in document.captions()]
    assert len(document) == 2
    assert captions[0].lines == ["Hello there", "General Kenobi"]
    assert captions[0].start == pytest.approx(1.0)
    assert captions[0].end == pytest.approx(2.5)
    assert captions[1].as_text() == "<i>Second</i> caption"


def test_load_srt_with_bom_and_missing_index(tmp_path: Path) -> None:
    path = tmp_path / "bom.srt"
    path.write_bytes("\ufeff00:00:01,000 --> 00:00:02,000\nNo index\n".encode("utf-8"))

    document = load_subtitle_document(path)

    ((key, cue),) = list(document.captions())
    assert key == 1000
    assert cue.index == 1
    assert cue.lines == ["No index"]


def test_load_srt_skips_blocks_without_timing(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "broken.srt",
        """
        1
        not a timing line
        text

        2
        00:00:05,000 --> 00:00:06,000
        kept
        """,
    )

    document = load_subtitle_document(path)

    assert [cue.lines for _, cue in document.captions()] == [["kept"]]


def test_load_ass_document_keeps_commas_and_breaks(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "episode.ass",
        """
        [Script Info]
        Title: Episode 1

        [Events]
        Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
        Comment: 0,0:00:00.00,0:00:01.00,Default,,0,0,0,,ignored
        Dialogue: 0,0:00:01.50,0:00:03.00,Default,,0,0,0,,Well, well\\Nwhat now?
        Dialogue: 0,0:01:00.00,0:01:02.25,Default,,0,0,0,,{\\i1}Later{\\i0}
        """,
    )

    document = load_subtitle_document(path)

    captions = [cue for _, cue in document.captions()]
    assert [cue.lines for cue in captions] == [["Well, well\\Nwhat now?"], ["{\\i1}Later{\\i0}"]]
    assert captions[0].start == pytest.approx(1.5)
    assert captions[1].end == pytest.approx(62.25)
    assert document.signature is None


def test_annotated_output_is_recognised(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "done.ass",
        f"""
        [Script Info]
        Title: {ANNOTATION_SIGNATURE}

        [Events]
        Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
        Dialogue: 0,0:00:01.00,0:00:02.00,Default,,0,0,0,,Hi
        """,
    )

    assert load_subtitle_document(path).signature == ANNOTATION_SIGNATURE
    assert is_annotated_file(path.read_text(encoding="utf-8"))
    assert not is_annotated_file("Title: Episode 1")


def test_load_rejects_binary_payload(tmp_path: Path) -> None:
    path = tmp_path / "video.srt"
    path.write_bytes(b"\x00\x01\x02binary")

    with pytest.raises(SubtitleProcessingError):
        load_subtitle_document(path)


def test_load_rejects_unknown_extension(tmp_path: Path) -> None:
    path = _write(tmp_path, "notes.txt", "hello\n")

    with pytest.raises(SubtitleProcessingError):
        load_subtitle_document(path)


def test_load_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(SubtitleProcessingError):
        load_subtitle_document(tmp_path / "absent.srt")


def test_latin1_payload_is_decoded(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "latin.srt",
        """
        1
        00:00:01,000 --> 00:00:02,000
        Café crème
        """,
        encoding="latin-1",
    )

    ((_, cue),) = list(load_subtitle_document(path).captions())
    assert cue.lines == ["Café crème"]


@pytest.mark.parametrize(
    "value, expected",
    [("00:00:01,500", 1.5), ("0:01:02.25", 62.25), ("01:00:00.000", 3600.0)],
)
def test_timestamp_to_seconds(value: str, expected: float) -> None:
    assert _timestamp_to_seconds(value) == pytest.approx(expected)


def test_timestamp_to_seconds_rejects_garbage() -> None:
    with pytest.raises(SubtitleProcessingError):
        _timestamp_to_seconds("1:xx:00")
    with pytest.raises(SubtitleProcessingError):
        _timestamp_to_seconds("100")


def test_colliding_start_times_get_distinct_slots() -> None:
    document = SubtitleDocument(
        [
            SubtitleCue(index=2, start=1.0, end=2.0, lines=["second"]),
            SubtitleCue(index=1, start=1.0, end=2.0, lines=["first"]),
        ]
    )

    assert [(key, cue.lines[0]) for key, cue in document.captions()] == [
        (1000, "first"),
        (1001, "second"),
    ]


def test_annotation_takes_first_free_slot_after_its_caption() -> None:
    document = SubtitleDocument(
        [
            SubtitleCue(index=1, start=1.000, end=2.0, lines=["one"]),
            SubtitleCue(index=2, start=1.001, end=2.0, lines=["two"]),
        ]
    )

    first = document.insert_annotation(1000, "note one")
    second = document.insert_annotation(1001, "note two")

    assert (first, second) == (1002, 1003)
    assert [event.lines[0] for event in document.events()] == [
        "one",
        "two",
        "note one",
        "note two",
    ]
    assert document.annotation_count == 2


def test_insert_annotation_needs_an_existing_caption() -> None:
    document = SubtitleDocument([SubtitleCue(index=1, start=1.0, end=2.0, lines=["one"])])

    with pytest.raises(SubtitleProcessingError):
        document.insert_annotation(5, "orphan")


def test_credit_is_skipped_when_a_caption_starts_at_zero() -> None:
    document = SubtitleDocument([SubtitleCue(index=1, start=0.0, end=2.0, lines=["one"])])

    assert not document.add_credit("credit")
    assert document.annotation_count == 0


def test_credit_ends_before_the_first_caption() -> None:
    document = SubtitleDocument([SubtitleCue(index=1, start=2.5, end=4.0, lines=["one"])])

    assert document.add_credit("credit")
    credit = document.events()[0]
    assert (credit.start, credit.end, credit.lines) == (0.0, 2.5, ["credit"])


def test_text_helpers() -> None:
    assert replace_line_breaks("a\\Nb<br />c\r\nd", " ") == "a b c d"
    assert strip_markup("{\\b1}<b>x</b>{\\r} &lt;3") == "x <3"
    assert collapse_dots("wait.... what..") == "wait. what."
