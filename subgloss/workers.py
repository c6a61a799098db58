"""Background annotation of subtitle files."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from subgloss import logging_manager as log_mgr
from subgloss.annotation.errors import AnnotationError
from subgloss.annotation.orchestrator import AnnotationService
from subgloss.subtitles import (
    AnnotationCancelled,
    SubtitleProcessingError,
    load_subtitle_document,
    write_ass,
)
from subgloss.subtitles.common import ASS_EXTENSION, SUPPORTED_EXTENSIONS

logger = log_mgr.get_logger().getChild("workers")

OUTPUT_SUFFIX = ".annotated"


def find_subtitle_files(
    directory: Path, extensions: Iterable[str] = SUPPORTED_EXTENSIONS
) -> List[Path]:
    """Return subtitle files under ``directory``, skipping hidden entries."""

    wanted = {ext.lower() for ext in extensions}
    root = Path(directory)
    if root.is_file():
        return [root] if root.suffix.lower() in wanted else []
    found: List[Path] = []
    for candidate in sorted(root.rglob("*")):
        relative = candidate.relative_to(root)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if candidate.is_file() and candidate.suffix.lower() in wanted:
            found.append(candidate)
    return found


def _output_path(path: Path, output_dir: Optional[Path]) -> Path:
    target_dir = output_dir or path.parent
    stem = path.stem
    if path.suffix.lower() == ASS_EXTENSION and output_dir is None:
        stem = f"{stem}{OUTPUT_SUFFIX}"
    return target_dir / f"{stem}{ASS_EXTENSION}"


def annotate_subtitle_file(
    path: Path,
    service: AnnotationService,
    *,
    output_dir: Optional[Path] = None,
) -> Optional[Path]:
    """Annotate ``path`` and write an ASS file; ``None`` when nothing was annotated."""

    document = load_subtitle_document(path)
    if document.signature:
        logger.info("Skipping %s: already annotated.", path.name, extra={"event": "file.skipped"})
        return None
    summary = service.annotate_document(document)
    logger.info(
        "Annotated %d of %d captions in %s (%d failed)",
        summary.annotated,
        summary.captions,
        path.name,
        summary.failed,
        extra={"event": "file.annotated"},
    )
    if summary.annotated == 0:
        return None
    output_path = _output_path(path, output_dir)
    write_ass(output_path, document, service.config.subtitle_styles())
    return output_path


@dataclass(slots=True)
class WorkerReport:
    written: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failed: List[Path] = field(default_factory=list)
    cancelled: bool = False


class AnnotationWorker(threading.Thread):
    """Annotate a list of subtitle files one after another.

    A failing file is logged and counted; the next file still runs.
    :meth:`cancel` takes effect between files, never inside one.
    """

    def __init__(
        self,
        paths: Sequence[Path],
        service: AnnotationService,
        *,
        output_dir: Optional[Path] = None,
        on_file_done: Optional[Callable[[Path, Optional[Path]], None]] = None,
    ) -> None:
        super().__init__(name="AnnotationWorker", daemon=True)
        self.paths = list(paths)
        self.service = service
        self.output_dir = output_dir
        self.on_file_done = on_file_done
        self.report = WorkerReport()
        self._stop_event = threading.Event()

    def cancel(self) -> None:
        self._stop_event.set()

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()

    def _check_cancelled(self) -> None:
        if self._stop_event.is_set():
            raise AnnotationCancelled("Annotation cancelled")

    def run(self) -> None:
        try:
            for path in self.paths:
                self._check_cancelled()
                self._process(path)
        except AnnotationCancelled:
            self.report.cancelled = True
            logger.info("Annotation cancelled by user.", extra={"event": "worker.cancelled"})

    def _process(self, path: Path) -> None:
        with log_mgr.log_context(file=str(path)):
            logger.info("Processing %s", path.name, extra={"event": "file.started"})
            try:
                written = annotate_subtitle_file(path, self.service, output_dir=self.output_dir)
            except (SubtitleProcessingError, AnnotationError, OSError) as exc:
                self.report.failed.append(path)
                logger.error(
                    "Error while processing subtitle file %s: %s",
                    path.name,
                    exc,
                    extra={"event": "file.failed"},
                )
                return
            except Exception:
                self.report.failed.append(path)
                logger.exception(
                    "Unexpected error while processing subtitle file %s",
                    path.name,
                    extra={"event": "file.failed"},
                )
                return
            if written is None:
                self.report.skipped.append(path)
            else:
                self.report.written.append(written)
            if self.on_file_done is not None:
                self.on_file_done(path, written)


__all__ = [
    "AnnotationWorker",
    "WorkerReport",
    "annotate_subtitle_file",
    "find_subtitle_files",
]
