"""Console-script entry point for subgloss."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Sequence

from subgloss import logging_manager as log_mgr
from subgloss.annotation.dictionary import (
    DictionaryIndex,
    load_jiji_dictionary,
    load_language_tags,
)
from subgloss.annotation.errors import AnnotationError
from subgloss.annotation.orchestrator import AnnotationService, CaptionAnnotator
from subgloss.annotation.tokenizers import tokenizer_for_language
from subgloss.config import AnnotationConfig, ConfigError, load_annotation_config
from subgloss.config.loader import DEFAULT_CONFIG_FILENAME
from subgloss.language import Language
from subgloss.workers import AnnotationWorker, find_subtitle_files

from .args import parse_cli_args

logger = log_mgr.get_logger().getChild("cli")

EXIT_OK = 0
EXIT_FILE_ERRORS = 1
EXIT_FATAL = 2


def _resolve_config_path(args, directory: Path) -> Optional[Path]:
    if args.config:
        return Path(args.config).expanduser()
    base = directory if directory.is_dir() else directory.parent
    candidate = base / DEFAULT_CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _resolve_dictionary_path(config: AnnotationConfig, config_path: Optional[Path]) -> Path:
    if not config.dictionary:
        raise ConfigError("No dictionary configured; use --dictionary or the 'dictionary' key.")
    path = Path(config.dictionary).expanduser()
    if not path.is_absolute() and not path.exists() and config_path is not None:
        path = config_path.parent / path
    return path


def _resolve_language(config: AnnotationConfig, index: DictionaryIndex) -> Language:
    language = config.language or index.language
    if language is None:
        raise ConfigError(
            "The dictionary does not declare its language; set 'language' in the configuration."
        )
    return language


def build_service(args, directory: Path) -> AnnotationService:
    """Load configuration, dictionary and tokenizer for one run."""

    config_path = _resolve_config_path(args, directory)
    config = load_annotation_config(
        config_path,
        overrides={"dictionary": args.dictionary, "language": args.language},
    )
    index = load_jiji_dictionary(
        _resolve_dictionary_path(config, config_path),
        cleanup_pattern=config.dictionary_cleanup_regexp,
    )
    if args.tags_dir:
        applied = load_language_tags(index, Path(args.tags_dir).expanduser())
        logger.debug("Applied language tags: %s", applied)
    language = _resolve_language(config, index)
    tokenizer = tokenizer_for_language(language)
    annotator = CaptionAnnotator(tokenizer, index, language, config)
    return AnnotationService(annotator, dictionary_title=index.title)


def run_annotate(args) -> int:
    directory = Path(args.directory).expanduser()
    if not directory.exists():
        logger.error("No such file or directory: %s", directory)
        return EXIT_FATAL

    try:
        service = build_service(args, directory)
    except (ConfigError, AnnotationError) as exc:
        logger.error("%s", exc, extra={"event": "run.fatal"})
        return EXIT_FATAL

    files = find_subtitle_files(directory, service.config.subtitle_extensions)
    if not files:
        logger.warning("No subtitle files found in %s", directory)
        return EXIT_OK

    output_dir = Path(args.output_dir).expanduser() if args.output_dir else None
    worker = AnnotationWorker(files, service, output_dir=output_dir)
    worker.start()
    try:
        worker.join()
    except KeyboardInterrupt:
        logger.info("Interrupted; finishing the current file before stopping.")
        worker.cancel()
        worker.join()

    report = worker.report
    logger.info(
        "%d file(s) annotated, %d without annotation, %d failed",
        len(report.written),
        len(report.skipped),
        len(report.failed),
        extra={"event": "run.finished"},
    )
    return EXIT_FILE_ERRORS if report.failed else EXIT_OK


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_cli_args(argv)
    log_mgr.configure_logging_level(debug_enabled=bool(args.debug))
    if args.command == "annotate":
        return run_annotate(args)
    return EXIT_FATAL  # pragma: no cover - argparse rejects unknown commands


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the subgloss CLI."""

    return run_cli(argv)


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(main())
