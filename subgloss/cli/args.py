"""Argument parsing helpers for the subgloss CLI."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence


def _add_shared_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the YAML configuration file (defaults to DIR/config.yaml if present).",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging output.")
    return parser


def _add_annotate_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument("directory", help="Subtitle file or directory searched recursively.")
    parser.add_argument("--dictionary", help="Override the dictionary file from the configuration.")
    parser.add_argument(
        "--language",
        help="Override the subtitle language (name or ISO-639-1 code).",
    )
    parser.add_argument(
        "--tags-dir",
        help="Directory of <tag>.txt files listing lemmas to tag in the dictionary.",
    )
    parser.add_argument(
        "--output-dir",
        help="Write annotated files here instead of next to their source.",
    )
    return _add_shared_arguments(parser)


def build_cli_parser() -> argparse.ArgumentParser:
    """Build the CLI parser with explicit sub-commands."""

    parser = argparse.ArgumentParser(
        prog="subgloss",
        description="Annotate foreign-language subtitles with dictionary definitions.",
        allow_abbrev=False,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    annotate_parser = subparsers.add_parser(
        "annotate", help="Annotate every subtitle file in a directory", allow_abbrev=False
    )
    _add_annotate_arguments(annotate_parser)
    annotate_parser.set_defaults(command="annotate")
    return parser


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_cli_parser().parse_args(argv)


__all__ = ["build_cli_parser", "parse_cli_args"]
