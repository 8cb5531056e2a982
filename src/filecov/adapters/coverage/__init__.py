"""Parsers turning raw coverage artifacts into per-file coverage units."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from filecov.adapters.coverage.base import CoverageArtifactParser, LineHits, paths_match
from filecov.adapters.coverage.jacoco import JaCoCoParser
from filecov.adapters.coverage.lcov import LcovParser
from filecov.errors import CoverageParseError

if TYPE_CHECKING:
    from pathlib import Path

    from filecov.models.coverage import CoverageUnit

logger = logging.getLogger(__name__)

_PARSERS: tuple[CoverageArtifactParser, ...] = (JaCoCoParser(), LcovParser())


def get_parser(content: str) -> CoverageArtifactParser:
    """Pick the parser whose format matches *content*."""
    for parser in _PARSERS:
        if parser.detect(content):
            return parser
    raise CoverageParseError("Unrecognised coverage artifact format")


def parse_coverage(
    content: str,
    source_path: str,
    *,
    target: str = "",
    artifact: str | Path | None = None,
) -> CoverageUnit:
    """Parse a raw artifact and keep only the records of *source_path*."""
    parser = get_parser(content)
    return parser.parse(content, source_path, target=target, artifact=artifact)


def parse_coverage_file(artifact: Path, source_path: str, *, target: str = "") -> CoverageUnit:
    """Read and parse a coverage artifact file."""
    try:
        content = artifact.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CoverageParseError(f"Cannot read coverage artifact: {exc}", artifact=artifact) from exc
    return parse_coverage(content, source_path, target=target, artifact=artifact)


__all__ = [
    "CoverageArtifactParser",
    "JaCoCoParser",
    "LcovParser",
    "LineHits",
    "get_parser",
    "parse_coverage",
    "parse_coverage_file",
    "paths_match",
]
