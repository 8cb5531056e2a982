"""Base class for raw coverage artifact parsers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from filecov.models.coverage import CoverageUnit
from filecov.utils.workspace import normalize_relative

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

LineHits = dict[int, int]
"""1-based line number -> hit count."""


def paths_match(artifact_path: str, source_path: str) -> bool:
    """Return True if a path recorded in an artifact denotes *source_path*.

    Instrumentation tools record either workspace-relative or absolute paths,
    so one path may be a suffix of the other on a segment boundary.
    """
    recorded = normalize_relative(artifact_path).lstrip("/")
    wanted = normalize_relative(source_path).lstrip("/")
    if not recorded or not wanted:
        return False
    if recorded == wanted:
        return True
    return recorded.endswith("/" + wanted) or wanted.endswith("/" + recorded)


class CoverageArtifactParser(ABC):
    """Parses one raw coverage artifact into per-file line hit counts.

    Concrete parsers only need to understand their native format; selecting
    the records for the file under analysis is shared here.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Format identifier (e.g. ``'lcov'``, ``'jacoco'``)."""

    @abstractmethod
    def detect(self, content: str) -> bool:
        """Return True if *content* looks like this parser's format."""

    @abstractmethod
    def parse_records(self, content: str, *, artifact: str | Path | None = None) -> dict[str, LineHits]:
        """Parse every file record of the artifact.

        Raises:
            CoverageParseError: The artifact is malformed.
        """

    def parse(
        self,
        content: str,
        source_path: str,
        *,
        target: str = "",
        artifact: str | Path | None = None,
    ) -> CoverageUnit:
        """Extract the coverage of *source_path* from an artifact.

        Lines the artifact does not mention stay absent from the unit; they
        are "no information", not "zero hits".
        """
        records = self.parse_records(content, artifact=artifact)
        hits: LineHits = {}
        matched = 0
        for recorded_path, line_hits in records.items():
            if not paths_match(recorded_path, source_path):
                continue
            matched += 1
            for line_number, count in line_hits.items():
                hits[line_number] = hits.get(line_number, 0) + count

        if not matched:
            logger.warning(
                "%s artifact%s has no record for %s",
                self.name,
                f" {artifact}" if artifact is not None else "",
                source_path,
            )
        logger.debug(
            "Parsed %d instrumented lines for %s from %s (%s)",
            len(hits),
            source_path,
            target or "artifact",
            self.name,
        )
        return CoverageUnit(source_path=source_path, hits=hits, target=target)
