"""LCOV tracefile parser.

Bazel's ``coverage.dat`` and the combined ``_coverage_report.dat`` are LCOV
tracefiles: one record per source file, opened by ``SF:`` and closed by
``end_of_record``. Only ``DA`` (line data) matters for line coverage; the
function and branch keys are validated for shape and otherwise ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from filecov.adapters.coverage.base import CoverageArtifactParser, LineHits
from filecov.errors import CoverageParseError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# ── LCOV record keys ─────────────────────────────────────────────

_LCOV_TN = "TN"
_LCOV_SF = "SF"
_LCOV_DA = "DA"
_LCOV_END = "end_of_record"
_LCOV_IGNORED_KEYS = frozenset(
    {"FN", "FNDA", "FNF", "FNH", "FNL", "FNA", "BRDA", "BRF", "BRH", "BA", "LF", "LH", "VER"}
)
_LCOV_DA_MIN_PARTS = 2
_LCOV_DA_MAX_PARTS = 3


@dataclass
class _RecordState:
    path: str
    opened_at: int
    hits: LineHits = field(default_factory=dict)


class LcovParser(CoverageArtifactParser):
    """Parser for LCOV tracefiles (``SF``/``DA``/``end_of_record``)."""

    @property
    def name(self) -> str:
        return "lcov"

    def detect(self, content: str) -> bool:
        # Plain text; anything that is not markup is treated as a tracefile.
        return not content.lstrip().startswith("<")

    def parse_records(self, content: str, *, artifact: str | Path | None = None) -> dict[str, LineHits]:
        records: dict[str, LineHits] = {}
        state: _RecordState | None = None

        for index, raw_line in enumerate(content.splitlines(), start=1):
            line = raw_line.strip()
            if not line:
                continue

            if line == _LCOV_END:
                if state is None:
                    raise CoverageParseError(
                        "end_of_record without an open SF record",
                        artifact=artifact,
                        line_number=index,
                    )
                _store(records, state)
                state = None
                continue

            key, sep, value = line.partition(":")
            if not sep:
                raise CoverageParseError(
                    f"Unrecognised LCOV line: {line!r}", artifact=artifact, line_number=index
                )
            value = value.strip()

            if key == _LCOV_SF:
                if not value:
                    raise CoverageParseError(
                        "SF record without a source path", artifact=artifact, line_number=index
                    )
                if state is not None:
                    logger.debug("SF at line %d closes record opened at %d", index, state.opened_at)
                    _store(records, state)
                state = _RecordState(path=value, opened_at=index)
            elif key == _LCOV_DA:
                if state is None:
                    raise CoverageParseError(
                        "DA entry outside of an SF record", artifact=artifact, line_number=index
                    )
                line_number, count = _parse_da(value, artifact=artifact, index=index)
                state.hits[line_number] = state.hits.get(line_number, 0) + count
            elif key != _LCOV_TN and key not in _LCOV_IGNORED_KEYS:
                raise CoverageParseError(
                    f"Unknown LCOV key {key!r}", artifact=artifact, line_number=index
                )

        if state is not None:
            _store(records, state)
        return records


def _store(records: dict[str, LineHits], state: _RecordState) -> None:
    existing = records.setdefault(state.path, {})
    for line_number, count in state.hits.items():
        existing[line_number] = existing.get(line_number, 0) + count


def _parse_da(value: str, *, artifact: str | Path | None, index: int) -> tuple[int, int]:
    parts = [part.strip() for part in value.split(",")]
    if not _LCOV_DA_MIN_PARTS <= len(parts) <= _LCOV_DA_MAX_PARTS:
        raise CoverageParseError(
            f"Malformed DA entry: {value!r}", artifact=artifact, line_number=index
        )
    try:
        line_number = int(parts[0])
        count = int(parts[1])
    except ValueError as exc:
        raise CoverageParseError(
            f"Malformed DA entry: {value!r}", artifact=artifact, line_number=index
        ) from exc
    if line_number < 1:
        raise CoverageParseError(
            f"DA line number must be positive: {value!r}", artifact=artifact, line_number=index
        )
    if count < 0:
        raise CoverageParseError(
            f"DA hit count must be non-negative: {value!r}", artifact=artifact, line_number=index
        )
    return line_number, count
