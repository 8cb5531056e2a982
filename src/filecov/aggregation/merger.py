"""Merge coverage units contributed by several test targets.

A line is covered if any unit hit it. The fold is an OR over booleans, so
merging is associative and commutative and adding a unit can only promote a
line to covered, never demote it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from filecov.models.coverage import MergedCoverage

if TYPE_CHECKING:
    from collections.abc import Iterable

    from filecov.models.coverage import CoverageUnit

logger = logging.getLogger(__name__)


def merge_units(units: Iterable[CoverageUnit], *, source_path: str | None = None) -> MergedCoverage:
    """Merge *units* into a single per-line covered map.

    Lines no unit reported stay absent from the result.

    Raises:
        ValueError: If no source path is known, or units cover different files.
    """
    unit_list = list(units)
    path = source_path if source_path is not None else _common_path(unit_list)
    merged = MergedCoverage(source_path=path)
    for unit in unit_list:
        if unit.source_path != path:
            raise ValueError(
                f"Cannot merge coverage of {unit.source_path} into coverage of {path}"
            )
        merge_into(merged, unit)

    logger.debug(
        "Merged %d unit(s) for %s: %d covered, %d not covered",
        len(unit_list),
        path,
        len(merged.covered_lines),
        len(merged.not_covered_lines),
    )
    return merged


def merge_into(merged: MergedCoverage, unit: CoverageUnit) -> MergedCoverage:
    """Fold one unit into *merged* in place and return it."""
    for line_number, count in unit.hits.items():
        merged.lines[line_number] = merged.lines.get(line_number, False) or count > 0
    return merged


def _common_path(units: list[CoverageUnit]) -> str:
    if not units:
        raise ValueError("Cannot merge an empty list of coverage units without a source path")
    return units[0].source_path
