"""JaCoCo XML report parser.

JaCoCo does not record hit counts, only covered (``ci``) and missed (``mi``)
instruction counts per line. A line with covered instructions counts as hit
``ci`` times; a line with only missed instructions counts as zero hits.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from defusedxml import ElementTree
from defusedxml.ElementTree import ParseError as DefusedParseError

from filecov.adapters.coverage.base import CoverageArtifactParser, LineHits
from filecov.errors import CoverageParseError

if TYPE_CHECKING:
    from pathlib import Path
    from xml.etree.ElementTree import Element as XmlElement

logger = logging.getLogger(__name__)


def _int_attr(element: XmlElement, key: str, *, artifact: str | Path | None) -> int:
    value = element.get(key)
    if value is None:
        return 0
    try:
        parsed = int(value)
    except ValueError as exc:
        raise CoverageParseError(
            f"Attribute {key}={value!r} of <{element.tag}> is not an integer", artifact=artifact
        ) from exc
    if parsed < 0:
        raise CoverageParseError(
            f"Attribute {key}={value!r} of <{element.tag}> is negative", artifact=artifact
        )
    return parsed


class JaCoCoParser(CoverageArtifactParser):
    """Parser for JaCoCo ``jacoco.xml`` reports (Gradle and Maven plugins)."""

    @property
    def name(self) -> str:
        return "jacoco"

    def detect(self, content: str) -> bool:
        return content.lstrip().startswith("<")

    def parse_records(self, content: str, *, artifact: str | Path | None = None) -> dict[str, LineHits]:
        try:
            root = ElementTree.fromstring(content)
        except DefusedParseError as exc:
            raise CoverageParseError(f"Invalid JaCoCo XML: {exc}", artifact=artifact) from exc

        if root.tag != "report":
            raise CoverageParseError(
                f"JaCoCo XML root is <{root.tag}>, expected <report>", artifact=artifact
            )

        records: dict[str, LineHits] = {}
        for package in root.iter("package"):
            package_name = package.get("name", "")
            for sourcefile in package.findall("sourcefile"):
                filename = sourcefile.get("name")
                if not filename:
                    raise CoverageParseError(
                        f"<sourcefile> without a name in package {package_name!r}",
                        artifact=artifact,
                    )
                path = f"{package_name}/{filename}" if package_name else filename
                hits = records.setdefault(path, {})
                for line_elem in sourcefile.findall("line"):
                    nr = _int_attr(line_elem, "nr", artifact=artifact)
                    if nr < 1:
                        raise CoverageParseError(
                            f"<line> in {path} has no valid nr attribute", artifact=artifact
                        )
                    covered = _int_attr(line_elem, "ci", artifact=artifact)
                    missed = _int_attr(line_elem, "mi", artifact=artifact)
                    if covered + missed == 0:
                        continue
                    hits[nr] = hits.get(nr, 0) + covered
        logger.debug("Parsed %d JaCoCo source files", len(records))
        return records
