"""Tests for the JaCoCo XML parser (adapters/coverage/jacoco.py)."""

from __future__ import annotations

import pytest

from filecov.adapters.coverage import JaCoCoParser, get_parser, parse_coverage
from filecov.errors import CoverageParseError

_SOURCE = "coverage/main/java/com/example/TwoSum.kt"

_JACOCO_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<report name="TwoSum">
  <sessioninfo id="local" start="1700000000000" dump="1700000001000"/>
  <package name="com/example">
    <class name="com/example/TwoSum" sourcefilename="TwoSum.kt"/>
    <sourcefile name="TwoSum.kt">
      <line nr="3" mi="3" ci="0" mb="0" cb="0"/>
      <line nr="7" mi="0" ci="6" mb="0" cb="2"/>
      <line nr="8" mi="0" ci="2" mb="0" cb="0"/>
      <line nr="10" mi="0" ci="4" mb="0" cb="0"/>
      <line nr="12" mi="0" ci="0" mb="0" cb="0"/>
      <counter type="LINE" missed="1" covered="3"/>
    </sourcefile>
    <sourcefile name="Other.kt">
      <line nr="1" mi="1" ci="0"/>
    </sourcefile>
  </package>
</report>
"""


def test_parse_records() -> None:
    records = JaCoCoParser().parse_records(_JACOCO_XML)
    assert records["com/example/TwoSum.kt"] == {3: 0, 7: 6, 8: 2, 10: 4}
    assert records["com/example/Other.kt"] == {1: 0}


def test_lines_without_instructions_are_skipped() -> None:
    records = JaCoCoParser().parse_records(_JACOCO_XML)
    assert 12 not in records["com/example/TwoSum.kt"]


def test_parse_matches_package_relative_path() -> None:
    unit = JaCoCoParser().parse(_JACOCO_XML, _SOURCE)
    assert unit.hits[7] == 6
    assert unit.hits[3] == 0
    assert sorted(unit.hits) == [3, 7, 8, 10]


def test_detected_as_xml() -> None:
    assert get_parser(_JACOCO_XML).name == "jacoco"
    assert parse_coverage(_JACOCO_XML, _SOURCE).hits[10] == 4


def test_default_package() -> None:
    content = '<report name="r"><package name=""><sourcefile name="A.kt"><line nr="1" ci="1"/></sourcefile></package></report>'
    assert JaCoCoParser().parse_records(content) == {"A.kt": {1: 1}}


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("<report><package", "Invalid JaCoCo XML"),
        ("<coverage/>", "expected <report>"),
        ('<report><package name="p"><sourcefile/></package></report>', "without a name"),
        (
            '<report><package name="p"><sourcefile name="A.kt"><line ci="1"/></sourcefile></package></report>',
            "no valid nr",
        ),
        (
            '<report><package name="p"><sourcefile name="A.kt"><line nr="x"/></sourcefile></package></report>',
            "is not an integer",
        ),
        (
            '<report><package name="p"><sourcefile name="A.kt"><line nr="1" ci="-2"/></sourcefile></package></report>',
            "is negative",
        ),
    ],
)
def test_malformed(content: str, message: str) -> None:
    with pytest.raises(CoverageParseError, match=message):
        JaCoCoParser().parse_records(content, artifact="jacoco.xml")
