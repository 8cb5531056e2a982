"""Shared fixtures: the TwoSum sample project and a fake execution service."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from filecov.adapters.execution.base import ExecutionResult, TestExecutionService

FIXTURES = Path(__file__).parent / "fixtures"

TWO_SUM_SOURCE = """\
package com.example

class TwoSum {

    companion object {
        fun sumNumbers(a: Int, b: Int): Any {
            return if (a == 0 && b == 0) {
                "Both numbers are zero"
            } else {
                a + b
            }
        }
    }
}"""

TWO_SUM_TEST = """\
package com.example

import org.junit.Assert.assertEquals
import org.junit.Test

class TwoSumTest {

    @Test
    fun testSumNumbers() {
        assertEquals(TwoSum.sumNumbers(0, 1), 1)
        assertEquals(TwoSum.sumNumbers(3, 4), 7)
        assertEquals(TwoSum.sumNumbers(0, 0), "Both numbers are zero")
    }
}"""


def lcov(source_path: str, hits: dict[int, int]) -> str:
    """Build a single-record LCOV tracefile."""
    lines = ["TN:", f"SF:{source_path}"]
    lines.extend(f"DA:{line},{count}" for line, count in sorted(hits.items()))
    lines.append(f"LH:{sum(1 for c in hits.values() if c > 0)}")
    lines.append(f"LF:{len(hits)}")
    lines.append("end_of_record")
    return "\n".join(lines) + "\n"


FULL_HITS = {3: 0, 7: 1, 8: 1, 10: 1}
"""What JaCoCo reports for TwoSum when all three assertions run."""


def write_file(root: Path, rel: str, content: str) -> Path:
    """Write *content* to a file under *root*."""
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")
    return f


class FakeExecutionService(TestExecutionService):
    """Execution service that writes canned LCOV artifacts instead of running Bazel.

    ``artifacts`` maps a target to the artifact text it produces. Targets in
    ``failures`` exit with the given code, targets in ``timeouts`` time out and
    ``delays`` postpones a target's completion.
    """

    def __init__(
        self,
        artifact_dir: Path,
        artifacts: dict[str, str],
        *,
        failures: dict[str, int] | None = None,
        timeouts: set[str] | None = None,
        delays: dict[str, float] | None = None,
        missing_artifact: set[str] | None = None,
    ) -> None:
        self._dir = artifact_dir
        self._artifacts = artifacts
        self._failures = failures or {}
        self._timeouts = timeouts or set()
        self._delays = delays or {}
        self._missing = missing_artifact or set()
        self.calls: list[tuple[str, float]] = []
        self.cancelled: list[str] = []
        self.completed: list[str] = []

    @property
    def name(self) -> str:
        return "fake"

    async def execute(self, target: str, *, timeout: float) -> ExecutionResult:
        self.calls.append((target, timeout))
        try:
            await asyncio.sleep(self._delays.get(target, 0))
        except asyncio.CancelledError:
            self.cancelled.append(target)
            raise

        self.completed.append(target)
        if target in self._timeouts:
            return ExecutionResult(target=target, exit_code=-1, timed_out=True)
        if target in self._failures:
            return ExecutionResult(
                target=target,
                exit_code=self._failures[target],
                stdout="Executed 1 out of 1 test: 1 fails locally.",
                stderr="FAILED: TwoSumTest.testSumNumbers",
            )
        if target in self._missing:
            return ExecutionResult(target=target, exit_code=0)

        name = target.replace("/", "_").replace(":", "_").strip("_")
        artifact = write_file(self._dir, f"{name}/coverage.dat", self._artifacts[target])
        return ExecutionResult(target=target, exit_code=0, artifact_path=artifact)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Empty workspace root."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def artifact_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "artifacts"
    directory.mkdir()
    return directory


@pytest.fixture
def golden_markdown() -> str:
    return (FIXTURES / "two_sum_report.md").read_text(encoding="utf-8")


@pytest.fixture
def golden_html() -> str:
    return (FIXTURES / "two_sum_report.html").read_text(encoding="utf-8")
