"""Bazel test execution service.

Runs ``bazel coverage`` for one test target and locates the LCOV tracefile
Bazel writes for it.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from filecov.adapters.execution.base import ExecutionResult, TestExecutionService
from filecov.utils.subprocess_runner import run_subprocess

logger = logging.getLogger(__name__)

_COVERAGE_DATA_NAME = "coverage.dat"
_COMBINED_REPORT = "bazel-out/_coverage/_coverage_report.dat"
_COVERAGE_PATH_RE = re.compile(r"(\S*" + re.escape(_COVERAGE_DATA_NAME) + r")\b")


def target_test_logs_path(target: str) -> str:
    """``//a/b:FooTest`` -> ``bazel-testlogs/a/b/FooTest/coverage.dat``."""
    label = target.removeprefix("//")
    package, _, name = label.partition(":")
    if not name:
        name = package.rsplit("/", 1)[-1]
    parts = [p for p in (package, name) if p]
    return "/".join(["bazel-testlogs", *parts, _COVERAGE_DATA_NAME])


class BazelExecutionService(TestExecutionService):
    """Runs ``bazel coverage -- <target> --combined_report=lcov``."""

    def __init__(self, workspace_root: Path, *, bazel_command: str = "bazel") -> None:
        self._root = workspace_root
        self._bazel = bazel_command

    @property
    def name(self) -> str:
        return "bazel"

    def build_command(self, target: str) -> list[str]:
        return [self._bazel, "coverage", "--", target, "--combined_report=lcov"]

    async def execute(self, target: str, *, timeout: float) -> ExecutionResult:
        logger.info("Running %s coverage for %s", self.name, target)
        result = await run_subprocess(self.build_command(target), cwd=self._root, timeout=timeout)
        artifact = None
        if result.success:
            artifact = self.find_artifact(target, result.stdout + "\n" + result.stderr)
        return ExecutionResult(
            target=target,
            exit_code=result.returncode,
            artifact_path=artifact,
            stdout=result.stdout,
            stderr=result.stderr,
            timed_out=result.timed_out,
            duration_ms=result.duration_ms,
        )

    def find_artifact(self, target: str, output: str) -> Path | None:
        """Locate the coverage data Bazel produced for *target*.

        Bazel prints the path of each target's ``coverage.dat``; when it does
        not, the conventional test-logs location and the combined report are
        tried in that order.
        """
        for match in _COVERAGE_PATH_RE.finditer(output):
            candidate = Path(match.group(1))
            if not candidate.is_absolute():
                candidate = self._root / candidate
            if candidate.is_file():
                logger.debug("Coverage data for %s reported at %s", target, candidate)
                return candidate

        for relative in (target_test_logs_path(target), _COMBINED_REPORT):
            candidate = self._root / relative
            if candidate.is_file():
                logger.debug("Coverage data for %s found at %s", target, candidate)
                return candidate

        logger.warning("No coverage data found for %s", target)
        return None
