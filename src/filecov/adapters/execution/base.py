"""Base class for services that run one test target under instrumentation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


@dataclass
class ExecutionResult:
    """Outcome of one instrumented test execution."""

    target: str
    """Test target that was executed (e.g. ``//app/test/java/a:FooTest``)."""

    exit_code: int
    """Exit code of the test run."""

    artifact_path: Path | None = None
    """Raw coverage artifact produced by the run, if any."""

    stdout: str = ""
    stderr: str = ""

    timed_out: bool = False
    """True if the run was killed because it exceeded its timeout."""

    duration_ms: float = 0.0

    @property
    def output(self) -> str:
        """Captured output of the run, stdout first."""
        if self.stdout and self.stderr:
            return f"{self.stdout.rstrip()}\n{self.stderr}"
        return self.stdout or self.stderr


class TestExecutionService(ABC):
    """Runs a single test target with coverage instrumentation.

    The service owns instrumentation and the build system; callers only see
    the exit status, the captured output and where the artifact was written.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service identifier (e.g. ``'bazel'``)."""

    @abstractmethod
    async def execute(self, target: str, *, timeout: float) -> ExecutionResult:
        """Run *target* under coverage instrumentation.

        Args:
            target: Identifier of the test target.
            timeout: Seconds the execution may take before it is killed.

        Returns:
            The ExecutionResult. Timeouts are reported through ``timed_out``.
        """
