"""Typed failures raised while computing coverage for a source file.

Every error is fatal to the current request. Each one carries the context
(source path, test target, artifact) a caller needs to diagnose the failure
without re-running the instrumented tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

_MAX_OUTPUT_IN_MESSAGE = 2000


class FileCoverageError(Exception):
    """Base class for all coverage computation failures."""


class SourceFileNotFoundError(FileCoverageError, FileNotFoundError):
    """The source file under analysis does not exist in the workspace."""

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"File doesn't exist: {self.path}")


class NoTestFileFoundError(FileCoverageError):
    """No test file exists for a source file that is not exempt."""

    def __init__(self, path: str | Path, candidates: Sequence[str] = ()) -> None:
        self.path = str(path)
        self.candidates = list(candidates)
        message = f"No appropriate test file found for {self.path}"
        if self.candidates:
            message += f" (looked for: {', '.join(self.candidates)})"
        super().__init__(message)


class CoverageRunTimeoutError(FileCoverageError):
    """An instrumented test execution exceeded its timeout."""

    def __init__(self, target: str, timeout: float) -> None:
        self.target = target
        self.timeout = timeout
        super().__init__(f"Coverage run for {target} timed out after {timeout:g} seconds")


class TestExecutionError(FileCoverageError):
    """An instrumented test execution finished with a non-zero exit code."""

    def __init__(self, target: str, exit_code: int, output: str = "") -> None:
        self.target = target
        self.exit_code = exit_code
        self.output = output
        message = f"Coverage run for {target} failed with exit code {exit_code}"
        if output:
            tail = output[-_MAX_OUTPUT_IN_MESSAGE:]
            message += f"\n{tail}"
        super().__init__(message)


class CoverageParseError(FileCoverageError):
    """A raw coverage artifact could not be parsed."""

    def __init__(
        self,
        message: str,
        *,
        artifact: str | Path | None = None,
        line_number: int | None = None,
    ) -> None:
        self.artifact = str(artifact) if artifact is not None else None
        self.line_number = line_number
        location = ""
        if self.artifact is not None:
            location = self.artifact
            if line_number is not None:
                location += f":{line_number}"
        elif line_number is not None:
            location = f"line {line_number}"
        super().__init__(f"{location}: {message}" if location else message)
