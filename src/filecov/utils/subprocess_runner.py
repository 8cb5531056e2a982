"""Async subprocess execution with timeout, output capture and cancellation.

Instrumented test runs are the only suspension points of a coverage request,
so this runner is where timeouts are enforced and where cancelled runs are
killed instead of left behind.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)

_TIMEOUT_NOTICE = "Process timed out and was killed"


@dataclass
class SubprocessResult:
    """Outcome of a finished (or killed) subprocess."""

    returncode: int
    """Exit code of the process (-1 when it was killed on timeout)."""

    stdout: str
    """Decoded standard output."""

    stderr: str
    """Decoded standard error."""

    timed_out: bool = False
    """True if the process was killed because it exceeded its timeout."""

    duration_ms: float = 0.0
    """Wall-clock duration in milliseconds."""

    @property
    def success(self) -> bool:
        """True if the process exited with code 0 before its timeout."""
        return self.returncode == 0 and not self.timed_out

    @property
    def output(self) -> str:
        """Standard output followed by standard error."""
        if self.stdout and self.stderr:
            return f"{self.stdout.rstrip()}\n{self.stderr}"
        return self.stdout or self.stderr


class SubprocessError(Exception):
    """Raised when a subprocess cannot be started at all."""

    def __init__(self, message: str, result: SubprocessResult) -> None:
        super().__init__(message)
        self.result = result


async def run_subprocess(
    command: Sequence[str],
    *,
    cwd: Path | None = None,
    timeout: float = 120.0,
    env: Mapping[str, str] | None = None,
) -> SubprocessResult:
    """Run *command* and capture its output.

    Args:
        command: Executable and arguments.
        cwd: Working directory. Defaults to the current directory.
        timeout: Seconds to wait before the process is killed.
        env: Extra environment variables layered over ``os.environ``.

    Returns:
        A SubprocessResult. A timed-out process is reported through
        ``timed_out`` rather than an exception.

    Raises:
        ValueError: If the command is empty, the timeout is not positive or
            the working directory does not exist.
        SubprocessError: If the executable cannot be found or started.
    """
    if not command:
        raise ValueError("Command cannot be empty")
    if timeout <= 0:
        raise ValueError(f"Timeout must be positive, got {timeout}")

    work_dir = cwd.resolve() if cwd else Path.cwd()
    if not work_dir.is_dir():
        raise ValueError(f"Working directory does not exist: {work_dir}")

    full_env = {**os.environ, **env} if env else None
    printable = " ".join(str(c) for c in command)
    logger.debug("Running subprocess: %s (cwd=%s, timeout=%s)", printable, work_dir, timeout)

    start_time = time.perf_counter()
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=work_dir,
            env=full_env,
        )
    except FileNotFoundError as exc:
        logger.error("Command not found: %s", command[0])
        raise SubprocessError(
            f"Command not found: {command[0]}",
            result=SubprocessResult(returncode=-1, stdout="", stderr=str(exc)),
        ) from exc
    except OSError as exc:
        raise SubprocessError(
            f"Could not start {command[0]}: {exc}",
            result=SubprocessResult(returncode=-1, stdout="", stderr=str(exc)),
        ) from exc

    timed_out = False
    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except TimeoutError:
        logger.warning("Subprocess timed out after %s seconds: %s", timeout, printable)
        timed_out = True
        await _kill(process)
        stdout_bytes, stderr_bytes = b"", _TIMEOUT_NOTICE.encode()
    except asyncio.CancelledError:
        await _kill(process)
        raise

    duration_ms = (time.perf_counter() - start_time) * 1000
    returncode = -1 if timed_out else (process.returncode or 0)
    result = SubprocessResult(
        returncode=returncode,
        stdout=stdout_bytes.decode("utf-8", errors="replace"),
        stderr=stderr_bytes.decode("utf-8", errors="replace"),
        timed_out=timed_out,
        duration_ms=duration_ms,
    )
    logger.debug(
        "Subprocess completed: returncode=%d, duration=%.2fms, success=%s",
        returncode,
        duration_ms,
        result.success,
    )
    return result


async def _kill(process: asyncio.subprocess.Process) -> None:
    try:
        process.kill()
    except ProcessLookupError:
        return
    await process.wait()
