"""CoverageRunner — runs every contributing test target and collects its coverage.

The targets of one request fan out to the execution service and fan back in
behind a join barrier: either every target yields a CoverageUnit, or the run
fails as a whole. Coverage from targets that already finished is discarded
when another target fails, so an incomplete picture is never reported.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from filecov.adapters.coverage import parse_coverage_file
from filecov.errors import CoverageParseError, CoverageRunTimeoutError, TestExecutionError
from filecov.utils.subprocess_runner import SubprocessError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from filecov.adapters.execution.base import TestExecutionService
    from filecov.models.coverage import CoverageUnit

logger = logging.getLogger(__name__)

DEFAULT_PROCESS_TIMEOUT = 300.0


class CoverageRunner:
    """Coordinates instrumented executions for one source file."""

    def __init__(
        self,
        service: TestExecutionService,
        *,
        timeout: float = DEFAULT_PROCESS_TIMEOUT,
        parallel: bool = True,
    ) -> None:
        if timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {timeout}")
        self._service = service
        self._timeout = timeout
        self._parallel = parallel

    @property
    def timeout(self) -> float:
        return self._timeout

    async def run(self, source_path: str, targets: Sequence[str]) -> list[CoverageUnit]:
        """Run each target and return one CoverageUnit per target, in target order.

        Raises:
            CoverageRunTimeoutError: A target exceeded the timeout.
            TestExecutionError: A target could not run or exited non-zero.
            CoverageParseError: A target produced no or malformed coverage data.
        """
        if not targets:
            raise ValueError(f"No test targets given for {source_path}")

        logger.info(
            "Collecting coverage for %s from %d target(s) (%s)",
            source_path,
            len(targets),
            "parallel" if self._parallel and len(targets) > 1 else "sequential",
        )
        if not self._parallel or len(targets) == 1:
            return [await self.run_target(source_path, target) for target in targets]
        return await self._run_parallel(source_path, targets)

    async def _run_parallel(self, source_path: str, targets: Sequence[str]) -> list[CoverageUnit]:
        tasks = [
            asyncio.create_task(self.run_target(source_path, target), name=f"coverage:{target}")
            for target in targets
        ]
        finished: list[asyncio.Task[CoverageUnit]] = []
        for task in tasks:
            task.add_done_callback(finished.append)
        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            await _cancel_all(tasks)
            raise

        # Done callbacks run in completion order.
        failed = [
            task
            for task in finished
            if task in done and not task.cancelled() and task.exception() is not None
        ]
        if failed:
            await _cancel_all(pending)
            error = failed[0].exception()
            logger.error("Coverage run for %s aborted: %s", source_path, error)
            raise error  # type: ignore[misc]

        return [task.result() for task in tasks]

    async def run_target(self, source_path: str, target: str) -> CoverageUnit:
        """Run one target and parse the coverage it produced for *source_path*.

        The runner enforces the timeout itself as well, so a service that
        overruns it still fails with CoverageRunTimeoutError.
        """
        try:
            result = await asyncio.wait_for(
                self._service.execute(target, timeout=self._timeout), timeout=self._timeout
            )
        except TimeoutError as exc:
            logger.warning("Coverage run for %s exceeded %ss", target, self._timeout)
            raise CoverageRunTimeoutError(target, self._timeout) from exc
        except SubprocessError as exc:
            raise TestExecutionError(target, exc.result.returncode, str(exc)) from exc

        if result.timed_out:
            raise CoverageRunTimeoutError(target, self._timeout)
        if result.exit_code != 0:
            raise TestExecutionError(target, result.exit_code, result.output)
        if result.artifact_path is None:
            raise CoverageParseError(f"No coverage data produced by {target}")

        logger.info("Coverage run for %s finished in %.0fms", target, result.duration_ms)
        return parse_coverage_file(result.artifact_path, source_path, target=target)


async def _cancel_all(tasks: Iterable[asyncio.Task[CoverageUnit]]) -> None:
    to_cancel = list(tasks)
    for task in to_cancel:
        task.cancel()
    await asyncio.gather(*to_cancel, return_exceptions=True)
