"""Runners coordinating instrumented test executions."""

from filecov.agents.runners.coverage_runner import DEFAULT_PROCESS_TIMEOUT, CoverageRunner

__all__ = ["DEFAULT_PROCESS_TIMEOUT", "CoverageRunner"]
