"""Services that run test targets under coverage instrumentation."""

from filecov.adapters.execution.base import ExecutionResult, TestExecutionService
from filecov.adapters.execution.bazel import BazelExecutionService

__all__ = ["BazelExecutionService", "ExecutionResult", "TestExecutionService"]
