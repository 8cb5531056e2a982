"""Configuration parsing from ``.filecov.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from filecov.models.coverage import ReportFormat

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".filecov.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        elif isinstance(value, list):
            result[key] = [
                _resolve_env_vars(item) if isinstance(item, str) else item for item in value
            ]
        else:
            result[key] = value
    return result


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name, {})
    return value if isinstance(value, dict) else {}


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if str(item).strip()]


@dataclass
class ExecutionConfig:
    """Instrumented test execution settings."""

    bazel_command: str = "bazel"
    """Bazel executable (``bazel``, ``bazelisk`` or a wrapper script)."""

    process_timeout: float = 300.0
    """Seconds each instrumented test execution may take."""

    parallel: bool = True
    """Run the test targets of one source file concurrently."""


@dataclass
class ReportConfig:
    """Report output settings."""

    format: str = "markdown"
    """Default report format: markdown or html."""

    output_dir: str = "coverage_reports"
    """Directory, relative to the workspace root, that receives reports."""

    @property
    def report_format(self) -> ReportFormat:
        return ReportFormat.from_name(self.format)


@dataclass
class ExemptionsConfig:
    """Additional files exempt from the test-file requirement."""

    paths: list[str] = field(default_factory=list)
    """Workspace-relative paths, matched exactly."""

    suffixes: list[str] = field(default_factory=list)
    """Path suffixes, e.g. ``Module.kt``."""


@dataclass
class FileCovConfig:
    """Complete configuration from ``.filecov.yml``."""

    root: str
    """Workspace root the configuration was loaded for."""

    execution: ExecutionConfig = field(default_factory=ExecutionConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    exemptions: ExemptionsConfig = field(default_factory=ExemptionsConfig)

    def default_output_path(self, source_path: str, report_format: ReportFormat) -> Path:
        """Conventional report location for *source_path*.

        ``coverage/main/java/com/example/TwoSum.kt`` becomes
        ``<root>/coverage_reports/coverage/main/java/com/example/TwoSum/coverage.md``.
        """
        without_extension = source_path.rsplit(".", 1)[0] if "." in Path(source_path).name else source_path
        return (
            Path(self.root)
            / self.report.output_dir
            / without_extension
            / f"coverage.{report_format.extension}"
        )


def load_config(root: str | Path) -> FileCovConfig:
    """Load ``.filecov.yml`` from *root*, falling back to defaults.

    ``FILECOV_BAZEL`` and ``FILECOV_TIMEOUT`` environment variables provide
    defaults for values the file does not set.
    """
    root_path = Path(root).resolve()
    config_file = root_path / CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_file.is_file():
        parsed = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)
        elif parsed is not None:
            logger.warning("Ignoring %s: top level is not a mapping", config_file)

    execution_raw = _section(raw, "execution")
    execution = ExecutionConfig(
        bazel_command=str(
            execution_raw.get("bazel_command", os.environ.get("FILECOV_BAZEL", "bazel"))
        ),
        process_timeout=float(
            execution_raw.get("process_timeout", os.environ.get("FILECOV_TIMEOUT", 300.0))
        ),
        parallel=bool(execution_raw.get("parallel", True)),
    )

    report_raw = _section(raw, "report")
    report = ReportConfig(
        format=str(report_raw.get("format", "markdown")),
        output_dir=str(report_raw.get("output_dir", "coverage_reports")),
    )

    exemptions_raw = _section(raw, "exemptions")
    exemptions = ExemptionsConfig(
        paths=_string_list(exemptions_raw.get("paths", [])),
        suffixes=_string_list(exemptions_raw.get("suffixes", [])),
    )

    return FileCovConfig(
        root=str(root_path),
        execution=execution,
        report=report,
        exemptions=exemptions,
    )


def validate_config(config: FileCovConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []

    if config.execution.process_timeout <= 0:
        errors.append(
            f"execution.process_timeout must be positive (got: {config.execution.process_timeout})"
        )
    if not config.execution.bazel_command.strip():
        errors.append("execution.bazel_command must not be empty")

    try:
        ReportFormat.from_name(config.report.format)
    except ValueError:
        errors.append(
            f"report.format must be one of: markdown, html (got: {config.report.format})"
        )
    if not config.report.output_dir.strip():
        errors.append("report.output_dir must not be empty")

    return errors
