"""Tests for configuration parsing (config.py)."""

from __future__ import annotations

from pathlib import Path

import pytest

from filecov.config import (
    CONFIG_FILENAME,
    FileCovConfig,
    load_config,
    validate_config,
)
from filecov.models.coverage import ReportFormat
from tests.conftest import write_file


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FILECOV_BAZEL", raising=False)
    monkeypatch.delenv("FILECOV_TIMEOUT", raising=False)


def test_defaults_without_file(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config.root == str(tmp_path.resolve())
    assert config.execution.bazel_command == "bazel"
    assert config.execution.process_timeout == 300.0
    assert config.execution.parallel is True
    assert config.report.report_format is ReportFormat.MARKDOWN
    assert config.report.output_dir == "coverage_reports"
    assert config.exemptions.paths == []
    assert validate_config(config) == []


def test_full_file(tmp_path: Path) -> None:
    write_file(
        tmp_path,
        CONFIG_FILENAME,
        """\
execution:
  bazel_command: bazelisk
  process_timeout: 90
  parallel: false
report:
  format: html
  output_dir: build/coverage
exemptions:
  paths:
    - app/main/java/di/AppModule.kt
  suffixes:
    - Scope.kt
""",
    )
    config = load_config(tmp_path)

    assert config.execution.bazel_command == "bazelisk"
    assert config.execution.process_timeout == 90.0
    assert config.execution.parallel is False
    assert config.report.report_format is ReportFormat.HTML
    assert config.report.output_dir == "build/coverage"
    assert config.exemptions.paths == ["app/main/java/di/AppModule.kt"]
    assert config.exemptions.suffixes == ["Scope.kt"]


def test_env_var_placeholders(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MY_BAZEL", "/opt/bazel/bin/bazel")
    write_file(tmp_path, CONFIG_FILENAME, "execution:\n  bazel_command: ${MY_BAZEL}\n")

    assert load_config(tmp_path).execution.bazel_command == "/opt/bazel/bin/bazel"


def test_unset_env_var_becomes_empty(tmp_path: Path) -> None:
    write_file(tmp_path, CONFIG_FILENAME, "execution:\n  bazel_command: ${FILECOV_UNSET_VAR}\n")
    config = load_config(tmp_path)

    assert config.execution.bazel_command == ""
    assert validate_config(config) == ["execution.bazel_command must not be empty"]


def test_environment_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FILECOV_BAZEL", "bazelisk")
    monkeypatch.setenv("FILECOV_TIMEOUT", "45")
    config = load_config(tmp_path)

    assert config.execution.bazel_command == "bazelisk"
    assert config.execution.process_timeout == 45.0


def test_file_wins_over_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FILECOV_TIMEOUT", "45")
    write_file(tmp_path, CONFIG_FILENAME, "execution:\n  process_timeout: 600\n")

    assert load_config(tmp_path).execution.process_timeout == 600.0


def test_non_mapping_file_is_ignored(tmp_path: Path) -> None:
    write_file(tmp_path, CONFIG_FILENAME, "- just\n- a list\n")
    assert load_config(tmp_path).execution.bazel_command == "bazel"


def test_validation_errors(tmp_path: Path) -> None:
    write_file(
        tmp_path,
        CONFIG_FILENAME,
        "execution:\n  process_timeout: 0\nreport:\n  format: pdf\n  output_dir: ' '\n",
    )
    errors = validate_config(load_config(tmp_path))

    assert errors == [
        "execution.process_timeout must be positive (got: 0.0)",
        "report.format must be one of: markdown, html (got: pdf)",
        "report.output_dir must not be empty",
    ]


class TestDefaultOutputPath:
    def test_markdown(self, tmp_path: Path) -> None:
        config = FileCovConfig(root=str(tmp_path))
        assert config.default_output_path(
            "coverage/main/java/com/example/TwoSum.kt", ReportFormat.MARKDOWN
        ) == tmp_path / "coverage_reports/coverage/main/java/com/example/TwoSum/coverage.md"

    def test_html(self, tmp_path: Path) -> None:
        config = FileCovConfig(root=str(tmp_path))
        assert config.default_output_path("scripts/java/a/B.kt", ReportFormat.HTML) == (
            tmp_path / "coverage_reports/scripts/java/a/B/coverage.html"
        )

    def test_without_extension(self, tmp_path: Path) -> None:
        config = FileCovConfig(root=str(tmp_path))
        assert config.default_output_path("tools/BUILD", ReportFormat.MARKDOWN) == (
            tmp_path / "coverage_reports/tools/BUILD/coverage.md"
        )
