"""Tests for TestResolver — source file to test file resolution."""

from __future__ import annotations

import pytest

from filecov.agents.analyzers.exemptions import ExemptionRegistry
from filecov.agents.analyzers.test_resolver import (
    DEFAULT_CONVENTIONS,
    TestConvention,
    TestResolver,
)
from filecov.errors import FileCoverageError, NoTestFileFoundError, SourceFileNotFoundError


def _resolver(*existing: str, **kwargs: object) -> TestResolver:
    paths = set(existing)
    return TestResolver(paths.__contains__, **kwargs)  # type: ignore[arg-type]


# ── Candidate enumeration ─────────────────────────────────────────


class TestCandidates:
    def test_plain_main_to_test(self) -> None:
        candidates = _resolver().candidates("coverage/main/java/com/example/TwoSum.kt")
        assert [(c.convention, c.relative_path) for c in candidates] == [
            ("primary", "coverage/test/java/com/example/TwoSumTest.kt"),
        ]

    def test_scripts_java_to_javatests(self) -> None:
        candidates = _resolver().candidates("scripts/java/com/example/TwoSum.kt")
        assert [(c.convention, c.relative_path) for c in candidates] == [
            ("scripts", "scripts/javatests/com/example/TwoSumTest.kt"),
        ]

    def test_app_has_shared_primary_and_local(self) -> None:
        candidates = _resolver().candidates("app/main/java/com/example/TwoSum.kt")
        assert [(c.convention, c.relative_path) for c in candidates] == [
            ("shared", "app/sharedTest/java/com/example/TwoSumTest.kt"),
            ("primary", "app/test/java/com/example/TwoSumTest.kt"),
            ("local", "app/test/java/com/example/TwoSumLocalTest.kt"),
        ]

    def test_preserves_java_extension(self) -> None:
        candidates = _resolver().candidates("domain/src/main/java/org/Foo.java")
        assert [c.relative_path for c in candidates] == ["domain/src/test/java/org/FooTest.java"]

    def test_no_source_root_segment_means_no_candidates(self) -> None:
        assert _resolver().candidates("file.kt") == []

    def test_only_first_segment_replaced(self) -> None:
        candidates = _resolver().candidates("lib/main/java/main/Foo.kt")
        assert [c.relative_path for c in candidates] == ["lib/test/java/main/FooTest.kt"]

    def test_presence_comes_from_exists_callable(self) -> None:
        resolver = _resolver("app/test/java/com/example/TwoSumLocalTest.kt")
        candidates = resolver.candidates("app/main/java/com/example/TwoSum.kt")
        assert [c.present for c in candidates] == [False, False, True]

    def test_duplicate_candidates_reported_once(self) -> None:
        conventions = (
            TestConvention("a", lambda _: True, "/main/", "/test/"),
            TestConvention("b", lambda _: True, "/main/", "/test/"),
        )
        candidates = _resolver(conventions=conventions).candidates("x/main/Foo.kt")
        assert [c.convention for c in candidates] == ["a"]

    def test_custom_convention_table(self) -> None:
        conventions = (TestConvention("pytest", lambda p: p.endswith(".py"), "src/", "tests/"),)
        resolver = _resolver(conventions=conventions)
        convention = conventions[0]
        assert convention.candidate_for("src/pkg/mod.py") == "tests/pkg/modTest.py"
        assert resolver.candidates("lib/mod.kt") == []


def test_default_table_order() -> None:
    assert [c.name for c in DEFAULT_CONVENTIONS] == ["scripts", "shared", "primary", "local"]


# ── resolve() ─────────────────────────────────────────────────────


class TestResolve:
    def test_missing_source_raises(self) -> None:
        with pytest.raises(SourceFileNotFoundError, match="File doesn't exist") as exc_info:
            _resolver().resolve("file.kt")
        assert exc_info.value.path == "file.kt"
        assert isinstance(exc_info.value, FileNotFoundError)
        assert isinstance(exc_info.value, FileCoverageError)

    def test_no_test_file_raises(self) -> None:
        with pytest.raises(NoTestFileFoundError, match="No appropriate test file found"):
            _resolver("file.kt").resolve("file.kt")

    def test_no_test_file_lists_candidates(self) -> None:
        source = "coverage/main/java/com/example/TwoSum.kt"
        with pytest.raises(NoTestFileFoundError) as exc_info:
            _resolver(source).resolve(source)
        assert exc_info.value.candidates == ["coverage/test/java/com/example/TwoSumTest.kt"]

    def test_single_present_target(self) -> None:
        source = "coverage/main/java/com/example/TwoSum.kt"
        resolution = _resolver(source, "coverage/test/java/com/example/TwoSumTest.kt").resolve(
            source
        )
        assert not resolution.exempt
        assert resolution.targets == ["//coverage/test/java/com/example:TwoSumTest"]

    def test_all_present_candidates_contribute(self) -> None:
        source = "app/main/java/com/example/TwoSum.kt"
        resolution = _resolver(
            source,
            "app/sharedTest/java/com/example/TwoSumTest.kt",
            "app/test/java/com/example/TwoSumLocalTest.kt",
        ).resolve(source)
        assert resolution.targets == [
            "//app/sharedTest/java/com/example:TwoSumTest",
            "//app/test/java/com/example:TwoSumLocalTest",
        ]
        assert len(resolution.candidates) == 3

    def test_exempt_file_short_circuits(self) -> None:
        registry = ExemptionRegistry(paths=frozenset({"app/main/java/di/AppComponent.kt"}))
        resolution = _resolver("app/main/java/di/AppComponent.kt", exemptions=registry).resolve(
            "app/main/java/di/AppComponent.kt"
        )
        assert resolution.exempt
        assert resolution.present == []

    def test_exempt_file_without_tests_never_raises(self) -> None:
        exempt = "app/src/main/java/org/oppia/android/app/activity/ActivityComponent.kt"
        # Neither the file nor any test exists.
        resolution = _resolver().resolve(exempt)
        assert resolution.exempt

    def test_normalizes_source_path(self) -> None:
        source = "coverage/main/java/com/example/TwoSum.kt"
        resolution = _resolver(source, "coverage/test/java/com/example/TwoSumTest.kt").resolve(
            "./" + source
        )
        assert resolution.source_path == source
