"""Registry of source files that are not required to have a test file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from filecov.utils.workspace import normalize_relative

logger = logging.getLogger(__name__)

EXEMPTION_MESSAGE = "This file is exempted from having a test file; skipping coverage check."

_APP_ROOT = "app/src/main/java/org/oppia/android/app"

# Dependency-injection scaffolding: generated wiring with no behaviour of its own.
DEFAULT_EXEMPT_PATHS: frozenset[str] = frozenset(
    {
        f"{_APP_ROOT}/activity/ActivityComponent.kt",
        f"{_APP_ROOT}/activity/ActivityComponentFactory.kt",
        f"{_APP_ROOT}/activity/ActivityIntentFactories.kt",
        f"{_APP_ROOT}/activity/ActivityScope.kt",
        f"{_APP_ROOT}/fragment/FragmentComponent.kt",
        f"{_APP_ROOT}/fragment/FragmentScope.kt",
        f"{_APP_ROOT}/view/ViewComponent.kt",
        f"{_APP_ROOT}/view/ViewScope.kt",
        f"{_APP_ROOT}/application/ApplicationComponent.kt",
    }
)


@dataclass(frozen=True)
class ExemptionRegistry:
    """Static set of exempt paths (exact match) and path suffixes."""

    paths: frozenset[str] = DEFAULT_EXEMPT_PATHS
    suffixes: tuple[str, ...] = field(default_factory=tuple)

    def is_exempt(self, path: str) -> bool:
        """Return True if *path* is exempt from the test-file requirement."""
        normalized = normalize_relative(path)
        if normalized in self.paths:
            logger.info("%s is exempt from having a test file", normalized)
            return True
        for suffix in self.suffixes:
            if normalized.endswith(normalize_relative(suffix)):
                logger.info("%s is exempt (matches suffix %s)", normalized, suffix)
                return True
        return False

    def extended(self, paths: list[str], suffixes: list[str]) -> ExemptionRegistry:
        """Return a registry with additional exact paths and suffixes."""
        return ExemptionRegistry(
            paths=self.paths | {normalize_relative(p) for p in paths},
            suffixes=self.suffixes + tuple(suffixes),
        )
