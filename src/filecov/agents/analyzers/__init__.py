"""Analyzers that decide which tests contribute coverage to a source file."""

from filecov.agents.analyzers.exemptions import (
    DEFAULT_EXEMPT_PATHS,
    EXEMPTION_MESSAGE,
    ExemptionRegistry,
)
from filecov.agents.analyzers.test_resolver import (
    DEFAULT_CONVENTIONS,
    Resolution,
    TestConvention,
    TestResolver,
)

__all__ = [
    "DEFAULT_CONVENTIONS",
    "DEFAULT_EXEMPT_PATHS",
    "EXEMPTION_MESSAGE",
    "ExemptionRegistry",
    "Resolution",
    "TestConvention",
    "TestResolver",
]
