"""filecov — per-file line coverage for multi-layout repositories."""

__version__ = "0.3.0"
