"""Merging and classification of per-line coverage."""

from filecov.aggregation.classifier import classify, classify_line, split_physical_lines
from filecov.aggregation.merger import merge_into, merge_units

__all__ = ["classify", "classify_line", "merge_into", "merge_units", "split_physical_lines"]
