"""Deterministic analysis engines: pattern detection and connection suggestions."""

from .patterns import PatternDetector
from .suggestions import SuggestionEngine, merge_suggestions

__all__ = [
    "PatternDetector",
    "SuggestionEngine",
    "merge_suggestions",
]
