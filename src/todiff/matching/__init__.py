"""Correspondence between tasks of two lists."""

from todiff.matching.similarity import (
    TaskMatcher,
    compare_3way,
    is_admissible,
    is_perfect_match,
    levenshtein,
)
from todiff.matching.stable_marriage import BaseMatcher, Matching, stable_marriage

__all__ = [
    "BaseMatcher",
    "Matching",
    "stable_marriage",
    "TaskMatcher",
    "levenshtein",
    "is_admissible",
    "compare_3way",
    "is_perfect_match",
]
