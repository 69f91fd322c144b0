"""Tests for task similarity."""

import pytest

from todiff.matching.similarity import (
    TaskMatcher,
    compare_3way,
    is_admissible,
    is_perfect_match,
    levenshtein,
)
from todiff.parsing import parse_task


def cmp3(reference: str, left: str, right: str) -> int:
    return compare_3way(parse_task(reference), parse_task(left), parse_task(right))


class TestLevenshtein:
    """Tests for the edit distance."""

    def test_known_distances(self):
        """Test classic edit distances."""
        assert levenshtein("kitten", "sitting") == 3
        assert levenshtein("do a thing", "do an thing") == 1
        assert levenshtein("flaw", "lawn") == 2

    def test_empty_strings(self):
        """Test distance to the empty string is the length."""
        assert levenshtein("", "") == 0
        assert levenshtein("", "abc") == 3
        assert levenshtein("abc", "") == 3

    def test_symmetry(self):
        """Test the distance does not depend on argument order."""
        assert levenshtein("eat a hamburger", "drink a hamburger") == levenshtein(
            "drink a hamburger", "eat a hamburger"
        )


class TestCompare3Way:
    """Tests for closeness ordering."""

    def test_closer_is_less(self):
        """Test the task closest to the reference comes first."""
        assert cmp3("do a thing", "do a thing", "do an thing") == -1
        assert cmp3("do a thing", "do an thing", "do a thingie") == -1
        assert cmp3("do a thing", "do an thing", "do a thing") == 1

    def test_only_subject_counts(self):
        """Test completion and dates do not affect closeness."""
        assert cmp3("do a thing", "x do a thing", "do any thing") == -1
        assert cmp3("do a thing", "x 2020-01-01 do a thing", "(A) do a thing") == 0

    def test_tie_is_equal(self):
        """Test equal distances compare equal."""
        assert cmp3("do a thing", "do b thing", "do c thing") == 0


class TestAdmissibility:
    """Tests for admissibility under a divergence threshold."""

    def test_zero_divergence_requires_same_subject(self):
        """Test a divergence of 0 only admits identical subjects."""
        reference = parse_task("do a thing")
        assert is_admissible(parse_task("x do a thing"), reference, 0)
        assert not is_admissible(parse_task("do an thing"), reference, 0)

    def test_threshold_is_inclusive(self):
        """Test the bound is distance * 100 <= divergence * len(reference)."""
        candidate = parse_task("do an thing")
        reference = parse_task("do a thing")
        assert is_admissible(candidate, reference, 10)
        assert not is_admissible(candidate, reference, 9)

    def test_reference_length_scales_tolerance(self):
        """Test the tolerance is relative to the reference subject."""
        short = parse_task("do a thing")
        long = parse_task("do an thing")
        assert is_admissible(short, long, 10)
        assert is_admissible(long, short, 10)

    def test_length_gap_rejected(self):
        """Test a large length difference alone rejects the pair."""
        assert not is_admissible(parse_task("a"), parse_task("abcdefghij"), 50)
        assert is_admissible(parse_task("a"), parse_task("abcdefghij"), 90)

    def test_full_divergence_admits_everything(self):
        """Test a divergence of 100 admits any pair of same-length subjects."""
        assert is_admissible(parse_task("abc"), parse_task("xyz"), 100)

    def test_delete_scenario(self):
        """Test unrelated subjects are not admissible at 30%."""
        assert not is_admissible(parse_task("do a thing"), parse_task("what is this ?"), 30)

    @pytest.mark.parametrize(
        "candidate,reference",
        [
            ("do a thing", "do an thing"),
            ("eat a hamburger", "drink a hamburger"),
            ("do a thing", "what is this ?"),
            ("buy milk", "buy more milk"),
            ("a", "abcdefghij"),
        ],
    )
    def test_monotonic_in_divergence(self, candidate, reference):
        """Test raising the divergence never makes a pair inadmissible."""
        c, r = parse_task(candidate), parse_task(reference)
        admitted = False
        for divergence in range(0, 101):
            now = is_admissible(c, r, divergence)
            assert now or not admitted
            admitted = now


class TestTaskMatcher:
    """Tests for the matcher adapter."""

    def test_perfect_match_is_equality(self):
        """Test only structurally equal tasks are perfect matches."""
        assert is_perfect_match(parse_task("(A) foo due:2020-01-01"), parse_task("(A) foo due:2020-01-01"))
        assert not is_perfect_match(parse_task("(A) foo"), parse_task("(B) foo"))

    def test_delegates_to_oracle(self):
        """Test the matcher uses the configured divergence."""
        matcher = TaskMatcher(allowed_divergence=10)
        assert matcher.is_admissible(parse_task("do a thing"), parse_task("do an thing"))
        assert not TaskMatcher(0).is_admissible(parse_task("do a thing"), parse_task("do an thing"))
        assert matcher.compare_targets(
            parse_task("do a thing"), parse_task("do a thing"), parse_task("do an thing")
        ) < 0
        assert matcher.compare_proposers(
            parse_task("do a thing"), parse_task("do an thing"), parse_task("do a thing")
        ) > 0
