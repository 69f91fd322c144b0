"""Similarity between tasks, used to decide which tasks correspond."""

from typing import List

from todiff.matching.stable_marriage import BaseMatcher
from todiff.models.task import Task


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings (insertions, deletions, substitutions)."""
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous: List[int] = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (ca != cb),
                )
            )
        previous = current
    return previous[-1]


def is_admissible(candidate: Task, reference: Task, allowed_divergence: int) -> bool:
    """Whether two tasks are similar enough to be the same task.

    The subjects may differ by at most ``allowed_divergence`` percent of the
    length of the reference subject, in edit distance.

    Args:
        candidate: Task being considered
        reference: Task whose subject length scales the tolerance
        allowed_divergence: 100 minus the similarity index, between 0 and 100
    """
    ref_len = len(reference.subject)
    bound = allowed_divergence * ref_len
    # The edit distance is at least the difference between the lengths
    if 100 * abs(ref_len - len(candidate.subject)) > bound:
        return False
    return levenshtein(candidate.subject, reference.subject) * 100 <= bound


def compare_3way(reference: Task, left: Task, right: Task) -> int:
    """Order ``left`` and ``right`` by closeness to ``reference``.

    Returns:
        -1 if ``left`` is closer, 1 if ``right`` is closer, 0 on a tie
    """
    left_distance = levenshtein(left.subject, reference.subject)
    right_distance = levenshtein(right.subject, reference.subject)
    return (left_distance > right_distance) - (left_distance < right_distance)


def is_perfect_match(x: Task, y: Task) -> bool:
    return x == y


class TaskMatcher(BaseMatcher[Task, Task]):
    """Matching preferences between an old and a new list of tasks."""

    def __init__(self, allowed_divergence: int) -> None:
        """Initialize the matcher.

        Args:
            allowed_divergence: 100 minus the similarity index, between 0 and 100
        """
        self.allowed_divergence = allowed_divergence

    def is_admissible(self, proposer: Task, target: Task) -> bool:
        return is_admissible(proposer, target, self.allowed_divergence)

    def is_perfect_match(self, proposer: Task, target: Task) -> bool:
        return is_perfect_match(proposer, target)

    def compare_targets(self, proposer: Task, left: Task, right: Task) -> int:
        return compare_3way(proposer, left, right)

    def compare_proposers(self, target: Task, left: Task, right: Task) -> int:
        return compare_3way(target, left, right)
