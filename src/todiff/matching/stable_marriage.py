"""Stable matching between two lists of items.

Implements an extended version of the Gale-Shapley algorithm
(https://en.wikipedia.org/wiki/Stable_marriage_problem) where an item only
ranks the items of the other list it is allowed to be matched with. The
lists need not be the same size, and items may remain unmatched.
"""

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Generic, List, Optional, Sequence, TypeVar

P = TypeVar("P")
T = TypeVar("T")


class BaseMatcher(ABC, Generic[P, T]):
    """Abstract base class for the preferences used by the matching."""

    @abstractmethod
    def is_admissible(self, proposer: P, target: T) -> bool:
        """Whether ``proposer`` and ``target`` may be matched together."""

    @abstractmethod
    def is_perfect_match(self, proposer: P, target: T) -> bool:
        """Whether the pair must be matched unconditionally."""

    @abstractmethod
    def compare_targets(self, proposer: P, left: T, right: T) -> int:
        """Order two targets by preference of ``proposer``.

        Returns:
            A negative number if ``left`` is preferred, a positive number if
            ``right`` is preferred, 0 if neither is
        """

    @abstractmethod
    def compare_proposers(self, target: T, left: P, right: P) -> int:
        """Order two proposers by preference of ``target``, like compare_targets."""


@dataclass
class _Proposer:
    # Remaining admissible targets, most preferred last
    prefs: List[int] = field(default_factory=list)


@dataclass
class Matching:
    """Result of a stable matching.

    Attributes:
        proposer_matches: For each proposer, index of its target or None
        target_matches: For each target, index of its proposer or None
    """

    proposer_matches: List[Optional[int]]
    target_matches: List[Optional[int]]

    @property
    def unmatched_proposers(self) -> List[int]:
        return [i for i, j in enumerate(self.proposer_matches) if j is None]

    @property
    def unmatched_targets(self) -> List[int]:
        return [j for j, i in enumerate(self.target_matches) if i is None]


def preference_list(
    proposer: P,
    targets: Sequence[T],
    matcher: BaseMatcher[P, T],
    excluded: Sequence[bool] = (),
) -> List[int]:
    """Indices of the targets admissible for ``proposer``, most preferred first.

    Targets the matcher considers equally good are ordered by index.
    """
    candidates = [
        j
        for j, target in enumerate(targets)
        if not (excluded and excluded[j]) and matcher.is_admissible(proposer, target)
    ]

    def compare(a: int, b: int) -> int:
        order = matcher.compare_targets(proposer, targets[a], targets[b])
        if order != 0:
            return order
        return (a > b) - (a < b)

    return sorted(candidates, key=cmp_to_key(compare))


def stable_marriage(
    proposers: Sequence[P],
    targets: Sequence[T],
    matcher: BaseMatcher[P, T],
) -> Matching:
    """Compute a stable matching between ``proposers`` and ``targets``.

    Perfect matches are bound first and never reconsidered. The remaining
    proposers then propose to their admissible targets in order of
    preference; a target holding a partner only switches to a proposer it
    strictly prefers.

    Args:
        proposers: Items proposing
        targets: Items being proposed to
        matcher: Admissibility and preference oracle

    Returns:
        The matching, as two parallel index arrays
    """
    proposer_matches: List[Optional[int]] = [None] * len(proposers)
    target_matches: List[Optional[int]] = [None] * len(targets)
    locked = [False] * len(targets)

    for i, proposer in enumerate(proposers):
        for j, target in enumerate(targets):
            if not locked[j] and matcher.is_perfect_match(proposer, target):
                proposer_matches[i] = j
                target_matches[j] = i
                locked[j] = True
                break

    arena: List[_Proposer] = []
    for i, proposer in enumerate(proposers):
        if proposer_matches[i] is not None:
            arena.append(_Proposer())
            continue
        prefs = preference_list(proposer, targets, matcher, excluded=locked)
        prefs.reverse()
        arena.append(_Proposer(prefs=prefs))

    free = deque(i for i, p in enumerate(arena) if p.prefs)
    while free:
        i = free.popleft()
        suitor = arena[i]
        while proposer_matches[i] is None and suitor.prefs:
            j = suitor.prefs.pop()
            current = target_matches[j]
            if current is None:
                proposer_matches[i] = j
                target_matches[j] = i
            elif matcher.compare_proposers(targets[j], proposers[i], proposers[current]) < 0:
                proposer_matches[current] = None
                proposer_matches[i] = j
                target_matches[j] = i
                if arena[current].prefs:
                    free.append(current)

    return Matching(proposer_matches=proposer_matches, target_matches=target_matches)
