"""Three-way merge of todo.txt files."""

from typing import List, Optional, Sequence

import structlog

from todiff.changes.changeset import compute_changeset
from todiff.changes.classifier import remove_common
from todiff.models.changes import MergeResult
from todiff.models.task import Task
from todiff.parsing.todotxt import serialize_task

logger = structlog.get_logger(__name__)

CONFLICT_START = "<<<<<"
CONFLICT_ANCESTOR = "|||||"
CONFLICT_SEPARATOR = "====="
CONFLICT_END = ">>>>>"


def _merge_new_tasks(left: List[Task], right: List[Task]) -> List[Task]:
    """Combine the new tasks of both sides, keeping one copy of shared ones."""
    only_left, only_right = remove_common(left, right)
    shared, _ = remove_common(left, only_left)
    return shared + only_left + only_right


def merge_3way(
    ancestor: Sequence[Task],
    left: Sequence[Task],
    right: Sequence[Task],
    allowed_divergence: int,
) -> List[MergeResult]:
    """Merge two descendants of a common task list.

    Ancestor tasks changed on a single side take that side's version; tasks
    changed on both sides are reported as conflicts. Tasks new on either
    side are appended.

    Args:
        ancestor: Common ancestor
        left: First descendant
        right: Second descendant
        allowed_divergence: 100 minus the similarity index, between 0 and 100

    Returns:
        Merge results, ancestor tasks first then new tasks
    """
    new_left, changes_left = compute_changeset(
        ancestor, left, allowed_divergence, include_identical=True
    )
    new_right, changes_right = compute_changeset(
        ancestor, right, allowed_divergence, include_identical=True
    )

    results: List[MergeResult] = []
    for left_change, right_change in zip(changes_left, changes_right):
        left_delta = left_change.delta
        right_delta = right_change.delta
        if left_delta.is_trivial and right_delta.is_trivial:
            results.append(MergeResult.merged(left_change.original))
        elif left_delta.is_trivial:
            results.extend(MergeResult.merged(t) for t in right_delta.tasks)
        elif right_delta.is_trivial:
            results.extend(MergeResult.merged(t) for t in left_delta.tasks)
        else:
            logger.debug("merge_conflict", ancestor=str(left_change.original))
            results.append(MergeResult.conflict(left_change.original, left_delta, right_delta))

    results.extend(MergeResult.merged(t) for t in _merge_new_tasks(new_left, new_right))
    return results


def merge_to_string(results: Sequence[MergeResult]) -> str:
    """Serialize merge results, with conflict markers around conflicts."""
    lines: List[str] = []
    for result in results:
        if not result.is_conflict:
            lines.append(serialize_task(result.task))
            continue
        lines.append(CONFLICT_START)
        lines.extend(serialize_task(t) for t in result.left)
        lines.append(CONFLICT_ANCESTOR)
        lines.append(serialize_task(result.task))
        lines.append(CONFLICT_SEPARATOR)
        lines.extend(serialize_task(t) for t in result.right)
        lines.append(CONFLICT_END)
    return "\n".join(lines)


def merge_successful(results: Sequence[MergeResult]) -> bool:
    return not any(result.is_conflict for result in results)


def extract_merge_result(results: Sequence[MergeResult]) -> Optional[List[Task]]:
    """Tasks of a merge without conflicts, or None if any conflict remains."""
    if not merge_successful(results):
        return None
    return [result.task for result in results]
