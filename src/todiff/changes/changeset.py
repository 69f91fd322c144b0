"""Detection of the changes between two snapshots of a task list.

Tasks are paired by a stable matching on subject similarity. Recurring
tasks may be paired with several new tasks, each one a later instance of
the same logical task; those are gathered into a chain of recurrences.
"""

from datetime import date
from typing import List, Optional, Sequence, Tuple

import structlog

from todiff.changes.classifier import changes_between
from todiff.matching.similarity import TaskMatcher, compare_3way, is_admissible
from todiff.matching.stable_marriage import stable_marriage
from todiff.models.changes import ChangedTask, DeltaKind, TaskDelta
from todiff.models.task import Task

logger = structlog.get_logger(__name__)


def _due_date_key(task: Task) -> Tuple[bool, date]:
    # Tasks without a due date come first
    return (task.due_date is not None, task.due_date or date.min)


def _provisional_delta(original: Task, match: Optional[Task]) -> TaskDelta:
    if match is None:
        return TaskDelta.deleted()
    if original == match:
        return TaskDelta.identical()
    if original.recurrence is not None and not original.completed:
        return TaskDelta.recurred([match])
    return TaskDelta.changed(match)


def fold_recurrences(
    new_tasks: Sequence[Task],
    matches: Sequence[ChangedTask],
    allowed_divergence: int,
) -> Tuple[List[Task], List[ChangedTask]]:
    """Attach new tasks that are later instances of a recurring task.

    Each new task similar enough to the original of a recurring delta joins
    the chain of the closest such original. Chains are then sorted by due
    date, and chains of a single task become plain changes.

    Args:
        new_tasks: Tasks of the new list that were not matched
        matches: Provisional deltas, with unclassified recurrence chains
        allowed_divergence: 100 minus the similarity index

    Returns:
        Tuple of (remaining new tasks, deltas with folded chains)
    """
    chains = {
        i: list(changed.delta.tasks)
        for i, changed in enumerate(matches)
        if changed.delta.kind == DeltaKind.RECURRED
    }

    remaining: List[Task] = []
    for task in new_tasks:
        best: Optional[int] = None
        for i in chains:
            original = matches[i].original
            if not is_admissible(original, task, allowed_divergence):
                continue
            if best is None or compare_3way(task, original, matches[best].original) < 0:
                best = i
        if best is None:
            remaining.append(task)
        else:
            chains[best].append(task)
            logger.debug("recurrence_folded", original=str(matches[best].original), task=str(task))

    folded: List[ChangedTask] = []
    for i, changed in enumerate(matches):
        if i not in chains:
            folded.append(changed)
            continue
        chain = sorted(chains[i], key=_due_date_key)
        if len(chain) == 1:
            delta = TaskDelta.changed(chain[0])
        else:
            delta = TaskDelta.recurred(chain)
        folded.append(ChangedTask(original=changed.original, delta=delta))

    return remaining, folded


def match_tasks(
    from_tasks: Sequence[Task],
    to_tasks: Sequence[Task],
    allowed_divergence: int,
) -> Tuple[List[Task], List[ChangedTask]]:
    """Pair the tasks of two lists, without classifying the changes.

    Args:
        from_tasks: Tasks of the old list
        to_tasks: Tasks of the new list
        allowed_divergence: 100 minus the similarity index, between 0 and 100

    Returns:
        Tuple of (new tasks, one delta per old task in order), where the
        deltas list the resulting tasks but no edits yet
    """
    matcher = TaskMatcher(allowed_divergence)
    matching = stable_marriage(from_tasks, to_tasks, matcher)

    matches = [
        ChangedTask(
            original=original,
            delta=_provisional_delta(original, None if j is None else to_tasks[j]),
        )
        for original, j in zip(from_tasks, matching.proposer_matches)
    ]
    new_tasks = [to_tasks[j] for j in matching.unmatched_targets]

    logger.debug(
        "tasks_matched",
        old=len(from_tasks),
        new=len(to_tasks),
        unmatched_old=len(matching.unmatched_proposers),
        unmatched_new=len(new_tasks),
    )

    return fold_recurrences(new_tasks, matches, allowed_divergence)


def classify(changed: ChangedTask) -> ChangedTask:
    """Compute the edits of a matched delta."""
    delta = changed.delta
    original = changed.original
    if delta.kind == DeltaKind.CHANGED:
        task = delta.tasks[0]
        delta = TaskDelta.changed(task, changes_between(original, task, is_first=True))
    elif delta.kind == DeltaKind.RECURRED:
        chain = delta.tasks
        edits = [changes_between(original, chain[0], is_first=True)]
        edits.extend(
            changes_between(previous, current, is_first=False)
            for previous, current in zip(chain, chain[1:])
        )
        delta = TaskDelta.recurred(chain, edits)
    return ChangedTask(original=original, delta=delta)


def compute_changeset(
    from_tasks: Sequence[Task],
    to_tasks: Sequence[Task],
    allowed_divergence: int,
    include_identical: bool = False,
) -> Tuple[List[Task], List[ChangedTask]]:
    """Describe what changed between two task lists.

    Args:
        from_tasks: Tasks before
        to_tasks: Tasks after
        allowed_divergence: 100 minus the similarity index, between 0 and 100
        include_identical: Keep the deltas of unchanged tasks in the result

    Returns:
        Tuple of (new tasks, changed tasks), changed tasks in the order of
        ``from_tasks``
    """
    new_tasks, matches = match_tasks(from_tasks, to_tasks, allowed_divergence)
    changes = [
        classify(changed)
        for changed in matches
        if include_identical or changed.delta.kind != DeltaKind.IDENTICAL
    ]
    return new_tasks, changes
