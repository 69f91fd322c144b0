"""Classification of the differences between two versions of a task.

The raw field differences are folded into a small vocabulary of edits.
Rules run in a fixed order of precedence. Each rule returns the edits it
produced and the fields it accounted for, so that later rules do not
report the same difference twice (a completion with a date is reported as
"completed on D" rather than as a completion plus a new completion date).
"""

from typing import Callable, FrozenSet, List, Optional, Tuple, TypeVar

from todiff.changes.dates import add_recurrence, postponement
from todiff.models.changes import ChangeEdit
from todiff.models.task import Task

X = TypeVar("X")

# Field markers shared between rules
RECURRENCE = "recurrence"
COMPLETED = "completed"
COMPLETION_DATE = "completion_date"
DUE_DATE = "due_date"
THRESHOLD_DATE = "threshold_date"
CREATION_DATE = "creation_date"
FINISHED_AT = "finished_at"

RuleResult = Tuple[List[ChangeEdit], FrozenSet[str]]
Rule = Callable[[Task, Task, bool, FrozenSet[str]], RuleResult]

_NOTHING: RuleResult = ([], frozenset())


def remove_common(a: List[X], b: List[X]) -> Tuple[List[X], List[X]]:
    """Multiset difference of two lists, in both directions.

    Returns:
        The items of ``a`` missing from ``b`` and the items of ``b`` missing
        from ``a``, each in its original order
    """
    only_a: List[X] = []
    only_b = list(b)
    for item in a:
        if item in only_b:
            only_b.remove(item)
        else:
            only_a.append(item)
    return only_a, only_b


def _recurrence_rule(
    before: Task, after: Task, is_first: bool, consumed: FrozenSet[str]
) -> RuleResult:
    rec = before.recurrence
    if is_first or rec is None or rec != after.recurrence:
        return _NOTHING
    if postponement(before, after) is None:
        return _NOTHING

    if rec.strict:
        if add_recurrence(before.due_date, rec) != after.due_date:
            return _NOTHING
        edits = [ChangeEdit.recurred_strict()]
    elif after.creation_date is not None:
        if add_recurrence(after.creation_date, rec) != after.due_date:
            return _NOTHING
        edits = [ChangeEdit.recurred_from(after.creation_date)]
    else:
        return _NOTHING

    # The new instance starts open, so the recurrence accounts for the
    # completion fields and a completed instance was completed afresh
    fields = frozenset(
        {RECURRENCE, DUE_DATE, THRESHOLD_DATE, CREATION_DATE, COMPLETED, COMPLETION_DATE}
    )
    if after.completed:
        completion, completion_fields = _completion_rule(
            before.uncomplete(), after, is_first, consumed
        )
        edits.extend(completion or [ChangeEdit.finished(True)])
        fields |= completion_fields
    return edits, fields


def _copy_rule(
    before: Task, after: Task, is_first: bool, consumed: FrozenSet[str]
) -> RuleResult:
    if is_first or RECURRENCE in consumed:
        return _NOTHING
    return [ChangeEdit.copied()], frozenset()


def _completion_rule(
    before: Task, after: Task, is_first: bool, consumed: FrozenSet[str]
) -> RuleResult:
    if (
        not before.completed
        and after.completed
        and before.completion_date is None
        and after.completion_date is not None
    ):
        return (
            [ChangeEdit.finished_at(after.completion_date)],
            frozenset({FINISHED_AT, COMPLETED, COMPLETION_DATE}),
        )
    return _NOTHING


def _postponement_rule(
    before: Task, after: Task, is_first: bool, consumed: FrozenSet[str]
) -> RuleResult:
    if DUE_DATE in consumed or before.due_date == after.due_date:
        return _NOTHING
    delta = postponement(before, after)
    if delta is None:
        return _NOTHING
    return [ChangeEdit.postponed_strict_by(delta)], frozenset({DUE_DATE, THRESHOLD_DATE})


def _field_rule(
    name: str, make_edit: Callable[[Task, Task], ChangeEdit]
) -> Rule:
    def rule(
        before: Task, after: Task, is_first: bool, consumed: FrozenSet[str]
    ) -> RuleResult:
        if name in consumed or getattr(before, name) == getattr(after, name):
            return _NOTHING
        return [make_edit(before, after)], frozenset({name})

    return rule


def _priority_rule(
    before: Task, after: Task, is_first: bool, consumed: FrozenSet[str]
) -> RuleResult:
    if before.priority == after.priority:
        return _NOTHING
    # Completing a task usually drops its priority
    if FINISHED_AT in consumed and after.priority_letter is None:
        return _NOTHING
    return [ChangeEdit.priority(before.priority_letter, after.priority_letter)], frozenset()


def _tags_rule(
    before: Task, after: Task, is_first: bool, consumed: FrozenSet[str]
) -> RuleResult:
    removed, added = remove_common(list(before.tags), list(after.tags))
    if not removed and not added:
        return _NOTHING
    return [ChangeEdit.tags(removed, added)], frozenset()


def _subject_rule(
    before: Task, after: Task, is_first: bool, consumed: FrozenSet[str]
) -> RuleResult:
    if before.subject == after.subject:
        return _NOTHING
    return [ChangeEdit.subject(before.subject, after.subject)], frozenset()


RULES: List[Rule] = [
    _recurrence_rule,
    _copy_rule,
    _completion_rule,
    _postponement_rule,
    _field_rule(
        THRESHOLD_DATE, lambda b, a: ChangeEdit.threshold_date(b.threshold_date, a.threshold_date)
    ),
    _field_rule(DUE_DATE, lambda b, a: ChangeEdit.due_date(b.due_date, a.due_date)),
    _field_rule(COMPLETED, lambda b, a: ChangeEdit.finished(a.completed)),
    _field_rule(
        COMPLETION_DATE, lambda b, a: ChangeEdit.finish_date(b.completion_date, a.completion_date)
    ),
    _priority_rule,
    _field_rule(
        CREATION_DATE, lambda b, a: ChangeEdit.create_date(b.creation_date, a.creation_date)
    ),
    _tags_rule,
    _subject_rule,
]


def changes_between(
    before: Task, after: Task, is_first: bool = True, rules: Optional[List[Rule]] = None
) -> List[ChangeEdit]:
    """Semantic edits turning ``before`` into ``after``.

    Args:
        before: Earlier version of the task
        after: Later version of the task
        is_first: False when ``after`` is a later instance in a chain of
            recurrences, in which case it is either recognized as a
            recurrence of ``before`` or reported as a copy
        rules: Rules to apply, in order of precedence (defaults to RULES)

    Returns:
        Edits in order of precedence, empty if the tasks are identical
    """
    edits: List[ChangeEdit] = []
    consumed: FrozenSet[str] = frozenset()
    for rule in RULES if rules is None else rules:
        rule_edits, rule_fields = rule(before, after, is_first, consumed)
        edits.extend(rule_edits)
        consumed |= rule_fields
    return edits
