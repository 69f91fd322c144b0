"""Human-readable report of a changeset."""

from datetime import date
from difflib import SequenceMatcher
from typing import List, Sequence, Tuple

from rich.text import Text

from todiff.changes.classifier import changes_between
from todiff.models.changes import ChangedTask, ChangeEdit, ChangeKind, DeltaKind, TaskDelta
from todiff.models.task import Task
from todiff.parsing.todotxt import serialize_task

ARROW = "→"


def _join_tags(tags: Sequence[Tuple[str, str]]) -> str:
    items = [f"{key}:{value}" for key, value in tags]
    if len(items) <= 1:
        return "".join(items)
    return ", ".join(items[:-1]) + " and " + items[-1]


def _describe_tags(removed: Sequence[Tuple[str, str]], added: Sequence[Tuple[str, str]]) -> str:
    parts = []
    if removed:
        label = "removed tag " if len(removed) == 1 else "removed tags "
        parts.append(label + _join_tags(removed))
    if added:
        label = "added tag " if len(added) == 1 else "added tags "
        parts.append(label + _join_tags(added))
    return " and ".join(parts)


def _describe_pair(noun: str, before, after) -> str:
    if after is None:
        return f"removed {noun}"
    if before is None:
        return f"added {noun} {after}"
    return f"set {noun} to {after}"


def describe_change(edit: ChangeEdit, colorize: bool = False) -> Text:
    """Short description of an edit, e.g. ``completed on 2018-04-08``."""
    kind = edit.kind
    if kind == ChangeKind.CREATED:
        return Text("created")
    if kind == ChangeKind.COPIED:
        return Text("copied")
    if kind == ChangeKind.RECURRED_STRICT:
        return Text("recurred (strict)")
    if kind == ChangeKind.RECURRED_FROM:
        return Text(f"recurred (from {edit.after})")
    if kind == ChangeKind.FINISHED_AT:
        return Text(f"completed on {edit.after}")
    if kind == ChangeKind.POSTPONED_STRICT_BY:
        return Text(f"postponed (strict) by {edit.after.days} days")
    if kind == ChangeKind.FINISHED:
        return Text("completed" if edit.after else "uncompleted")
    if kind == ChangeKind.PRIORITY:
        if edit.after is None:
            return Text("removed priority")
        if edit.before is None:
            return Text(f"added priority ({edit.after})")
        return Text(f"set priority to ({edit.after})")
    if kind == ChangeKind.FINISH_DATE:
        return Text(_describe_pair("completion date", edit.before, edit.after))
    if kind == ChangeKind.CREATE_DATE:
        return Text(_describe_pair("creation date", edit.before, edit.after))
    if kind == ChangeKind.THRESHOLD_DATE:
        return Text(_describe_pair("threshold date", edit.before, edit.after))
    if kind == ChangeKind.DUE_DATE:
        if edit.after is None:
            return Text("removed due date")
        if edit.before is None:
            return Text(f"added due date {edit.after}")
        return Text(f"postponed to {edit.after}")
    if kind == ChangeKind.TAGS:
        return Text(_describe_tags(edit.before, edit.after))
    if kind == ChangeKind.SUBJECT:
        if not colorize:
            return Text(f"set subject to ‘{edit.after}’")
        return _subject_diff(edit.before, edit.after)
    raise ValueError(f"Unknown change kind: {kind}")


def _subject_diff(before: str, after: str) -> Text:
    text = Text("changed subject ‘")
    matcher = SequenceMatcher(a=before, b=after, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            text.append(before[i1:i2])
            continue
        if i2 > i1:
            text.append(before[i1:i2], style="on red")
        if j2 > j1:
            text.append(after[j1:j2], style="on green")
    text.append("’")
    return text


def describe_changes(edits: Sequence[ChangeEdit], colorize: bool = False) -> Text:
    """One report line for an edit list: ``    → Completed on D and ...``."""
    line = Text(f"    {ARROW} ")
    for n, edit in enumerate(edits):
        description = describe_change(edit, colorize)
        if n == 0:
            plain = description.plain
            if plain:
                description = description.copy()
                description.plain = plain[0].upper() + plain[1:]
        elif n == len(edits) - 1:
            line.append(" and ")
        else:
            line.append(", ")
        line.append_text(description)
    return line


def _task_line(task: Task, style: str, colorize: bool) -> Text:
    line = Text(f" {ARROW} ")
    line.append(serialize_task(task), style=style if colorize and style else None)
    return line


def _creation_key(task: Task) -> Tuple[bool, date]:
    return (task.creation_date is not None, task.creation_date or date.min)


def render_changeset(
    new_tasks: Sequence[Task],
    changes: Sequence[ChangedTask],
    colorize: bool = False,
) -> List[Text]:
    """Report lines describing a changeset, grouped by category.

    Args:
        new_tasks: Tasks only present in the new list
        changes: Deltas of the tasks of the old list
        colorize: Whether to style the lines

    Returns:
        Lines of the report
    """
    completed_new = [t for t in new_tasks if t.completed]
    category_new = sorted((t for t in new_tasks if not t.completed), key=_creation_key)
    category_deleted = [c.original for c in changes if c.delta.kind == DeltaKind.DELETED]

    category_completed = [c for c in changes if c.has_recurred or c.has_been_completed]
    for task in completed_new:
        uncompleted = task.uncomplete()
        edits = [ChangeEdit.created()] + changes_between(uncompleted, task, is_first=True)
        category_completed.append(
            ChangedTask(original=uncompleted, delta=TaskDelta.changed(task, edits))
        )

    # Tasks that only differ by tag order carry no edit
    category_changed = [
        c
        for c in changes
        if c.delta.kind not in (DeltaKind.IDENTICAL, DeltaKind.DELETED)
        and c.delta.edits
        and not c.has_recurred
        and not c.has_been_completed
    ]

    lines: List[Text] = []

    def heading(title: str) -> None:
        if lines:
            lines.append(Text(""))
        lines.append(Text(title, style="bold" if colorize else ""))
        lines.append(Text("-" * len(title)))

    if category_new:
        heading("New tasks")
        lines.append(Text(""))
        lines.extend(_task_line(t, "green", colorize) for t in category_new)

    if category_deleted:
        heading("Deleted tasks")
        lines.append(Text(""))
        lines.extend(_task_line(t, "red", colorize) for t in category_deleted)

    if category_completed:
        heading("Completed tasks")
        for changed in category_completed:
            lines.append(Text(""))
            style = "green" if changed.has_recurred else "blue"
            lines.append(_task_line(changed.original, style, colorize))
            lines.extend(
                describe_changes(edits, colorize) for edits in changed.delta.changes if edits
            )

    if category_changed:
        heading("Changed tasks")
        for changed in category_changed:
            lines.append(Text(""))
            style = "yellow" if changed.has_been_postponed else ""
            lines.append(_task_line(changed.original, style, colorize))
            lines.extend(
                describe_changes(edits, colorize) for edits in changed.delta.changes if edits
            )

    if not lines:
        lines.append(Text("No changes."))
    return lines


def format_changeset(new_tasks: Sequence[Task], changes: Sequence[ChangedTask]) -> str:
    """Plain-text report of a changeset."""
    return "\n".join(line.plain for line in render_changeset(new_tasks, changes))
