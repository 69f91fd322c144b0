"""Semantic change detection between task lists."""

from todiff.changes.changeset import (
    classify,
    compute_changeset,
    fold_recurrences,
    match_tasks,
)
from todiff.changes.classifier import changes_between, remove_common
from todiff.changes.dates import add_recurrence, postponement

__all__ = [
    "add_recurrence",
    "postponement",
    "changes_between",
    "remove_common",
    "match_tasks",
    "fold_recurrences",
    "classify",
    "compute_changeset",
]
