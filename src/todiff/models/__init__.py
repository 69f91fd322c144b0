"""Data models for todo.txt tasks and their differences."""

from todiff.models.changes import (
    ChangedTask,
    ChangeEdit,
    ChangeKind,
    DeltaKind,
    MergeKind,
    MergeResult,
    TaskDelta,
)
from todiff.models.config import Settings
from todiff.models.task import Recurrence, RecurrenceUnit, Task

__all__ = [
    "Task",
    "Recurrence",
    "RecurrenceUnit",
    "ChangeKind",
    "ChangeEdit",
    "DeltaKind",
    "TaskDelta",
    "ChangedTask",
    "MergeKind",
    "MergeResult",
    "Settings",
]
