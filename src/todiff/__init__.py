"""todiff - semantic diff and three-way merge of todo.txt files."""

__version__ = "0.1.0"

from todiff.changes import changes_between, compute_changeset
from todiff.merge import merge_3way, merge_to_string
from todiff.models import ChangedTask, ChangeEdit, MergeResult, Task, TaskDelta
from todiff.parsing import parse_task, read_tasks, serialize_task

__all__ = [
    "__version__",
    "Task",
    "ChangeEdit",
    "TaskDelta",
    "ChangedTask",
    "MergeResult",
    "parse_task",
    "read_tasks",
    "serialize_task",
    "changes_between",
    "compute_changeset",
    "merge_3way",
    "merge_to_string",
]
