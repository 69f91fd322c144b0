"""todo.txt ingestion and serialization."""

from todiff.parsing.todotxt import (
    TaskParseError,
    parse_task,
    parse_tasks,
    read_tasks,
    serialize_task,
)

__all__ = [
    "TaskParseError",
    "parse_task",
    "parse_tasks",
    "read_tasks",
    "serialize_task",
]
