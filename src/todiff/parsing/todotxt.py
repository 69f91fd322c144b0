"""Reading and writing tasks in the todo.txt format.

A task line looks like::

    x (A) 2018-04-09 2018-04-08 call mom +family due:2018-04-10 rec:+1w

where the completion marker, the priority and the dates are optional, and
``key:value`` tokens anywhere after them are tags. The ``due``, ``t`` and
``rec`` tags are lifted into dedicated task fields.
"""

import re
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional, Union

import structlog

from todiff.models.task import Recurrence, Task

logger = structlog.get_logger(__name__)

_PRIORITY_RE = re.compile(r"^\(([A-Z])\)$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TAG_RE = re.compile(r"^([\w-]+):(\S+)$")


class TaskParseError(ValueError):
    """Raised when a line cannot be parsed as a task."""

    def __init__(
        self,
        reason: str,
        line: str,
        path: Optional[Path] = None,
        line_number: Optional[int] = None,
    ) -> None:
        self.reason = reason
        self.line = line
        self.path = path
        self.line_number = line_number
        if path is not None:
            message = f"Unable to parse line {line_number} in file ‘{path}’: {reason}"
        else:
            message = f"Unable to parse task: {reason}"
        super().__init__(message)


def _parse_date(value: str, line: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise TaskParseError(f"invalid date {value!r}", line) from e


def parse_task(line: str) -> Task:
    """Parse a single todo.txt line.

    Args:
        line: Task line, without trailing newline

    Returns:
        Parsed task

    Raises:
        TaskParseError: If a date, priority or special tag is malformed
    """
    tokens = line.split()
    pos = 0

    completed = False
    if pos < len(tokens) and tokens[pos] == "x":
        completed = True
        pos += 1

    priority = None
    if pos < len(tokens):
        match = _PRIORITY_RE.match(tokens[pos])
        if match:
            priority = ord(match.group(1)) - ord("A")
            pos += 1

    leading_dates: List[date] = []
    while pos < len(tokens) and len(leading_dates) < 2 and _DATE_RE.match(tokens[pos]):
        leading_dates.append(_parse_date(tokens[pos], line))
        pos += 1

    completion_date = None
    creation_date = None
    if completed and leading_dates:
        completion_date = leading_dates[0]
        if len(leading_dates) == 2:
            creation_date = leading_dates[1]
    elif leading_dates:
        creation_date = leading_dates[0]
        if len(leading_dates) == 2:
            # Only completed tasks carry two dates, the second belongs to the subject
            pos -= 1

    words: List[str] = []
    tags = []
    due_date = None
    threshold_date = None
    recurrence = None
    for token in tokens[pos:]:
        match = _TAG_RE.match(token)
        if match is None or match.group(2).startswith("//"):
            words.append(token)
            continue

        key, value = match.groups()
        if key == "due":
            due_date = _parse_date(value, line)
        elif key == "t":
            threshold_date = _parse_date(value, line)
        elif key == "rec":
            try:
                recurrence = Recurrence.parse(value)
            except ValueError as e:
                raise TaskParseError(str(e), line) from e
        else:
            tags.append((key, value))

    return Task(
        subject=" ".join(words),
        priority=priority,
        creation_date=creation_date,
        completed=completed,
        completion_date=completion_date,
        due_date=due_date,
        threshold_date=threshold_date,
        tags=tuple(tags),
        recurrence=recurrence,
    )


def parse_tasks(lines: Iterable[str]) -> List[Task]:
    """Parse several task lines, skipping blank ones."""
    return [parse_task(line) for line in lines if line.strip()]


def serialize_task(task: Task) -> str:
    """Serialize a task back to a todo.txt line."""
    parts: List[str] = []
    if task.completed:
        parts.append("x")
    if task.priority is not None:
        parts.append(f"({task.priority_letter})")
    if task.completion_date is not None:
        parts.append(task.completion_date.isoformat())
    if task.creation_date is not None:
        parts.append(task.creation_date.isoformat())
    if task.subject:
        parts.append(task.subject)
    if task.due_date is not None:
        parts.append(f"due:{task.due_date.isoformat()}")
    if task.threshold_date is not None:
        parts.append(f"t:{task.threshold_date.isoformat()}")
    if task.recurrence is not None:
        parts.append(f"rec:{task.recurrence}")
    parts.extend(f"{key}:{value}" for key, value in task.tags)
    return " ".join(parts)


def read_tasks(path: Union[str, Path]) -> List[Task]:
    """Read all tasks of a todo.txt file.

    Args:
        path: Path to the file

    Returns:
        Tasks in file order

    Raises:
        TaskParseError: On the first malformed line, with its location
        OSError: If the file cannot be read
    """
    path = Path(path)
    tasks: List[Task] = []
    with open(path, "r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            try:
                tasks.append(parse_task(line))
            except TaskParseError as e:
                raise TaskParseError(e.reason, line, path, line_number) from e

    logger.debug("tasks_read", path=str(path), count=len(tasks))
    return tasks
