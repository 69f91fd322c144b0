"""Data models for todo.txt tasks."""

import re
from datetime import date
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

_RECURRENCE_RE = re.compile(r"^(\+?)(\d+)([dwmy])$")


class RecurrenceUnit(str, Enum):
    """Unit of a recurrence interval."""

    DAY = "d"
    WEEK = "w"
    MONTH = "m"
    YEAR = "y"


class Recurrence(BaseModel):
    """Recurrence descriptor parsed from a ``rec:`` tag.

    A strict recurrence (``rec:+1w``) computes the next occurrence from the
    due date of the finished instance, a relative one (``rec:1w``) from the
    day it was completed.
    """

    model_config = ConfigDict(frozen=True)

    count: int = Field(..., ge=0, description="Number of units in the interval")
    unit: RecurrenceUnit = Field(..., description="Interval unit")
    strict: bool = Field(False, description="Whether the recurrence is strict")

    @classmethod
    def parse(cls, spec: str) -> "Recurrence":
        """Parse a recurrence spec such as ``1d``, ``+2w`` or ``3m``.

        Args:
            spec: Value of a ``rec:`` tag

        Returns:
            Parsed recurrence

        Raises:
            ValueError: If the spec is not a valid recurrence
        """
        match = _RECURRENCE_RE.match(spec)
        if match is None:
            raise ValueError(f"Invalid recurrence spec: {spec!r}")
        strict, count, unit = match.groups()
        return cls(count=int(count), unit=RecurrenceUnit(unit), strict=bool(strict))

    def __str__(self) -> str:
        prefix = "+" if self.strict else ""
        return f"{prefix}{self.count}{self.unit.value}"


class Task(BaseModel):
    """A single todo.txt task.

    Tasks carry no identifier: two tasks are the same task only if all of
    their fields are equal.
    """

    model_config = ConfigDict(frozen=True)

    subject: str = Field(..., description="Free text of the task, without tags")
    priority: Optional[int] = Field(
        None, ge=0, le=25, description="Priority rank, 0 is (A), 25 is (Z)"
    )
    creation_date: Optional[date] = Field(None, description="Creation date")
    completed: bool = Field(False, description="Whether the task is done")
    completion_date: Optional[date] = Field(None, description="Completion date")
    due_date: Optional[date] = Field(None, description="Due date (due: tag)")
    threshold_date: Optional[date] = Field(
        None, description="Do not show before this date (t: tag)"
    )
    tags: Tuple[Tuple[str, str], ...] = Field(
        default_factory=tuple, description="Ordered key:value tags, keys may repeat"
    )
    recurrence: Optional[Recurrence] = Field(None, description="Recurrence (rec: tag)")

    @property
    def priority_letter(self) -> Optional[str]:
        """Priority as a letter between ``A`` and ``Z``, or None."""
        if self.priority is None:
            return None
        return chr(ord("A") + self.priority)

    def uncomplete(self) -> "Task":
        """Return a copy of this task marked as not completed."""
        return self.model_copy(update={"completed": False, "completion_date": None})

    def __str__(self) -> str:
        from todiff.parsing.todotxt import serialize_task

        return serialize_task(self)
