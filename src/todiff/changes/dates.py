"""Date arithmetic for recurring tasks."""

import calendar
from datetime import date, timedelta
from typing import Optional

from todiff.models.task import Recurrence, RecurrenceUnit, Task


def _with_clamped_day(year: int, month: int, day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def add_recurrence(when: date, recurrence: Recurrence) -> date:
    """Date of the occurrence following ``when``.

    Months and years that do not contain the day of ``when`` yield the last
    day of the resulting month (2010-01-30 + 1m is 2010-02-28).
    """
    n = recurrence.count
    if recurrence.unit == RecurrenceUnit.DAY:
        return when + timedelta(days=n)
    if recurrence.unit == RecurrenceUnit.WEEK:
        return when + timedelta(weeks=n)
    if recurrence.unit == RecurrenceUnit.MONTH:
        month0 = when.month - 1 + n
        return _with_clamped_day(when.year + month0 // 12, month0 % 12 + 1, when.day)
    return _with_clamped_day(when.year + n, when.month, when.day)


def postponement(before: Task, after: Task) -> Optional[timedelta]:
    """Shift of the due date between two versions of a task.

    The shift only counts as a postponement if the threshold date moved by
    the same amount, or if neither version has a threshold date.

    Returns:
        The due date shift, or None if the dates did not move together
    """
    if before.due_date is None or after.due_date is None:
        return None
    due_delta = after.due_date - before.due_date
    if before.threshold_date is None and after.threshold_date is None:
        return due_delta
    if before.threshold_date is not None and after.threshold_date is not None:
        if after.threshold_date - before.threshold_date == due_delta:
            return due_delta
    return None
