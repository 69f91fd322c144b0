"""Data models describing the semantic differences between task lists."""

from datetime import date, timedelta
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from todiff.models.task import Task

TagList = List[Tuple[str, str]]


class ChangeKind(str, Enum):
    """Vocabulary of semantic edits."""

    CREATED = "created"
    COPIED = "copied"
    RECURRED_STRICT = "recurred_strict"
    RECURRED_FROM = "recurred_from"
    FINISHED_AT = "finished_at"
    POSTPONED_STRICT_BY = "postponed_strict_by"
    FINISHED = "finished"
    PRIORITY = "priority"
    FINISH_DATE = "finish_date"
    CREATE_DATE = "create_date"
    SUBJECT = "subject"
    DUE_DATE = "due_date"
    THRESHOLD_DATE = "threshold_date"
    TAGS = "tags"


class ChangeEdit(BaseModel):
    """One semantic edit between two versions of a task.

    Edits of the form (before, after) use both payload fields. Edits with a
    single payload (recurred from, finished at, postponed by, finished) keep
    it in ``after``.
    """

    model_config = ConfigDict(frozen=True)

    kind: ChangeKind = Field(..., description="Kind of edit")
    before: Any = Field(None, description="Value before the edit")
    after: Any = Field(None, description="Value after the edit")

    @classmethod
    def created(cls) -> "ChangeEdit":
        return cls(kind=ChangeKind.CREATED)

    @classmethod
    def copied(cls) -> "ChangeEdit":
        return cls(kind=ChangeKind.COPIED)

    @classmethod
    def recurred_strict(cls) -> "ChangeEdit":
        return cls(kind=ChangeKind.RECURRED_STRICT)

    @classmethod
    def recurred_from(cls, when: date) -> "ChangeEdit":
        return cls(kind=ChangeKind.RECURRED_FROM, after=when)

    @classmethod
    def finished_at(cls, when: date) -> "ChangeEdit":
        return cls(kind=ChangeKind.FINISHED_AT, after=when)

    @classmethod
    def postponed_strict_by(cls, delta: timedelta) -> "ChangeEdit":
        return cls(kind=ChangeKind.POSTPONED_STRICT_BY, after=delta)

    @classmethod
    def finished(cls, done: bool) -> "ChangeEdit":
        return cls(kind=ChangeKind.FINISHED, after=done)

    @classmethod
    def priority(cls, before: Optional[str], after: Optional[str]) -> "ChangeEdit":
        return cls(kind=ChangeKind.PRIORITY, before=before, after=after)

    @classmethod
    def finish_date(cls, before: Optional[date], after: Optional[date]) -> "ChangeEdit":
        return cls(kind=ChangeKind.FINISH_DATE, before=before, after=after)

    @classmethod
    def create_date(cls, before: Optional[date], after: Optional[date]) -> "ChangeEdit":
        return cls(kind=ChangeKind.CREATE_DATE, before=before, after=after)

    @classmethod
    def subject(cls, before: str, after: str) -> "ChangeEdit":
        return cls(kind=ChangeKind.SUBJECT, before=before, after=after)

    @classmethod
    def due_date(cls, before: Optional[date], after: Optional[date]) -> "ChangeEdit":
        return cls(kind=ChangeKind.DUE_DATE, before=before, after=after)

    @classmethod
    def threshold_date(cls, before: Optional[date], after: Optional[date]) -> "ChangeEdit":
        return cls(kind=ChangeKind.THRESHOLD_DATE, before=before, after=after)

    @classmethod
    def tags(cls, removed: TagList, added: TagList) -> "ChangeEdit":
        return cls(kind=ChangeKind.TAGS, before=list(removed), after=list(added))

    @property
    def is_recurrence(self) -> bool:
        """Whether this edit records a recurrence of the task."""
        return self.kind in (ChangeKind.RECURRED_STRICT, ChangeKind.RECURRED_FROM)

    @property
    def is_completion(self) -> bool:
        """Whether this edit records the completion of the task."""
        if self.kind == ChangeKind.FINISHED_AT:
            return True
        return self.kind == ChangeKind.FINISHED and self.after is True

    @property
    def is_postponement(self) -> bool:
        """Whether this edit moves an existing due date."""
        if self.kind == ChangeKind.POSTPONED_STRICT_BY:
            return True
        return (
            self.kind == ChangeKind.DUE_DATE
            and self.before is not None
            and self.after is not None
        )


class DeltaKind(str, Enum):
    """What happened to an original task."""

    IDENTICAL = "identical"
    DELETED = "deleted"
    CHANGED = "changed"
    RECURRED = "recurred"


class TaskDelta(BaseModel):
    """Delta between an original task and what it became.

    ``tasks`` lists the resulting tasks (one for a change, the chain of
    successive instances for a recurrence, oldest first). ``changes`` holds
    one edit list per resulting task once the delta has been classified.
    """

    model_config = ConfigDict(frozen=True)

    kind: DeltaKind
    tasks: List[Task] = Field(default_factory=list)
    changes: List[List[ChangeEdit]] = Field(default_factory=list)

    @classmethod
    def identical(cls) -> "TaskDelta":
        return cls(kind=DeltaKind.IDENTICAL)

    @classmethod
    def deleted(cls) -> "TaskDelta":
        return cls(kind=DeltaKind.DELETED)

    @classmethod
    def changed(
        cls, task: Task, edits: Optional[List[ChangeEdit]] = None
    ) -> "TaskDelta":
        return cls(
            kind=DeltaKind.CHANGED,
            tasks=[task],
            changes=[] if edits is None else [list(edits)],
        )

    @classmethod
    def recurred(
        cls, chain: List[Task], edits: Optional[List[List[ChangeEdit]]] = None
    ) -> "TaskDelta":
        return cls(
            kind=DeltaKind.RECURRED,
            tasks=list(chain),
            changes=[] if edits is None else [list(e) for e in edits],
        )

    @property
    def is_trivial(self) -> bool:
        return self.kind == DeltaKind.IDENTICAL

    @property
    def edits(self) -> List[ChangeEdit]:
        """All edits of this delta, flattened in chain order."""
        return [edit for edit_list in self.changes for edit in edit_list]


class ChangedTask(BaseModel):
    """An original task together with what became of it."""

    model_config = ConfigDict(frozen=True)

    original: Task
    delta: TaskDelta

    @property
    def has_recurred(self) -> bool:
        return any(edit.is_recurrence for edit in self.delta.edits)

    @property
    def has_been_completed(self) -> bool:
        return any(edit.is_completion for edit in self.delta.edits)

    @property
    def has_been_postponed(self) -> bool:
        return any(edit.is_postponement for edit in self.delta.edits)


class MergeKind(str, Enum):
    """Outcome of merging one ancestor task."""

    MERGED = "merged"
    CONFLICT = "conflict"


class MergeResult(BaseModel):
    """Result of a three-way merge for one task.

    For a merged result, ``task`` is the task to keep. For a conflict,
    ``task`` is the common ancestor, ``left``/``right`` are the tasks each
    side turned it into and ``left_edits``/``right_edits`` the edits each
    side applied.
    """

    model_config = ConfigDict(frozen=True)

    kind: MergeKind
    task: Task
    left: List[Task] = Field(default_factory=list)
    right: List[Task] = Field(default_factory=list)
    left_edits: List[ChangeEdit] = Field(default_factory=list)
    right_edits: List[ChangeEdit] = Field(default_factory=list)

    @classmethod
    def merged(cls, task: Task) -> "MergeResult":
        return cls(kind=MergeKind.MERGED, task=task)

    @classmethod
    def conflict(
        cls, ancestor: Task, left: TaskDelta, right: TaskDelta
    ) -> "MergeResult":
        return cls(
            kind=MergeKind.CONFLICT,
            task=ancestor,
            left=left.tasks,
            right=right.tasks,
            left_edits=left.edits,
            right_edits=right.edits,
        )

    @property
    def is_conflict(self) -> bool:
        return self.kind == MergeKind.CONFLICT
