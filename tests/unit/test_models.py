"""Tests for data models and settings."""

from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from todiff.models import (
    ChangedTask,
    ChangeEdit,
    ChangeKind,
    DeltaKind,
    Recurrence,
    RecurrenceUnit,
    Settings,
    Task,
    TaskDelta,
)
from todiff.parsing import parse_task


# ============================================================================
# Task Tests
# ============================================================================


class TestTask:
    """Tests for the Task model."""

    def test_defaults(self):
        """Test a task with only a subject."""
        task = Task(subject="foo")
        assert task.priority is None
        assert task.priority_letter is None
        assert not task.completed
        assert task.tags == ()

    def test_priority_bounds(self):
        """Test priorities are limited to A-Z."""
        assert Task(subject="foo", priority=25).priority_letter == "Z"
        with pytest.raises(ValidationError):
            Task(subject="foo", priority=26)

    def test_equality_is_structural(self):
        """Test tasks with equal fields are equal and hashable."""
        assert parse_task("(A) foo a:b") == parse_task("(A) foo a:b")
        assert len({parse_task("foo"), parse_task("foo")}) == 1

    def test_uncomplete(self):
        """Test uncomplete drops the completion fields only."""
        task = parse_task("x (A) 2020-01-02 2020-01-01 foo")
        assert task.uncomplete() == parse_task("(A) 2020-01-01 foo")


class TestRecurrence:
    """Tests for the Recurrence model."""

    def test_parse(self):
        """Test parsing strict and relative recurrences."""
        assert Recurrence.parse("+2w") == Recurrence(count=2, unit=RecurrenceUnit.WEEK, strict=True)
        assert Recurrence.parse("12m") == Recurrence(count=12, unit=RecurrenceUnit.MONTH)

    def test_str(self):
        """Test recurrences format back to their spec."""
        assert str(Recurrence.parse("+2w")) == "+2w"
        assert str(Recurrence.parse("1y")) == "1y"

    @pytest.mark.parametrize("spec", ["", "w", "2", "-1d", "2h", "+"])
    def test_invalid(self, spec):
        """Test invalid specs."""
        with pytest.raises(ValueError):
            Recurrence.parse(spec)


# ============================================================================
# Change Tests
# ============================================================================


class TestChangeEdit:
    """Tests for edit predicates."""

    def test_recurrence_edits(self):
        """Test which edits are recurrences."""
        assert ChangeEdit.recurred_strict().is_recurrence
        assert ChangeEdit.recurred_from(date(2020, 1, 1)).is_recurrence
        assert not ChangeEdit.copied().is_recurrence

    def test_completion_edits(self):
        """Test which edits are completions."""
        assert ChangeEdit.finished_at(date(2020, 1, 1)).is_completion
        assert ChangeEdit.finished(True).is_completion
        assert not ChangeEdit.finished(False).is_completion

    def test_postponement_edits(self):
        """Test which edits move a due date."""
        assert ChangeEdit.postponed_strict_by(timedelta(days=1)).is_postponement
        assert ChangeEdit.due_date(date(2020, 1, 1), date(2020, 1, 2)).is_postponement
        assert not ChangeEdit.due_date(None, date(2020, 1, 2)).is_postponement

    def test_tags_payload(self):
        """Test tag edits keep removed and added tags."""
        edit = ChangeEdit.tags([("a", "1")], [])
        assert edit.kind == ChangeKind.TAGS
        assert edit.before == [("a", "1")]
        assert edit.after == []


class TestTaskDelta:
    """Tests for deltas and changed tasks."""

    def test_edits_flattened(self):
        """Test edits of a chain are flattened in order."""
        chain = [parse_task("x foo"), parse_task("foo")]
        delta = TaskDelta.recurred(
            chain, [[ChangeEdit.finished(True)], [ChangeEdit.recurred_strict()]]
        )
        assert delta.kind == DeltaKind.RECURRED
        assert delta.edits == [ChangeEdit.finished(True), ChangeEdit.recurred_strict()]
        changed = ChangedTask(original=parse_task("foo"), delta=delta)
        assert changed.has_recurred
        assert changed.has_been_completed
        assert not changed.has_been_postponed

    def test_trivial(self):
        """Test only identical deltas are trivial."""
        assert TaskDelta.identical().is_trivial
        assert not TaskDelta.deleted().is_trivial
        assert not TaskDelta.changed(parse_task("foo"), []).is_trivial


# ============================================================================
# Settings Tests
# ============================================================================


class TestSettings:
    """Tests for application settings."""

    def test_defaults(self, monkeypatch):
        """Test default settings."""
        monkeypatch.delenv("TODIFF_SIMILARITY", raising=False)
        monkeypatch.delenv("TODIFF_COLOR", raising=False)
        settings = Settings(_env_file=None)
        assert settings.similarity == 75
        assert settings.allowed_divergence == 25
        assert settings.color == "auto"
        assert settings.log_level == "WARNING"

    def test_from_environment(self, monkeypatch):
        """Test settings are read from TODIFF_ variables."""
        monkeypatch.setenv("TODIFF_SIMILARITY", "90")
        monkeypatch.setenv("TODIFF_COLOR", "never")
        settings = Settings(_env_file=None)
        assert settings.similarity == 90
        assert settings.allowed_divergence == 10
        assert settings.color == "never"

    def test_invalid_similarity(self):
        """Test the similarity must be a percentage."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, similarity=101)
