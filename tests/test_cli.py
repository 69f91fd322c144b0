"""Tests for the todiff command-line interface."""

import pytest
from typer.testing import CliRunner

from todiff import __version__
from todiff.cli import app

runner = CliRunner()


@pytest.fixture
def todo_files(tmp_path):
    """Write todo.txt files and return their paths."""

    def write(**contents):
        paths = {}
        for name, lines in contents.items():
            path = tmp_path / f"{name}.txt"
            path.write_text("\n".join(lines) + "\n", encoding="utf-8")
            paths[name] = str(path)
        return paths

    return write


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the user's settings out of the tests."""
    for name in ("TODIFF_SIMILARITY", "TODIFF_COLOR", "TODIFF_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestDiffCommand:
    """Tests for `todiff diff`."""

    def test_postponed_task(self, todo_files):
        """Test the report of a postponed task."""
        paths = todo_files(before=["foo due:2020-01-01"], after=["foo due:2020-01-03"])
        result = runner.invoke(app, ["diff", paths["before"], paths["after"], "--color", "never"])
        assert result.exit_code == 0
        assert "Changed tasks" in result.output
        assert "Postponed (strict) by 2 days" in result.output

    def test_no_changes(self, todo_files):
        """Test identical files."""
        paths = todo_files(before=["foo"], after=["foo"])
        result = runner.invoke(app, ["diff", paths["before"], paths["after"]])
        assert result.exit_code == 0
        assert result.output.strip() == "No changes."

    def test_similarity_option(self, todo_files):
        """Test a stricter similarity turns an edit into a delete and an add."""
        paths = todo_files(before=["do a thing"], after=["do an thing"])

        result = runner.invoke(app, ["diff", paths["before"], paths["after"]])
        assert "Changed tasks" in result.output

        result = runner.invoke(app, ["diff", "-s", "100", paths["before"], paths["after"]])
        assert "New tasks" in result.output
        assert "Deleted tasks" in result.output

    def test_similarity_from_environment(self, todo_files, monkeypatch):
        """Test the default similarity comes from the environment."""
        monkeypatch.setenv("TODIFF_SIMILARITY", "100")
        paths = todo_files(before=["do a thing"], after=["do an thing"])
        result = runner.invoke(app, ["diff", paths["before"], paths["after"]])
        assert "Deleted tasks" in result.output

    def test_similarity_out_of_range(self, todo_files):
        """Test the similarity must be between 0 and 100."""
        paths = todo_files(before=["foo"], after=["foo"])
        result = runner.invoke(app, ["diff", "--similarity", "150", paths["before"], paths["after"]])
        assert result.exit_code == 2

    def test_parse_error(self, todo_files):
        """Test a malformed file stops with an error."""
        paths = todo_files(before=["foo due:2020-13-01"], after=["foo"])
        result = runner.invoke(app, ["diff", paths["before"], paths["after"]])
        assert result.exit_code == 1
        assert "Unable to parse line 1" in result.output

    def test_missing_file(self, tmp_path):
        """Test a missing file stops with an error."""
        result = runner.invoke(app, ["diff", str(tmp_path / "a.txt"), str(tmp_path / "b.txt")])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestMergeCommand:
    """Tests for `todiff merge`."""

    def test_clean_merge(self, todo_files):
        """Test a merge without conflicts prints the merged tasks."""
        paths = todo_files(
            ancestor=["buy milk"], current=["buy milk"], other=["x 2020-01-01 buy milk"]
        )
        result = runner.invoke(
            app, ["merge", "-s", "100", paths["ancestor"], paths["current"], paths["other"]]
        )
        assert result.exit_code == 0
        assert result.output == "x 2020-01-01 buy milk\n"

    def test_conflict_exit_code(self, todo_files):
        """Test a conflicting merge exits with status 1."""
        paths = todo_files(
            ancestor=["buy milk"],
            current=["x 2020-01-01 buy milk"],
            other=["buy milk due:2020-02-01"],
        )
        result = runner.invoke(app, ["merge", paths["ancestor"], paths["current"], paths["other"]])
        assert result.exit_code == 1
        assert result.output.splitlines() == [
            "<<<<<",
            "x 2020-01-01 buy milk",
            "|||||",
            "buy milk",
            "=====",
            "buy milk due:2020-02-01",
            ">>>>>",
        ]


class TestVersionCommand:
    """Tests for `todiff version`."""

    def test_version(self):
        """Test the version is shown."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output
