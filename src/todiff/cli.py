"""Command-line interface for todiff."""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import List, Optional

import structlog
import typer
from rich.console import Console

from todiff.changes import compute_changeset
from todiff.display import render_changeset
from todiff.merge import merge_3way, merge_successful, merge_to_string
from todiff.models import Settings, Task
from todiff.parsing import TaskParseError, read_tasks

app = typer.Typer(
    name="todiff",
    help="Semantic diff and three-way merge of todo.txt files",
    add_completion=False,
)
console = Console()
error_console = Console(stderr=True)


class ColorMode(str, Enum):
    """When to colorize the output."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def configure_logging(level: str) -> None:
    """Send structlog output to stderr, filtered at ``level``."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.WARNING)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _allowed_divergence(similarity: Optional[int], settings: Settings) -> int:
    if similarity is None:
        return settings.allowed_divergence
    return 100 - similarity


def _load(paths: List[Path]) -> List[List[Task]]:
    try:
        return [read_tasks(path) for path in paths]
    except TaskParseError as e:
        error_console.print(f"[bold red]Error:[/bold red] {e}", highlight=False)
        error_console.print(e.line, markup=False, highlight=False)
        raise typer.Exit(1)
    except OSError as e:
        error_console.print(f"[bold red]Error:[/bold red] {e}", highlight=False)
        raise typer.Exit(1)


def _make_console(mode: ColorMode) -> Console:
    if mode == ColorMode.ALWAYS:
        return Console(
            force_terminal=True, color_system="standard", highlight=False, soft_wrap=True
        )
    if mode == ColorMode.NEVER:
        return Console(color_system=None, highlight=False, soft_wrap=True)
    return Console(highlight=False, soft_wrap=True)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log matching details to stderr"),
) -> None:
    """Semantic diff and three-way merge of todo.txt files."""
    settings = Settings()
    configure_logging("DEBUG" if verbose else settings.log_level)


@app.command()
def diff(
    before: Path = typer.Argument(..., help="The file to diff from"),
    after: Path = typer.Argument(..., help="The file to diff to"),
    similarity: Optional[int] = typer.Option(
        None,
        "--similarity",
        "-s",
        min=0,
        max=100,
        help="Similarity index to consider two tasks identical (in percents, higher is more restrictive)",
    ),
    color: Optional[ColorMode] = typer.Option(None, "--color", help="Colorize the output"),
) -> None:
    """Show the semantic changes between two todo.txt files."""
    settings = Settings()
    mode = color or ColorMode(settings.color)
    from_tasks, to_tasks = _load([before, after])

    new_tasks, changes = compute_changeset(
        from_tasks, to_tasks, _allowed_divergence(similarity, settings)
    )

    out = _make_console(mode)
    colorize = out.color_system is not None and out.is_terminal
    for line in render_changeset(new_tasks, changes, colorize=colorize):
        out.print(line)


@app.command()
def merge(
    ancestor: Path = typer.Argument(..., help="The original file"),
    current: Path = typer.Argument(..., help="The first file to merge"),
    other: Path = typer.Argument(..., help="The second file to merge"),
    similarity: Optional[int] = typer.Option(
        None,
        "--similarity",
        "-s",
        min=0,
        max=100,
        help="Similarity index to consider two tasks identical (in percents, higher is more restrictive)",
    ),
) -> None:
    """Perform a three-way merge of todo.txt files.

    Exits with status 1 if some tasks were changed on both sides.
    """
    settings = Settings()
    from_tasks, left_tasks, right_tasks = _load([ancestor, current, other])

    results = merge_3way(
        from_tasks, left_tasks, right_tasks, _allowed_divergence(similarity, settings)
    )

    # Plain output so the result can be redirected to a todo.txt file
    sys.stdout.write(merge_to_string(results) + "\n")
    if not merge_successful(results):
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from todiff import __version__

    console.print(f"[bold]todiff[/bold] version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
