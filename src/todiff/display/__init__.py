"""Rendering of changesets for humans."""

from todiff.display.report import (
    describe_change,
    describe_changes,
    format_changeset,
    render_changeset,
)

__all__ = ["describe_change", "describe_changes", "render_changeset", "format_changeset"]
