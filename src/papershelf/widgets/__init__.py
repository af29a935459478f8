"""Widget classes composing the papershelf TUI."""

from papershelf.widgets.confirm import ConfirmPanel, render_dialog_line
from papershelf.widgets.details import (
    EntryDetails,
    render_authors,
    render_description,
    render_tags,
    render_title,
)
from papershelf.widgets.explorer import EntryExplorer, render_explorer, truncate_line

__all__ = [
    "ConfirmPanel",
    "EntryDetails",
    "EntryExplorer",
    "render_authors",
    "render_description",
    "render_dialog_line",
    "render_explorer",
    "render_tags",
    "render_title",
    "truncate_line",
]
