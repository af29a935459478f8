"""Explorer pane: the titles currently held in the loader window."""

from __future__ import annotations

from collections.abc import Sequence

from rich.markup import escape as escape_markup
from textual.widgets import Static

from papershelf.models import Entry, GeneralSettings

ELLIPSIS = "…"


def truncate_line(text: str, width: int) -> str:
    """Shorten ``text`` to ``width`` characters, ending with an ellipsis."""
    if width <= 0 or len(text) <= width:
        return text
    return text[: max(0, width - len(ELLIPSIS))] + ELLIPSIS


def render_explorer(
    entries: Sequence[Entry],
    cursor: int,
    general: GeneralSettings,
    palette: dict[str, str],
    width: int = 0,
) -> str:
    """Build Rich markup for the title list, marking the row at ``cursor``."""
    if not entries:
        return "[dim italic]No entries[/]"
    lines: list[str] = []
    for i, entry in enumerate(entries):
        selected = i == cursor
        icon = general.selection_icon if selected else general.file_icon
        text = escape_markup(truncate_line(f"{icon}{entry.title or '(untitled)'}", width))
        if selected:
            fg = palette["explorer_selected_fg"]
            bg = palette["explorer_selected_bg"]
            lines.append(f"[bold {fg} on {bg}]{text}[/]")
        else:
            fg = palette["explorer_unselected_fg"]
            bg = palette["explorer_unselected_bg"]
            lines.append(f"[{fg} on {bg}]{text}[/]")
    return "\n".join(lines)


class EntryExplorer(Static):
    """Static list of window titles, re-rendered every frame."""

    def show(
        self,
        entries: Sequence[Entry],
        cursor: int,
        general: GeneralSettings,
        palette: dict[str, str],
    ) -> None:
        width = self.content_size.width if self.is_mounted else 0
        self.update(render_explorer(entries, cursor, general, palette, width))
