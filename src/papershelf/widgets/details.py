"""Content panes for the selected entry: title, authors, description, tags."""

from __future__ import annotations

from rich.markup import escape as escape_markup
from textual.widgets import Static

from papershelf.models import Entry


def render_title(entry: Entry | None, palette: dict[str, str]) -> str:
    if entry is None:
        return ""
    color = palette["title_content"]
    year = f" [dim]({entry.year})[/]" if entry.year else ""
    return f"[bold {color}]{escape_markup(entry.title)}[/]{year}"


def render_authors(entry: Entry | None, palette: dict[str, str]) -> str:
    if entry is None or not entry.authors:
        return "[dim italic]No authors[/]"
    color = palette["author_content"]
    return "\n".join(f"[{color}]{escape_markup(name)}[/]" for name in entry.author_names)


def render_description(entry: Entry | None, palette: dict[str, str]) -> str:
    if entry is None:
        return ""
    color = palette["description_content"]
    lines = []
    if entry.description:
        lines.append(f"[{color}]{escape_markup(entry.description)}[/]")
    else:
        lines.append("[dim italic]No description[/]")
    if entry.document_name:
        lines.append("")
        lines.append(f"[dim]Document:[/] {escape_markup(entry.document_name)}")
    return "\n".join(lines)


def render_tags(entry: Entry | None) -> str:
    if entry is None or not entry.tags:
        return "[dim italic]No tags[/]"
    return "  ".join(f"#{escape_markup(label)}" for label in entry.tag_labels)


class EntryDetails(Static):
    """One content pane; ``kind`` selects what it renders."""

    def __init__(self, kind: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.kind = kind

    def show(self, entry: Entry | None, palette: dict[str, str]) -> None:
        if self.kind == "title":
            self.update(render_title(entry, palette))
        elif self.kind == "authors":
            self.update(render_authors(entry, palette))
        elif self.kind == "description":
            self.update(render_description(entry, palette))
        else:
            self.update(render_tags(entry))
