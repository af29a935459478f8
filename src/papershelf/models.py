"""Data models and constants for the papershelf application."""

from __future__ import annotations

from dataclasses import dataclass, field

# Application identity, single source of truth for platformdirs paths
CONFIG_APP_NAME = "papershelf"

# Entry files are named "<sha256 of content>.json"
ENTRY_SUFFIX = ".json"

# Literal the delete dialog expects before removing an entry
CONFIRM_TOKEN = "y"

# Window capacity used when the terminal size cannot be determined
DEFAULT_WINDOW_CAPACITY = 20


@dataclass(slots=True)
class Author:
    """One author of an entry."""

    name: str = ""


@dataclass(slots=True)
class Tag:
    """One tag attached to an entry."""

    label: str = ""


@dataclass(slots=True)
class Entry:
    """A bibliography record ("paper").

    Identity is the backing file path, not any field of the record.
    """

    title: str = ""
    year: int = 0
    description: str = ""
    bibtex: str = ""
    document_name: str = ""
    authors: list[Author] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)

    def has_tag(self, label: str) -> bool:
        """Return True when a tag equals ``label`` exactly."""
        return any(tag.label == label for tag in self.tags)

    @property
    def author_names(self) -> list[str]:
        return [author.name for author in self.authors]

    @property
    def tag_labels(self) -> list[str]:
        return [tag.label for tag in self.tags]


@dataclass(slots=True)
class GeneralSettings:
    """The ``general`` section of the config file."""

    load_size: int = 0  # <= 0: derive from terminal height
    pdf_viewer: str = "zathura"
    pdf_dir: str = "~/.paper"
    editor_command: str = "nvim"
    selection_icon: str = "> "
    file_icon: str = "  "


# Default colors as RGB triples, keyed by the UI element they paint
DEFAULT_COLORS: dict[str, tuple[int, int, int]] = {
    "master_block_title": (255, 255, 255),
    "master_block_border": (255, 255, 255),
    "explorer_unselected_fg": (0, 0, 255),
    "explorer_unselected_bg": (0, 0, 0),
    "explorer_selected_fg": (0, 0, 255),
    "explorer_selected_bg": (48, 48, 48),
    "content_block_title": (255, 255, 255),
    "content_block_border": (255, 255, 255),
    "title_content": (255, 255, 255),
    "author_content": (255, 255, 255),
    "description_content": (255, 255, 255),
}


@dataclass(slots=True)
class Keybinds:
    """Single-character keybindings for the browsing commands."""

    quit: str = "q"
    next: str = "j"
    previous: str = "k"
    bibtex_to_clipboard: str = "b"
    edit: str = "e"
    delete: str = "d"
    open_in_pdfviewer: str = "o"


KEYBIND_FIELDS: tuple[str, ...] = (
    "quit",
    "next",
    "previous",
    "bibtex_to_clipboard",
    "edit",
    "delete",
    "open_in_pdfviewer",
)


@dataclass(slots=True)
class UserConfig:
    """Resolved user configuration."""

    general: GeneralSettings = field(default_factory=GeneralSettings)
    colors: dict[str, tuple[int, int, int]] = field(default_factory=lambda: dict(DEFAULT_COLORS))
    keybinds: Keybinds = field(default_factory=Keybinds)
    config_defaulted: bool = False


__all__ = [
    "CONFIG_APP_NAME",
    "CONFIRM_TOKEN",
    "DEFAULT_COLORS",
    "DEFAULT_WINDOW_CAPACITY",
    "ENTRY_SUFFIX",
    "KEYBIND_FIELDS",
    "Author",
    "Entry",
    "GeneralSettings",
    "Keybinds",
    "Tag",
    "UserConfig",
]
