#!/usr/bin/env python3
"""PaperShelf TUI - browse the bibliography entries stored on disk.

Usage:
    papershelf --open                    # Browse every entry
    papershelf --open --filter-tag ml    # Browse entries tagged "ml"

Default key bindings (configurable in config.json):
    j       - Next entry
    k       - Previous entry
    b       - Copy BibTeX to clipboard
    e       - Edit entry file in the configured editor
    o       - Open the entry's PDF in the configured viewer
    d       - Delete entry (type y + Enter to confirm, Esc to cancel)
    q       - Quit
"""

import logging
import sys

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import Key
from textual.widgets import Label

from papershelf.action_messages import build_corrupted_entry_message
from papershelf.cli import main as _cli_main
from papershelf.loader import CorruptedEntryError
from papershelf.session import InputLoop, KeyPress
from papershelf.themes import THEME_NAME, build_palette, build_textual_theme
from papershelf.ui_constants import APP_CSS, REDRAW_INTERVAL
from papershelf.widgets import ConfirmPanel, EntryDetails, EntryExplorer

logger = logging.getLogger(__name__)


class PaperShelf(App):
    """A TUI application to browse bibliography entries."""

    TITLE = "Paper Explorer"
    CSS = APP_CSS
    ENABLE_COMMAND_PALETTE = False

    def __init__(self, loop: InputLoop) -> None:
        super().__init__()
        self._input_loop = loop
        self._palette = build_palette(loop.config.colors)
        self.register_theme(build_textual_theme(loop.config.colors))
        try:
            self.theme = THEME_NAME
        except Exception as e:
            logger.debug("Skipping theme activation in current context: %s", e, exc_info=True)

    @property
    def input_loop(self) -> InputLoop:
        return self._input_loop

    def compose(self) -> ComposeResult:
        with Horizontal(id="main-container"):
            with Vertical(id="explorer-pane"):
                yield EntryExplorer(id="explorer", classes="content-block")
                yield EntryDetails("tags", id="tags", classes="content-block")
            with Vertical(id="content-pane"):
                yield EntryDetails("title", id="title", classes="content-block")
                yield EntryDetails("authors", id="authors", classes="content-block")
                yield EntryDetails("description", id="description", classes="content-block")
        yield ConfirmPanel(id="confirm-panel")
        yield Label("", id="status-bar")

    def on_mount(self) -> None:
        """Apply configured colors and start the redraw schedule."""
        borders = {
            "#explorer-pane": (" Paper Explorer ", "master_block"),
            "#content-pane": (" Content ", "master_block"),
            "#explorer": (" Titles ", "content_block"),
            "#tags": (" Tags ", "content_block"),
            "#title": (" Title ", "content_block"),
            "#authors": (" Authors ", "content_block"),
            "#description": (" Description ", "content_block"),
        }
        for selector, (title, block) in borders.items():
            widget = self.query_one(selector)
            widget.border_title = title
            widget.styles.border_title_color = self._palette[f"{block}_title"]
            border_type = "round" if block == "master_block" else "solid"
            widget.styles.border = (border_type, self._palette[f"{block}_border"])
        self.set_interval(REDRAW_INTERVAL, self.render_frame)
        self.render_frame()
        logger.debug(
            "App mounted: %d entries indexed, %d in window",
            self._input_loop.loader.total,
            len(self._input_loop.loader),
        )

    def render_frame(self) -> None:
        """Draw the window, the selected entry and the dialog state."""
        loop = self._input_loop
        loader = loop.loader
        entry = loader.entry_at(loop.cursor)
        self.query_one(EntryExplorer).show(
            loader.entries, loop.cursor, loop.config.general, self._palette
        )
        for details in self.query(EntryDetails):
            details.show(entry, self._palette)
        panel = self.query_one(ConfirmPanel)
        if loop.session.confirming:
            target = loader.entry_at(loop.session.delete_target or 0)
            panel.show(target.title if target else "", loop.session.dialog)
        panel.set_class(loop.session.confirming, "visible")
        self.query_one("#status-bar", Label).update(loop.status)
        self.sub_title = f"{loader.total} entries"

    def on_key(self, event: Key) -> None:
        """Hand every key press to the input loop."""
        event.stop()
        event.prevent_default()
        try:
            running = self._input_loop.handle(KeyPress(event.key, event.character))
        except CorruptedEntryError as e:
            logger.error("Stopping: %s", e)
            self.exit(return_code=1, message=build_corrupted_entry_message(str(e.path)))
            return
        if not running:
            self.exit()
            return
        self.render_frame()


def main() -> int:
    """Main entry point wrapper for CLI/bootstrap logic."""
    return _cli_main(app_factory=PaperShelf)


if __name__ == "__main__":
    sys.exit(main())
