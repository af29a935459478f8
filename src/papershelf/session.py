"""Session state machine and input dispatch.

The session is either browsing the window or confirming a delete. While
confirming, every key goes to the dialog's line buffer; the entry is only
removed when the submitted line is the confirmation token.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from papershelf.action_messages import (
    build_actionable_error,
    build_actionable_success,
)
from papershelf.io_actions import copy_to_clipboard, spawn_detached
from papershelf.loader import WindowedLoader
from papershelf.models import CONFIRM_TOKEN, KEYBIND_FIELDS, Keybinds, UserConfig

logger = logging.getLogger(__name__)

# Upper bound on how long one iteration waits for a key, in seconds
POLL_TIMEOUT = 0.05

# Key names for the non-printable keys the dialog understands
KEY_ENTER = "enter"
KEY_ESCAPE = "escape"
KEY_BACKSPACE = "backspace"
KEY_LEFT = "left"
KEY_RIGHT = "right"


@dataclass(frozen=True, slots=True)
class KeyPress:
    """One key event: a key name plus the printable character, if any."""

    key: str
    character: str | None = None

    @classmethod
    def char(cls, character: str) -> KeyPress:
        return cls(character, character)

    @property
    def printable(self) -> str | None:
        ch = self.character
        if ch is not None and len(ch) == 1 and ch.isprintable():
            return ch
        return None


class Action(Enum):
    """Logical browsing commands."""

    QUIT = "quit"
    NEXT = "next"
    PREVIOUS = "previous"
    COPY_BIBTEX = "bibtex_to_clipboard"
    EDIT = "edit"
    DELETE = "delete"
    OPEN_VIEWER = "open_in_pdfviewer"


def build_keymap(keybinds: Keybinds) -> dict[str, Action]:
    """Map each configured character to its action."""
    return {getattr(keybinds, name): Action(name) for name in KEYBIND_FIELDS}


class SessionMode(Enum):
    BROWSING = "browsing"
    CONFIRMING_DELETE = "confirming_delete"


@dataclass(slots=True)
class ConfirmDialog:
    """Single-line text input with a character cursor."""

    buffer: str = ""
    position: int = 0

    def insert(self, ch: str) -> None:
        self.buffer = self.buffer[: self.position] + ch + self.buffer[self.position :]
        self.position += 1

    def backspace(self) -> None:
        if self.position == 0:
            return
        self.buffer = self.buffer[: self.position - 1] + self.buffer[self.position :]
        self.position -= 1

    def move_left(self) -> None:
        self.position = max(0, self.position - 1)

    def move_right(self) -> None:
        self.position = min(len(self.buffer), self.position + 1)

    def clear(self) -> None:
        self.buffer = ""
        self.position = 0

    def submit(self) -> str:
        """Return the buffer as the submitted value and clear it."""
        submitted = self.buffer
        self.clear()
        return submitted


@dataclass(slots=True)
class SessionState:
    """Browsing / ConfirmingDelete state machine."""

    mode: SessionMode = SessionMode.BROWSING
    dialog: ConfirmDialog = field(default_factory=ConfirmDialog)
    delete_target: int | None = None

    @property
    def confirming(self) -> bool:
        return self.mode is SessionMode.CONFIRMING_DELETE

    def request_delete(self, cursor: int) -> None:
        """Open the confirmation dialog for the entry at ``cursor``."""
        self.mode = SessionMode.CONFIRMING_DELETE
        self.dialog.clear()
        self.delete_target = cursor

    def cancel(self) -> None:
        """Close the dialog without side effects."""
        self.mode = SessionMode.BROWSING
        self.dialog.clear()
        self.delete_target = None

    def handle_dialog_key(self, key: KeyPress) -> int | None:
        """Feed one key to the dialog.

        Returns the cursor whose entry should be removed when the user
        submitted the confirmation token, otherwise None.
        """
        if not self.confirming:
            return None
        if key.key == KEY_ESCAPE:
            self.cancel()
        elif key.key == KEY_ENTER:
            # An empty line is not a submission; the dialog stays open.
            if not self.dialog.buffer:
                return None
            submitted = self.dialog.submit()
            target = self.delete_target
            self.cancel()
            if submitted.strip() == CONFIRM_TOKEN:
                return target
            logger.debug("Delete not confirmed (submitted %r)", submitted)
        elif key.key == KEY_BACKSPACE:
            self.dialog.backspace()
        elif key.key == KEY_LEFT:
            self.dialog.move_left()
        elif key.key == KEY_RIGHT:
            self.dialog.move_right()
        elif key.printable is not None:
            self.dialog.insert(key.printable)
        return None


class InputLoop:
    """Dispatches key events to the session or the loader.

    Owns the cursor. ``CorruptedEntryError`` from the loader propagates to
    the caller.
    """

    def __init__(
        self,
        loader: WindowedLoader,
        config: UserConfig,
        *,
        clipboard: Callable[[str], bool] = copy_to_clipboard,
        spawn: Callable[[Sequence[str]], bool] = spawn_detached,
    ) -> None:
        self.loader = loader
        self.config = config
        self.session = SessionState()
        self.cursor = 0
        self.running = True
        self.status = ""
        self._keymap = build_keymap(config.keybinds)
        self._clipboard = clipboard
        self._spawn = spawn

    def handle(self, key: KeyPress | None) -> bool:
        """Process at most one key. Returns False once the loop should stop."""
        if key is None or not self.running:
            return self.running
        self.status = ""
        if self.session.confirming:
            self._handle_confirming(key)
        else:
            self._handle_browsing(key)
        return self.running

    def run(
        self,
        poll: Callable[[float], KeyPress | None],
        render: Callable[[InputLoop], None],
    ) -> None:
        """Render, then poll for one key with a bounded wait, until quit."""
        while self.running:
            render(self)
            self.handle(poll(POLL_TIMEOUT))

    def _handle_confirming(self, key: KeyPress) -> None:
        target = self.session.handle_dialog_key(key)
        if target is None:
            return
        if self.loader.remove(target):
            self.status = build_actionable_success("Entry deleted")
        else:
            self.status = build_actionable_error(
                "delete the entry",
                why="the entry file is missing or could not be removed",
                next_step="check the log file for details",
            )
        self._clamp_cursor()

    def _handle_browsing(self, key: KeyPress) -> None:
        action = self._keymap.get(key.printable or "")
        if action is None:
            return
        general = self.config.general
        if action is Action.QUIT:
            self.running = False
        elif action is Action.NEXT:
            self.cursor = self.loader.scroll_forward(self.cursor)
        elif action is Action.PREVIOUS:
            self.cursor = self.loader.scroll_backward(self.cursor)
        elif action is Action.COPY_BIBTEX:
            if self.loader.copy_bibtex(self.cursor, clipboard=self._clipboard):
                self.status = build_actionable_success("BibTeX copied to clipboard")
            else:
                self.status = build_actionable_error(
                    "copy the BibTeX",
                    next_step="install xclip or xsel (Linux) and retry",
                )
        elif action is Action.EDIT:
            if not self.loader.open_in_editor(
                self.cursor, general.editor_command, spawn=self._spawn
            ):
                self.status = build_actionable_error(
                    "open the editor",
                    next_step="check general.editor_command in config.json",
                )
        elif action is Action.OPEN_VIEWER:
            if not self.loader.open_in_viewer(
                self.cursor, general.pdf_viewer, general.pdf_dir, spawn=self._spawn
            ):
                self.status = build_actionable_error(
                    "open the PDF",
                    next_step="check general.pdf_dir and general.pdf_viewer in config.json",
                )
        elif action is Action.DELETE:
            if self.loader.entry_at(self.cursor) is not None:
                self.session.request_delete(self.cursor)

    def _clamp_cursor(self) -> None:
        self.cursor = max(0, min(self.cursor, len(self.loader) - 1))


__all__ = [
    "KEY_BACKSPACE",
    "KEY_ENTER",
    "KEY_ESCAPE",
    "KEY_LEFT",
    "KEY_RIGHT",
    "POLL_TIMEOUT",
    "Action",
    "ConfirmDialog",
    "InputLoop",
    "KeyPress",
    "SessionMode",
    "SessionState",
    "build_keymap",
]
