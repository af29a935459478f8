"""Windowed entry loader.

The loader keeps a bounded, contiguous slice ("window") of the entry index in
memory together with the parsed entries, and slides it one position at a time
as the user scrolls. Positions are offsets into the index snapshot taken at
construction; the index is never re-scanned, only shortened by ``remove``.

Invariants while the window is non-empty::

    len(positions) == len(entries) <= capacity + 1
    positions == list(range(positions[0], positions[-1] + 1))
"""

from __future__ import annotations

import logging
import math
from collections import deque
from collections.abc import Callable, Sequence
from pathlib import Path

from papershelf.io_actions import (
    build_command_args,
    copy_to_clipboard,
    expand_user_path,
    spawn_detached,
)
from papershelf.models import DEFAULT_WINDOW_CAPACITY, Entry
from papershelf.store import read_entry, scan_entries

logger = logging.getLogger(__name__)


class CorruptedEntryError(RuntimeError):
    """An indexed entry stopped parsing while the window scrolled onto it.

    The index is built from files assumed readable, so this means the
    collection changed underneath the program. The window is left as it was.
    """

    def __init__(self, position: int, path: Path) -> None:
        super().__init__(f"Entry at index position {position} ({path}) can no longer be parsed")
        self.position = position
        self.path = path


def compute_window_capacity(rows: int | None) -> int:
    """Derive the window capacity from the terminal height in rows.

    Mirrors the explorer pane geometry: one header row, two margins of two
    rows, 85% of the remainder for the list, minus its border.
    """
    if rows is None or rows <= 0:
        return DEFAULT_WINDOW_CAPACITY
    return max(1, math.floor(((rows - 1) - 2 * 2) * 0.85 - 1 - 1))


class WindowedLoader:
    """Bounded, bidirectionally scrollable cache over an entry index."""

    def __init__(self, capacity: int, index: Sequence[Path]) -> None:
        if capacity < 0:
            raise ValueError(f"Window capacity must be non-negative, got {capacity}")
        self.capacity = capacity
        self._index: list[Path] = list(index)
        self._positions: deque[int] = deque()
        self._entries: deque[Entry] = deque()
        self._fill_initial_window()

    @classmethod
    def load(cls, capacity: int, directory: Path, tag_filter: str | None = None) -> WindowedLoader:
        """Scan ``directory`` and build a loader over the resulting index."""
        return cls(capacity, scan_entries(directory, tag_filter))

    def _fill_initial_window(self) -> None:
        """Load positions from 0 until the window holds ``capacity + 1`` entries.

        A path that fails to parse is deleted from the index snapshot instead
        of being left in place. Later positions therefore shift down by one
        and ``total`` shrinks, which keeps the loaded positions contiguous.
        """
        position = 0
        while position < len(self._index) and len(self._positions) < self.capacity + 1:
            path = self._index[position]
            entry = read_entry(path)
            if entry is None:
                logger.warning("Skipping %s: contents could not be parsed as an entry", path)
                del self._index[position]
                continue
            self._positions.append(position)
            self._entries.append(entry)
            position += 1
        logger.debug(
            "Initial window holds %d of %d indexed entries",
            len(self._entries),
            len(self._index),
        )

    def _refill_emptied_window(self) -> None:
        # Deleting every loaded entry leaves no anchor to slide from.
        if self._index:
            logger.info("Window emptied by deletes, reloading from the start of the index")
            self._fill_initial_window()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def index(self) -> list[Path]:
        return list(self._index)

    @property
    def positions(self) -> list[int]:
        return list(self._positions)

    @property
    def entries(self) -> list[Entry]:
        return list(self._entries)

    @property
    def total(self) -> int:
        """Number of entries in the index snapshot."""
        return len(self._index)

    def __len__(self) -> int:
        return len(self._entries)

    def entry_at(self, cursor: int) -> Entry | None:
        """Return the loaded entry at ``cursor``, or None when out of range."""
        if 0 <= cursor < len(self._entries):
            return self._entries[cursor]
        return None

    def path_at(self, cursor: int) -> Path | None:
        """Return the backing file of the entry at ``cursor``."""
        if not 0 <= cursor < len(self._positions):
            return None
        position = self._positions[cursor]
        if position >= len(self._index):
            return None
        return self._index[position]

    # ------------------------------------------------------------------
    # Scrolling
    # ------------------------------------------------------------------

    def _read_indexed(self, position: int) -> Entry:
        path = self._index[position]
        entry = read_entry(path)
        if entry is None:
            logger.error("Entry at position %d (%s) failed to parse while scrolling", position, path)
            raise CorruptedEntryError(position, path)
        return entry

    def scroll_forward(self, cursor: int) -> int:
        """Slide the window one entry forward, or move the cursor at the end.

        Returns the new cursor. Raises CorruptedEntryError if the next entry
        no longer parses.
        """
        if not self._positions:
            self._refill_emptied_window()
            return 0
        next_position = self._positions[-1] + 1
        if next_position >= len(self._index):
            return min(cursor + 1, len(self._entries) - 1)
        entry = self._read_indexed(next_position)
        self._positions.popleft()
        self._entries.popleft()
        self._positions.append(next_position)
        self._entries.append(entry)
        return cursor

    def scroll_backward(self, cursor: int) -> int:
        """Slide the window one entry back, or move the cursor at the start.

        Returns the new cursor. Raises CorruptedEntryError if the previous
        entry no longer parses.
        """
        if not self._positions:
            self._refill_emptied_window()
            return 0
        first_position = self._positions[0]
        if first_position <= 0:
            return max(cursor - 1, 0)
        entry = self._read_indexed(first_position - 1)
        self._positions.pop()
        self._entries.pop()
        self._positions.appendleft(first_position - 1)
        self._entries.appendleft(entry)
        return cursor

    # ------------------------------------------------------------------
    # Actions on the selected entry
    # ------------------------------------------------------------------

    def copy_bibtex(self, cursor: int, clipboard: Callable[[str], bool] = copy_to_clipboard) -> bool:
        """Copy the bibtex of the entry at ``cursor`` to the clipboard."""
        entry = self.entry_at(cursor)
        if entry is None:
            logger.warning("No entry at cursor %d, not copying bibtex", cursor)
            return False
        return clipboard(entry.bibtex)

    def remove(self, cursor: int) -> bool:
        """Delete the entry file at ``cursor`` and drop it from the window.

        Loaded positions after the removed one shift down by one because the
        index itself shrinks. Returns False, leaving all state untouched, when
        there is no selection or the file cannot be deleted.
        """
        if not 0 <= cursor < len(self._positions):
            logger.warning("No entry at cursor %d, not removing anything", cursor)
            return False
        position = self._positions[cursor]
        path = self._index[position]
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Entry file %s no longer exists, not removing it", path)
            return False
        except OSError as e:
            logger.warning("Failed to remove entry file %s: %s", path, e)
            return False

        del self._index[position]
        self._positions = deque(p - 1 if p > position else p for p in self._positions)
        del self._positions[cursor]
        del self._entries[cursor]
        logger.info("Removed entry %s", path)
        return True

    def open_in_editor(
        self,
        cursor: int,
        command: str,
        spawn: Callable[[Sequence[str]], bool] = spawn_detached,
    ) -> bool:
        """Open the entry file at ``cursor`` with the configured editor."""
        path = self.path_at(cursor)
        if path is None:
            logger.warning("No entry at cursor %d, not opening editor", cursor)
            return False
        try:
            args = build_command_args(command, str(path))
        except ValueError as e:
            logger.warning("Editor command %r is unusable: %s", command, e)
            return False
        return spawn(args)

    def open_in_viewer(
        self,
        cursor: int,
        command: str,
        base_directory: str | Path,
        spawn: Callable[[Sequence[str]], bool] = spawn_detached,
    ) -> bool:
        """Open the PDF belonging to the entry at ``cursor`` in the viewer."""
        entry = self.entry_at(cursor)
        if entry is None:
            logger.warning("No entry at cursor %d, not opening PDF viewer", cursor)
            return False
        if not entry.document_name:
            logger.warning("Entry %r has no document name, not opening PDF viewer", entry.title)
            return False
        pdf_path = expand_user_path(Path(base_directory) / entry.document_name)
        if not pdf_path.exists():
            logger.warning("PDF %s does not exist, not opening PDF viewer", pdf_path)
            return False
        try:
            args = build_command_args(command, str(pdf_path))
        except ValueError as e:
            logger.warning("PDF viewer command %r is unusable: %s", command, e)
            return False
        return spawn(args)


__all__ = [
    "CorruptedEntryError",
    "WindowedLoader",
    "compute_window_capacity",
]
