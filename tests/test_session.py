"""Tests for the session state machine and input dispatch."""

from __future__ import annotations

import pytest

from papershelf.loader import CorruptedEntryError, WindowedLoader
from papershelf.models import Keybinds, UserConfig
from papershelf.session import (
    KEY_BACKSPACE,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_LEFT,
    KEY_RIGHT,
    POLL_TIMEOUT,
    Action,
    ConfirmDialog,
    InputLoop,
    KeyPress,
    SessionMode,
    SessionState,
    build_keymap,
)


def _press(*keys: str) -> list[KeyPress]:
    named = {KEY_ENTER, KEY_ESCAPE, KEY_BACKSPACE, KEY_LEFT, KEY_RIGHT}
    return [KeyPress(k) if k in named else KeyPress.char(k) for k in keys]


def _make_loop(paths, capacity: int = 5, config: UserConfig | None = None, **kwargs) -> InputLoop:
    kwargs.setdefault("clipboard", lambda text: True)
    kwargs.setdefault("spawn", lambda args: True)
    return InputLoop(WindowedLoader(capacity, paths), config or UserConfig(), **kwargs)


class TestKeyPress:
    def test_char_is_printable(self):
        assert KeyPress.char("x").printable == "x"

    def test_named_key_is_not_printable(self):
        assert KeyPress(KEY_ENTER).printable is None
        assert KeyPress("ctrl+a", "\x01").printable is None


class TestConfirmDialog:
    def test_insert_at_cursor(self):
        dialog = ConfirmDialog()
        for ch in "ac":
            dialog.insert(ch)
        dialog.move_left()
        dialog.insert("b")
        assert (dialog.buffer, dialog.position) == ("abc", 2)

    def test_cursor_is_clamped(self):
        dialog = ConfirmDialog("ab", 2)
        dialog.move_right()
        assert dialog.position == 2
        for _ in range(5):
            dialog.move_left()
        assert dialog.position == 0

    def test_backspace(self):
        dialog = ConfirmDialog("abc", 3)
        dialog.backspace()
        assert (dialog.buffer, dialog.position) == ("ab", 2)
        dialog.position = 0
        dialog.backspace()
        assert dialog.buffer == "ab"

    def test_submit_clears(self):
        dialog = ConfirmDialog("yes", 3)
        assert dialog.submit() == "yes"
        assert (dialog.buffer, dialog.position) == ("", 0)


class TestSessionState:
    def test_request_and_cancel(self):
        state = SessionState()
        state.request_delete(3)
        assert state.mode is SessionMode.CONFIRMING_DELETE
        assert state.delete_target == 3
        assert state.handle_dialog_key(KeyPress(KEY_ESCAPE)) is None
        assert state.mode is SessionMode.BROWSING
        assert state.delete_target is None

    def test_confirmation_token_returns_target(self):
        state = SessionState()
        state.request_delete(2)
        for key in _press("y"):
            state.handle_dialog_key(key)
        assert state.handle_dialog_key(KeyPress(KEY_ENTER)) == 2
        assert not state.confirming

    @pytest.mark.parametrize("typed", ["n", "yes", "Y", " "])
    def test_other_input_does_not_confirm(self, typed):
        state = SessionState()
        state.request_delete(0)
        for key in _press(*typed):
            state.handle_dialog_key(key)
        assert state.handle_dialog_key(KeyPress(KEY_ENTER)) is None
        assert not state.confirming

    def test_empty_enter_keeps_dialog_open(self):
        state = SessionState()
        state.request_delete(4)
        assert state.handle_dialog_key(KeyPress(KEY_ENTER)) is None
        assert state.mode is SessionMode.CONFIRMING_DELETE
        assert state.delete_target == 4
        assert (state.dialog.buffer, state.dialog.position) == ("", 0)

    def test_surrounding_whitespace_is_ignored(self):
        state = SessionState()
        state.request_delete(1)
        for key in _press(" ", "y", " "):
            state.handle_dialog_key(key)
        assert state.handle_dialog_key(KeyPress(KEY_ENTER)) == 1

    def test_dialog_keys_ignored_while_browsing(self):
        state = SessionState()
        assert state.handle_dialog_key(KeyPress.char("y")) is None
        assert state.dialog.buffer == ""


def test_build_keymap_follows_config():
    keymap = build_keymap(Keybinds(next="n", previous="p"))
    assert keymap["n"] is Action.NEXT
    assert keymap["p"] is Action.PREVIOUS
    assert "j" not in keymap
    assert len(keymap) == 7


class TestInputLoop:
    def test_navigation(self, write_entries):
        loop = _make_loop(write_entries("ABC"))
        for key in _press("j", "j", "j"):
            loop.handle(key)
        assert loop.cursor == 2
        loop.handle(KeyPress.char("k"))
        assert loop.cursor == 1

    def test_quit_stops_loop(self, write_entries):
        loop = _make_loop(write_entries("A"))
        assert loop.handle(KeyPress.char("q")) is False
        assert not loop.running

    def test_none_key_is_noop(self, write_entries):
        loop = _make_loop(write_entries("A"))
        assert loop.handle(None) is True
        assert loop.cursor == 0

    def test_unbound_key_is_ignored(self, write_entries):
        loop = _make_loop(write_entries("AB"))
        loop.handle(KeyPress.char("z"))
        assert loop.cursor == 0
        assert not loop.session.confirming

    def test_delete_confirmed_removes_entry(self, write_entries):
        paths = write_entries("ABC")
        loop = _make_loop(paths)
        for key in _press("j", "d"):
            loop.handle(key)
        assert loop.session.confirming
        assert loop.session.delete_target == 1
        for key in _press("y", KEY_ENTER):
            loop.handle(key)
        assert not paths[1].exists()
        assert [e.title for e in loop.loader.entries] == ["A", "C"]
        assert loop.status.startswith("Entry deleted")

    def test_delete_declined_keeps_entry(self, write_entries):
        paths = write_entries("AB")
        loop = _make_loop(paths)
        for key in _press("d", "n", KEY_ENTER):
            loop.handle(key)
        assert paths[0].exists()
        assert len(loop.loader) == 2
        assert not loop.session.confirming

    def test_empty_enter_does_not_remove(self, write_entries):
        paths = write_entries("AB")
        loop = _make_loop(paths)
        for key in _press("d", KEY_ENTER):
            loop.handle(key)
        assert loop.session.confirming
        assert paths[0].exists()
        assert len(loop.loader) == 2
        for key in _press("y", KEY_ENTER):
            loop.handle(key)
        assert not paths[0].exists()
        assert not loop.session.confirming

    def test_keys_are_captured_while_confirming(self, write_entries):
        loop = _make_loop(write_entries("ABC"))
        for key in _press("d", "j", "q"):
            loop.handle(key)
        assert loop.running
        assert loop.cursor == 0
        assert loop.session.dialog.buffer == "jq"

    def test_delete_last_entry_clamps_cursor(self, write_entries):
        loop = _make_loop(write_entries("AB"))
        for key in _press("j", "d", "y", KEY_ENTER):
            loop.handle(key)
        assert loop.cursor == 0
        assert [e.title for e in loop.loader.entries] == ["A"]

    def test_delete_on_empty_window_is_ignored(self):
        loop = _make_loop([])
        loop.handle(KeyPress.char("d"))
        assert not loop.session.confirming

    def test_delete_of_vanished_file_reports_error(self, write_entries):
        paths = write_entries("AB")
        loop = _make_loop(paths)
        paths[0].unlink()
        for key in _press("d", "y", KEY_ENTER):
            loop.handle(key)
        assert loop.status.startswith("Could not delete the entry.")
        assert len(loop.loader) == 2

    def test_copy_bibtex_status(self, write_entries):
        copied: list[str] = []
        loop = _make_loop(
            write_entries("A", bibtex="@book{b}"),
            clipboard=lambda text: copied.append(text) or True,
        )
        loop.handle(KeyPress.char("b"))
        assert copied == ["@book{b}"]
        assert loop.status == "BibTeX copied to clipboard."

    def test_copy_failure_status(self, write_entries):
        loop = _make_loop(write_entries("A"), clipboard=lambda text: False)
        loop.handle(KeyPress.char("b"))
        assert loop.status.startswith("Could not copy the BibTeX.")

    def test_status_cleared_on_next_key(self, write_entries):
        loop = _make_loop(write_entries("AB"))
        loop.handle(KeyPress.char("b"))
        assert loop.status
        loop.handle(KeyPress.char("j"))
        assert loop.status == ""

    def test_edit_spawns_configured_editor(self, write_entries):
        paths = write_entries("A")
        spawned: list[list[str]] = []
        config = UserConfig()
        config.general.editor_command = "vim"
        loop = _make_loop(paths, config=config, spawn=lambda a: spawned.append(list(a)) or True)
        loop.handle(KeyPress.char("e"))
        assert spawned == [["vim", str(paths[0])]]
        assert loop.status == ""

    def test_open_viewer_without_pdf_reports_error(self, tmp_path, write_entries):
        config = UserConfig()
        config.general.pdf_dir = str(tmp_path)
        loop = _make_loop(write_entries("A", document_name="missing.pdf"), config=config)
        loop.handle(KeyPress.char("o"))
        assert loop.status.startswith("Could not open the PDF.")

    def test_custom_keybinds(self, write_entries):
        config = UserConfig(keybinds=Keybinds(next="n", quit="x"))
        loop = _make_loop(write_entries("AB"), config=config)
        loop.handle(KeyPress.char("j"))
        assert loop.cursor == 0
        loop.handle(KeyPress.char("n"))
        assert loop.cursor == 1
        loop.handle(KeyPress.char("x"))
        assert not loop.running

    def test_corrupted_entry_propagates(self, write_entries):
        paths = write_entries("AB")
        loop = _make_loop(paths, capacity=0)
        paths[1].write_text("{", encoding="utf-8")
        with pytest.raises(CorruptedEntryError):
            loop.handle(KeyPress.char("j"))


class TestRun:
    def test_renders_before_each_poll_until_quit(self, write_entries):
        loop = _make_loop(write_entries("ABC"))
        script = iter([KeyPress.char("j"), None, KeyPress.char("j"), KeyPress.char("q")])
        timeouts: list[float] = []
        frames: list[int] = []

        def poll(timeout):
            timeouts.append(timeout)
            return next(script)

        loop.run(poll, lambda state: frames.append(state.cursor))
        assert frames == [0, 1, 1, 2]
        assert timeouts == [POLL_TIMEOUT] * 4
        assert not loop.running
