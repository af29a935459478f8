"""Tests for command building, clipboard and process helpers."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from papershelf.io_actions import (
    build_command_args,
    copy_to_clipboard,
    expand_user_path,
    get_clipboard_command_plan,
    spawn_detached,
)


class TestBuildCommandArgs:
    def test_appends_target_without_placeholder(self) -> None:
        assert build_command_args("zathura --fork", "/p/a.pdf") == ["zathura", "--fork", "/p/a.pdf"]

    def test_replaces_placeholder(self) -> None:
        assert build_command_args("open -a Preview {path}", "/p/a.pdf") == [
            "open",
            "-a",
            "Preview",
            "/p/a.pdf",
        ]

    def test_windows_quoted_executable(self, monkeypatch) -> None:
        monkeypatch.setattr("papershelf.io_actions.os.name", "nt", raising=False)
        args = build_command_args(
            '"C:\\Program Files\\SumatraPDF\\SumatraPDF.exe" {path}',
            "C:\\Users\\alice\\paper.pdf",
        )
        assert args == [
            "C:\\Program Files\\SumatraPDF\\SumatraPDF.exe",
            "C:\\Users\\alice\\paper.pdf",
        ]

    def test_rejects_empty_command(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            build_command_args("   ", "/p/a.pdf")


@pytest.mark.parametrize(
    ("system", "first_command", "encoding"),
    [
        ("Darwin", ["pbcopy"], "utf-8"),
        ("Linux", ["xclip", "-selection", "clipboard"], "utf-8"),
        ("Windows", ["clip"], "utf-16"),
    ],
)
def test_clipboard_plan(system, first_command, encoding) -> None:
    plan = get_clipboard_command_plan(system)
    assert plan is not None
    commands, plan_encoding = plan
    assert commands[0] == first_command
    assert plan_encoding == encoding


def test_clipboard_plan_unknown_platform() -> None:
    assert get_clipboard_command_plan("Plan9") is None


class TestCopyToClipboard:
    def test_falls_back_to_second_linux_tool(self) -> None:
        calls: list[list[str]] = []

        def fake_run(command, **kwargs):
            calls.append(command)
            if command[0] == "xclip":
                raise FileNotFoundError("xclip")
            return MagicMock(returncode=0)

        with (
            patch("papershelf.io_actions.platform.system", return_value="Linux"),
            patch("papershelf.io_actions.subprocess.run", side_effect=fake_run),
        ):
            assert copy_to_clipboard("@misc{x}") is True
        assert [c[0] for c in calls] == ["xclip", "xsel"]

    def test_all_tools_missing(self) -> None:
        with (
            patch("papershelf.io_actions.platform.system", return_value="Linux"),
            patch("papershelf.io_actions.subprocess.run", side_effect=FileNotFoundError("x")),
        ):
            assert copy_to_clipboard("text") is False

    def test_timeout_is_reported_as_failure(self) -> None:
        with (
            patch("papershelf.io_actions.platform.system", return_value="Darwin"),
            patch(
                "papershelf.io_actions.subprocess.run",
                side_effect=subprocess.TimeoutExpired("pbcopy", 5),
            ),
        ):
            assert copy_to_clipboard("text") is False

    def test_unsupported_platform(self) -> None:
        with patch("papershelf.io_actions.platform.system", return_value="Plan9"):
            assert copy_to_clipboard("text") is False


class TestSpawnDetached:
    def test_starts_process_in_new_session(self) -> None:
        with patch("papershelf.io_actions.subprocess.Popen") as popen:
            assert spawn_detached(["zathura", "a.pdf"]) is True
        args, kwargs = popen.call_args
        assert args[0] == ["zathura", "a.pdf"]
        assert kwargs["start_new_session"] is True

    def test_missing_program(self) -> None:
        with patch(
            "papershelf.io_actions.subprocess.Popen", side_effect=FileNotFoundError("nope")
        ):
            assert spawn_detached(["nope"]) is False


class TestExpandUserPath:
    def test_tilde(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        assert expand_user_path("~/.paper") == tmp_path / ".paper"

    def test_home_variable(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        assert expand_user_path("$HOME/.paper") == tmp_path / ".paper"
        assert expand_user_path("$HOME") == tmp_path

    def test_other_paths_untouched(self) -> None:
        assert expand_user_path("/srv/papers") == Path("/srv/papers")
        assert expand_user_path("$HOMEWORK/x") == Path("$HOMEWORK/x")
