"""Clipboard and external-process helpers.

Both capabilities are fallible and never fatal: callers get ``False`` back
and a warning is logged.
"""

from __future__ import annotations

import logging
import os
import platform
import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

SUBPROCESS_TIMEOUT = 5  # seconds, for clipboard helpers


def build_command_args(command: str, target: str) -> list[str]:
    """Build subprocess argument list for a configured external command.

    The command template can use {path} as a placeholder. If no placeholder
    is found, the target is appended as the last argument.
    """
    args = shlex.split(command, posix=os.name != "nt")
    if os.name == "nt":
        # Windows split keeps wrapping quotes when posix=False.
        args = [
            arg[1:-1] if len(arg) >= 2 and arg.startswith('"') and arg.endswith('"') else arg
            for arg in args
        ]
    if not args:
        raise ValueError("Command is empty")
    if "{path}" in command:
        return [arg.replace("{path}", target) for arg in args]
    return [*args, target]


def get_clipboard_command_plan(system: str) -> tuple[list[list[str]], str] | None:
    """Return clipboard command candidates and input encoding for a platform."""
    if system == "Darwin":
        return ([["pbcopy"]], "utf-8")
    if system == "Linux":
        return ([["xclip", "-selection", "clipboard"], ["xsel", "--clipboard", "--input"]], "utf-8")
    if system == "Windows":
        return ([["clip"]], "utf-16")
    return None


def copy_to_clipboard(text: str) -> bool:
    """Copy text to system clipboard. Returns True on success.

    Tries each platform clipboard tool in turn with timeout protection.
    """
    try:
        system = platform.system()
        plan = get_clipboard_command_plan(system)
        if plan is None:
            logger.warning("Clipboard copy failed: unsupported platform %s", system)
            return False
        commands, encoding = plan
        payload = text.encode(encoding)
        for index, command in enumerate(commands):
            try:
                subprocess.run(  # nosec B603
                    command,
                    input=payload,
                    check=True,
                    shell=False,
                    timeout=SUBPROCESS_TIMEOUT,
                )
                break
            except (FileNotFoundError, subprocess.CalledProcessError):
                if index == len(commands) - 1:
                    raise
        return True
    except (
        subprocess.CalledProcessError,
        FileNotFoundError,
        subprocess.TimeoutExpired,
        OSError,
    ) as e:
        logger.warning("Clipboard copy failed: %s", e)
        return False


def spawn_detached(args: Sequence[str]) -> bool:
    """Start an external program without waiting for it. Returns True on spawn."""
    try:
        # User-configured local command execution is an explicit feature.
        subprocess.Popen(  # nosec B603
            list(args),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
        return True
    except (ValueError, OSError) as e:
        logger.warning("Failed to start %r: %s", args[0] if args else "", e)
        return False


def expand_user_path(path: str | Path) -> Path:
    """Expand a leading ``~`` or ``$HOME`` to the user's home directory."""
    text = str(path)
    if text == "$HOME" or text.startswith(("$HOME/", "$HOME" + os.sep)):
        text = "~" + text[len("$HOME") :]
    return Path(text).expanduser()


__all__ = [
    "SUBPROCESS_TIMEOUT",
    "build_command_args",
    "copy_to_clipboard",
    "expand_user_path",
    "get_clipboard_command_plan",
    "spawn_detached",
]
