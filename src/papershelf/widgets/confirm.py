"""Delete confirmation panel, drawn from the session's dialog buffer."""

from __future__ import annotations

from rich.markup import escape as escape_markup
from textual.widgets import Static

from papershelf.action_messages import build_delete_confirmation_prompt
from papershelf.session import ConfirmDialog


def render_dialog_line(dialog: ConfirmDialog) -> str:
    """Render the buffer with the character cursor shown in reverse video."""
    before = escape_markup(dialog.buffer[: dialog.position])
    at = dialog.buffer[dialog.position : dialog.position + 1] or " "
    after = escape_markup(dialog.buffer[dialog.position + 1 :])
    return f"> {before}[reverse]{escape_markup(at)}[/]{after}"


class ConfirmPanel(Static):
    """Overlay shown while a delete is awaiting confirmation."""

    def show(self, title: str, dialog: ConfirmDialog) -> None:
        prompt = escape_markup(build_delete_confirmation_prompt(title))
        self.update(f"{prompt}\n\n{render_dialog_line(dialog)}")
