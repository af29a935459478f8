"""User-facing copy for confirmations, notifications and CLI errors."""

from __future__ import annotations

from papershelf.models import CONFIRM_TOKEN


def _ensure_sentence(text: str) -> str:
    """Return text with terminal sentence punctuation."""
    cleaned = text.strip()
    if not cleaned:
        return ""
    if cleaned.endswith((".", "!", "?")):
        return cleaned
    return f"{cleaned}."


def build_next_step_hint(next_step: str) -> str:
    """Build a canonical next-step guidance line."""
    return f"Next step: {_ensure_sentence(next_step)}"


def build_actionable_error(
    action: str,
    *,
    next_step: str,
    why: str | None = None,
) -> str:
    """Build a 2-3 line actionable error message."""
    lines = [f"Could not {action.strip()}."]
    if why:
        lines.append(f"Why: {_ensure_sentence(why)}")
    lines.append(build_next_step_hint(next_step))
    return "\n".join(lines)


def build_actionable_success(message: str, *, detail: str | None = None) -> str:
    """Build a concise success message with optional detail."""
    lines = [_ensure_sentence(message)]
    if detail:
        lines.append(_ensure_sentence(detail))
    return "\n".join(lines)


def build_delete_confirmation_prompt(title: str) -> str:
    """Build the prompt shown above the delete dialog's input line."""
    shown = title.strip() or "this entry"
    return f"Delete {shown!r}?\nType {CONFIRM_TOKEN!r} and press Enter to confirm, Esc to cancel."


def build_corrupted_entry_message(path: str) -> str:
    """Build the exit message for an entry that stopped parsing mid-session."""
    return build_actionable_error(
        "keep browsing",
        why=f"{path} changed on disk and can no longer be read",
        next_step="fix or delete the file, then restart papershelf",
    )


__all__ = [
    "build_actionable_error",
    "build_actionable_success",
    "build_corrupted_entry_message",
    "build_delete_confirmation_prompt",
    "build_next_step_hint",
]
