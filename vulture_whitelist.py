"""Vulture whitelist for Textual framework false positives.

Textual dispatches lifecycle hooks and event handlers by name, and compose()
is called by the framework. Vulture can't trace these, so we declare them here.
"""

# ── PaperShelf (App) ─────────────────────────────────────────────────
from papershelf.app import PaperShelf

PaperShelf.TITLE
PaperShelf.CSS
PaperShelf.ENABLE_COMMAND_PALETTE
PaperShelf.compose
PaperShelf.on_mount
PaperShelf.on_key
PaperShelf.input_loop
