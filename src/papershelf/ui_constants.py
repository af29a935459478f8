"""Internal UI constants for the PaperShelf app."""

from __future__ import annotations

# Seconds between scheduled redraws, independent of input
REDRAW_INTERVAL = 0.05

APP_CSS = """
Screen {
    background: $background;
    layers: base overlay;
}

#main-container {
    height: 1fr;
}

#explorer-pane {
    width: 3fr;
    height: 100%;
    padding: 1 1;
    border: round $primary;
    border-title-align: center;
    border-title-style: bold italic;
}

#content-pane {
    width: 7fr;
    height: 100%;
    padding: 1 1;
    border: round $primary;
    border-title-align: center;
    border-title-style: bold italic;
}

.content-block {
    border: solid $secondary;
    border-title-align: center;
    border-title-style: italic;
    padding: 0 1;
}

#explorer {
    height: 85%;
}

#tags {
    height: 15%;
}

#title {
    height: 20%;
    content-align: center middle;
    text-align: center;
}

#authors {
    height: 20%;
}

#description {
    height: 60%;
}

#confirm-panel {
    layer: overlay;
    display: none;
    width: 60;
    height: auto;
    offset: 10 5;
    padding: 1 2;
    background: $surface;
    border: tall $warning;
}

#confirm-panel.visible {
    display: block;
}

#status-bar {
    height: auto;
    max-height: 3;
    padding: 0 1;
    background: $panel;
    color: $foreground;
}
"""

__all__ = ["APP_CSS", "REDRAW_INTERVAL"]
