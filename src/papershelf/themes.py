"""Theme system: config RGB colors to Textual theme variables."""

from __future__ import annotations

from textual.theme import Theme as TextualTheme

THEME_NAME = "papershelf"

# Background/accent colors not covered by the user-configurable palette
BASE_COLORS = {
    "background": "#1e1e1e",
    "panel": "#262626",
    "muted": "#75715e",
    "orange": "#fd971f",
    "pink": "#f92672",
    "green": "#a6e22e",
}


def rgb_to_hex(rgb: tuple[int, int, int]) -> str:
    """Format an RGB triple as ``#rrggbb``.

    >>> rgb_to_hex((48, 48, 48))
    '#303030'
    """
    r, g, b = rgb
    return f"#{r:02x}{g:02x}{b:02x}"


def build_palette(colors: dict[str, tuple[int, int, int]]) -> dict[str, str]:
    """Return every configured color as hex, keyed by element name."""
    return {name: rgb_to_hex(rgb) for name, rgb in colors.items()}


def build_textual_theme(colors: dict[str, tuple[int, int, int]]) -> TextualTheme:
    """Build a Textual Theme exposing the palette as ``$th-*`` CSS variables."""
    palette = build_palette(colors)
    variables = {f"th-{name.replace('_', '-')}": value for name, value in palette.items()}
    variables.update(
        {f"th-{name.replace('_', '-')}": value for name, value in BASE_COLORS.items()}
    )
    return TextualTheme(
        name=THEME_NAME,
        primary=palette["master_block_title"],
        secondary=palette["content_block_title"],
        accent=BASE_COLORS["green"],
        foreground=palette["title_content"],
        background=BASE_COLORS["background"],
        surface=BASE_COLORS["panel"],
        panel=BASE_COLORS["panel"],
        warning=BASE_COLORS["orange"],
        error=BASE_COLORS["pink"],
        success=BASE_COLORS["green"],
        dark=True,
        variables=variables,
    )


__all__ = [
    "BASE_COLORS",
    "THEME_NAME",
    "build_palette",
    "build_textual_theme",
    "rgb_to_hex",
]
