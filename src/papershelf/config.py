"""Configuration persistence: load and save ``config.json``."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from papershelf.models import (
    CONFIG_APP_NAME,
    DEFAULT_COLORS,
    KEYBIND_FIELDS,
    GeneralSettings,
    Keybinds,
    UserConfig,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Configuration Persistence
# ============================================================================
#
# Validation contract: _dict_to_config() guarantees valid output for any input:
#
#   Field              Rule                                 Handler
#   ─────────────────  ───────────────────────────────────  ─────────────────
#   general.*          type-checked via _safe_get()         _parse_general
#   colors.<name>      known name, 3 ints in 0..255         _parse_colors
#   keybinds.*         single characters, all distinct      _parse_keybinds
#
CONFIG_FILENAME = "config.json"


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Uses platformdirs for cross-platform config directory:
    - Linux: ~/.config/papershelf/config.json
    - macOS: ~/Library/Application Support/papershelf/config.json
    - Windows: %APPDATA%/papershelf/config.json
    """
    config_dir = Path(user_config_dir(CONFIG_APP_NAME))
    return config_dir / CONFIG_FILENAME


def _safe_get(data: dict, key: str, default: Any, expected_type: type) -> Any:
    """Safely get a value from dict with type validation.

    Returns the default if key is missing or value has wrong type.
    """
    value = data.get(key, default)
    if not isinstance(value, expected_type) or (
        expected_type is int and isinstance(value, bool)
    ):
        if key in data:
            logger.warning("Config key %r has wrong type, using default %r", key, default)
        return default
    return value


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    raw = data.get(key, {})
    if not isinstance(raw, dict):
        logger.warning("Config section %r is not an object, using defaults", key)
        return {}
    return raw


def _parse_general(data: dict[str, Any]) -> GeneralSettings:
    """Parse the general section from config data."""
    raw = _section(data, "general")
    defaults = GeneralSettings()
    return GeneralSettings(
        load_size=_safe_get(raw, "load_size", defaults.load_size, int),
        pdf_viewer=_safe_get(raw, "pdf_viewer", defaults.pdf_viewer, str),
        pdf_dir=_safe_get(raw, "pdf_dir", defaults.pdf_dir, str),
        editor_command=_safe_get(raw, "editor_command", defaults.editor_command, str),
        selection_icon=_safe_get(raw, "selection_icon", defaults.selection_icon, str),
        file_icon=_safe_get(raw, "file_icon", defaults.file_icon, str),
    )


def _parse_rgb(value: Any) -> tuple[int, int, int] | None:
    if not isinstance(value, list) or len(value) != 3:
        return None
    if not all(isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in value):
        return None
    return (value[0], value[1], value[2])


def _parse_colors(data: dict[str, Any]) -> dict[str, tuple[int, int, int]]:
    """Parse the colors section, keeping defaults for invalid entries."""
    colors = dict(DEFAULT_COLORS)
    for name, value in _section(data, "colors").items():
        if name not in colors:
            logger.warning("Unknown color %r in config, ignoring it", name)
            continue
        rgb = _parse_rgb(value)
        if rgb is None:
            logger.warning("Color %r must be three integers in 0-255, using default", name)
            continue
        colors[name] = rgb
    return colors


def _parse_keybinds(data: dict[str, Any]) -> Keybinds:
    """Parse the keybinds section. Falls back to defaults on any conflict."""
    raw = _section(data, "keybinds")
    defaults = Keybinds()
    values = {
        name: _safe_get(raw, name, getattr(defaults, name), str) for name in KEYBIND_FIELDS
    }
    if any(len(value) != 1 for value in values.values()):
        logger.warning("Keybinds must be single characters, using default keybinds")
        return defaults
    if len(set(values.values())) != len(values):
        logger.warning("Keybinds must be distinct, using default keybinds")
        return defaults
    return Keybinds(**values)


def _dict_to_config(data: dict[str, Any]) -> UserConfig:
    """Deserialize a dictionary to UserConfig with type validation."""
    if not isinstance(data, dict):
        raise TypeError("config root must be an object")
    return UserConfig(
        general=_parse_general(data),
        colors=_parse_colors(data),
        keybinds=_parse_keybinds(data),
    )


def _config_to_dict(config: UserConfig) -> dict[str, Any]:
    """Serialize UserConfig to a JSON-compatible dictionary."""
    general = config.general
    return {
        "general": {
            "load_size": general.load_size,
            "pdf_viewer": general.pdf_viewer,
            "pdf_dir": general.pdf_dir,
            "editor_command": general.editor_command,
            "selection_icon": general.selection_icon,
            "file_icon": general.file_icon,
        },
        "colors": {name: list(rgb) for name, rgb in config.colors.items()},
        "keybinds": {name: getattr(config.keybinds, name) for name in KEYBIND_FIELDS},
    }


def load_config(config_path: Path | None = None) -> UserConfig:
    """Load configuration from disk.

    Returns default config if file doesn't exist or is corrupted.
    Logs specific errors to help diagnose config issues.
    """
    config_path = config_path or get_config_path()

    if not config_path.exists():
        return UserConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        return _dict_to_config(data)
    except json.JSONDecodeError as e:
        logger.warning("Config file has invalid JSON, using defaults: %s", e)
    except UnicodeDecodeError as e:
        logger.warning("Config file is not valid UTF-8, using defaults: %s", e)
    except (KeyError, TypeError) as e:
        logger.warning("Config file has invalid structure, using defaults: %s", e)
    except OSError as e:
        logger.warning("Could not read config file, using defaults: %s", e)
    return UserConfig(config_defaulted=True)


def save_config(config: UserConfig, config_path: Path | None = None) -> bool:
    """Save configuration to disk atomically.

    Uses write-to-tempfile + os.replace() to prevent partial writes
    on crash/interrupt from corrupting the config file.

    Creates the config directory if it doesn't exist.
    Returns True on success, False on failure.
    """
    config_path = config_path or get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        json_str = json.dumps(_config_to_dict(config), indent=2, ensure_ascii=False)
        fd, tmp_path = tempfile.mkstemp(dir=config_path.parent, suffix=".tmp", prefix=".config-")
        closed = False
        try:
            os.write(fd, json_str.encode("utf-8"))
            os.close(fd)
            closed = True
            os.replace(tmp_path, config_path)
        except BaseException:
            if not closed:
                os.close(fd)
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
        return True
    except OSError as e:
        logger.error("Failed to save config: %s", e)
        return False


__all__ = [
    "CONFIG_APP_NAME",
    "CONFIG_FILENAME",
    "get_config_path",
    "load_config",
    "save_config",
]
