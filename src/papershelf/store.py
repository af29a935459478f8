"""Entry persistence: one JSON document per entry in a directory.

Reading never yields partial results: a file that cannot be opened, is not
valid JSON, or does not have the expected structure is reported as ``None``.
New entries are stored under a name derived from the SHA-256 of their
serialized content, so re-saving identical content is idempotent.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from papershelf.models import ENTRY_SUFFIX, Author, Entry, Tag

logger = logging.getLogger(__name__)


class EntryFormatError(ValueError):
    """Raised when decoded data does not have the structure of an entry."""


# Scalar fields and their expected JSON types. bool is rejected for "year"
# separately because it is a subclass of int.
_SCALAR_FIELDS: dict[str, type] = {
    "title": str,
    "year": int,
    "description": str,
    "bibtex": str,
    "document_name": str,
}


def entry_to_dict(entry: Entry) -> dict[str, Any]:
    """Serialize an Entry to a JSON-compatible dictionary."""
    return {
        "title": entry.title,
        "year": entry.year,
        "description": entry.description,
        "bibtex": entry.bibtex,
        "document_name": entry.document_name,
        "authors": [{"name": author.name} for author in entry.authors],
        "tags": [{"label": tag.label} for tag in entry.tags],
    }


def _parse_named_list(data: dict[str, Any], key: str, item_key: str) -> list[str]:
    raw = data.get(key, [])
    if not isinstance(raw, list):
        raise EntryFormatError(f"{key!r} must be a list")
    values: list[str] = []
    for item in raw:
        if not isinstance(item, dict) or not isinstance(item.get(item_key), str):
            raise EntryFormatError(f"every item of {key!r} needs a string {item_key!r}")
        values.append(item[item_key])
    return values


def dict_to_entry(data: Any) -> Entry:
    """Deserialize a decoded JSON document into an Entry.

    Missing fields take their defaults, unknown keys are ignored, and a field
    of the wrong type raises EntryFormatError.
    """
    if not isinstance(data, dict):
        raise EntryFormatError("entry document must be an object")
    scalars: dict[str, Any] = {}
    for key, expected_type in _SCALAR_FIELDS.items():
        if key not in data:
            continue
        value = data[key]
        if not isinstance(value, expected_type) or isinstance(value, bool):
            raise EntryFormatError(f"{key!r} must be of type {expected_type.__name__}")
        scalars[key] = value
    return Entry(
        **scalars,
        authors=[Author(name) for name in _parse_named_list(data, "authors", "name")],
        tags=[Tag(label) for label in _parse_named_list(data, "tags", "label")],
    )


def serialize_entry(entry: Entry) -> str:
    """Return the canonical on-disk text of an entry."""
    return json.dumps(entry_to_dict(entry), indent=2, ensure_ascii=False) + "\n"


def entry_filename(entry: Entry) -> str:
    """Return the content-derived filename for an entry."""
    digest = hashlib.sha256(serialize_entry(entry).encode("utf-8")).hexdigest()
    return f"{digest}{ENTRY_SUFFIX}"


def is_entry_filename(name: str) -> bool:
    """Return True for names following the entry file convention."""
    return name.endswith(ENTRY_SUFFIX) and not name.startswith(".")


def read_entry(path: Path) -> Entry | None:
    """Read and parse one entry file. Returns None on any failure."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return dict_to_entry(data)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Could not read entry %s: %s", path, e)
    except json.JSONDecodeError as e:
        logger.debug("Entry %s is not valid JSON: %s", path, e)
    except EntryFormatError as e:
        logger.debug("Entry %s has invalid structure: %s", path, e)
    return None


def write_entry(entry: Entry, directory: Path) -> Path:
    """Store an entry in ``directory`` atomically. Returns the written path.

    Uses write-to-tempfile + os.replace() so an interrupted write never
    leaves a truncated entry behind.
    """
    text = serialize_entry(entry)
    filepath = directory / entry_filename(entry)
    directory.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp", prefix=".entry-")
    closed = False
    try:
        os.write(fd, text.encode("utf-8"))
        os.close(fd)
        closed = True
        os.replace(tmp_path, filepath)
    except BaseException:
        if not closed:
            os.close(fd)
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
    logger.info("Wrote entry %r to %s", entry.title, filepath)
    return filepath


def scan_entries(directory: Path, tag_filter: str | None = None) -> list[Path]:
    """List entry files in ``directory`` in filesystem order.

    With ``tag_filter``, only files that parse into an entry carrying that
    exact tag are kept; unparseable candidates are skipped and logged.
    Raises OSError when the directory itself cannot be listed.
    """
    paths: list[Path] = []
    for path in directory.iterdir():
        if not is_entry_filename(path.name) or not path.is_file():
            continue
        if tag_filter is None:
            paths.append(path)
            continue
        entry = read_entry(path)
        if entry is None:
            logger.warning("Skipping %s while filtering by tag: not a valid entry", path)
            continue
        if entry.has_tag(tag_filter):
            paths.append(path)
    logger.debug("Scanned %d entries in %s (tag filter: %r)", len(paths), directory, tag_filter)
    return paths


__all__ = [
    "EntryFormatError",
    "dict_to_entry",
    "entry_filename",
    "entry_to_dict",
    "is_entry_filename",
    "read_entry",
    "scan_entries",
    "serialize_entry",
    "write_entry",
]
