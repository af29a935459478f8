"""Lightweight BibTeX field extraction.

Only the handful of fields needed to pre-fill an entry are extracted. Values
may be brace-delimited (one level of nested braces), quoted, or bare numbers.
"""

from __future__ import annotations

import re

from papershelf.models import Author, Entry

_VALUE = r"(?:\{(?P<braced>(?:[^{}]|\{[^{}]*\})*)\}|\"(?P<quoted>[^\"]*)\"|(?P<bare>\d+))"
_FIELD_CACHE: dict[str, re.Pattern[str]] = {}

# Braces used only for capitalization protection, e.g. {GPU}
_PROTECTING_BRACES = re.compile(r"\{([^{}]*)\}")


def _field_pattern(name: str) -> re.Pattern[str]:
    pattern = _FIELD_CACHE.get(name)
    if pattern is None:
        pattern = re.compile(rf"(?<![\w-]){re.escape(name)}\s*=\s*{_VALUE}", re.IGNORECASE)
        _FIELD_CACHE[name] = pattern
    return pattern


def extract_field(bibtex: str, name: str) -> str | None:
    """Return the raw value of field ``name``, or None when absent.

    >>> extract_field('@article{k, title = {A {GPU} Study}}', "title")
    'A {GPU} Study'
    """
    match = _field_pattern(name).search(bibtex)
    if match is None:
        return None
    for group in ("braced", "quoted", "bare"):
        value = match.group(group)
        if value is not None:
            return value
    return None


def _clean(value: str) -> str:
    return " ".join(_PROTECTING_BRACES.sub(r"\1", value).split())


def extract_title(bibtex: str) -> str:
    value = extract_field(bibtex, "title")
    return _clean(value) if value else ""


def extract_year(bibtex: str) -> int | None:
    value = extract_field(bibtex, "year")
    if value is None:
        return None
    match = re.search(r"\d{4}", value)
    return int(match.group()) if match else None


def extract_authors(bibtex: str) -> list[str]:
    """Split the author field on BibTeX's `` and `` separator."""
    value = extract_field(bibtex, "author")
    if not value:
        return []
    names = re.split(r"\s+and\s+", _clean(value))
    return [name.strip() for name in names if name.strip()]


def fill_entry_from_bibtex(entry: Entry) -> Entry:
    """Fill empty title, year and authors of ``entry`` from its bibtex, in place."""
    if not entry.bibtex:
        return entry
    if not entry.title:
        entry.title = extract_title(entry.bibtex)
    if not entry.year:
        entry.year = extract_year(entry.bibtex) or 0
    if not entry.authors:
        entry.authors = [Author(name) for name in extract_authors(entry.bibtex)]
    return entry


__all__ = [
    "extract_authors",
    "extract_field",
    "extract_title",
    "extract_year",
    "fill_entry_from_bibtex",
]
