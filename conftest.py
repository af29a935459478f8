"""Shared test fixtures for papershelf tests."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from papershelf.models import Author, Entry, Tag, UserConfig
from papershelf.store import write_entry

# ── Factories ────────────────────────────────────────────────────────────────


@pytest.fixture
def make_entry():
    """Factory fixture for creating Entry instances with sensible defaults."""

    def _make(
        title: str = "Test Paper",
        year: int = 2024,
        description: str = "Test description.",
        bibtex: str = "@article{test2024, title = {Test Paper}}",
        document_name: str = "test.pdf",
        authors: Sequence[str] = ("Test Author",),
        tags: Sequence[str] = (),
    ) -> Entry:
        return Entry(
            title=title,
            year=year,
            description=description,
            bibtex=bibtex,
            document_name=document_name,
            authors=[Author(name) for name in authors],
            tags=[Tag(label) for label in tags],
        )

    return _make


@pytest.fixture
def entry_dir(tmp_path) -> Path:
    """An empty directory for entry files."""
    directory = tmp_path / "entries"
    directory.mkdir()
    return directory


@pytest.fixture
def write_entries(entry_dir, make_entry):
    """Write one entry per title and return the paths in the given order.

    Tests build loaders from this list directly so the index order is fixed
    instead of depending on filesystem iteration order.
    """

    def _write(titles: Sequence[str], **kwargs) -> list[Path]:
        return [write_entry(make_entry(title=title, **kwargs), entry_dir) for title in titles]

    return _write


@pytest.fixture
def sample_config():
    """Factory fixture for creating UserConfig with optional overrides."""

    def _make(**kwargs) -> UserConfig:
        return UserConfig(**kwargs)

    return _make
