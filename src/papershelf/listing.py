"""Whole-collection reports: tag counts and PDF diagnostics."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from papershelf.io_actions import expand_user_path
from papershelf.models import Entry
from papershelf.store import read_entry, scan_entries

logger = logging.getLogger(__name__)


def load_all_entries(directory: Path) -> list[Entry]:
    """Parse every entry in ``directory``, skipping unparseable files."""
    entries: list[Entry] = []
    for path in scan_entries(directory):
        entry = read_entry(path)
        if entry is None:
            logger.warning("Skipping %s: contents could not be parsed as an entry", path)
            continue
        entries.append(entry)
    return entries


def count_tags(entries: Iterable[Entry]) -> Counter[str]:
    """Count how many times each tag label is used."""
    return Counter(tag.label for entry in entries for tag in entry.tags)


def format_tag_counts(counts: Counter[str]) -> str:
    if not counts:
        return "No tags found."
    return "\n".join(
        f"{tag}: appears {count} time{'s' if count != 1 else ''}"
        for tag, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    )


@dataclass(slots=True)
class PdfReport:
    """PDFs referenced but missing, and PDFs present but unreferenced."""

    missing: list[Path] = field(default_factory=list)
    unreferenced: list[Path] = field(default_factory=list)


def pdf_diagnostic(entries: Iterable[Entry], pdf_dir: str | Path) -> PdfReport:
    """Compare entry document names against the PDFs stored in ``pdf_dir``.

    Raises OSError when ``pdf_dir`` cannot be listed.
    """
    base = expand_user_path(pdf_dir)
    report = PdfReport()
    referenced: set[Path] = set()
    for entry in entries:
        if not entry.document_name:
            continue
        path = base / entry.document_name
        if path.exists():
            referenced.add(path)
        else:
            report.missing.append(path)
    stored = sorted(
        path for path in base.iterdir() if path.is_file() and path.suffix.lower() == ".pdf"
    )
    report.unreferenced = [path for path in stored if path not in referenced]
    return report


def format_pdf_report(report: PdfReport) -> str:
    lines = ["PDF files referenced by an entry but missing:"]
    lines.extend(f"  {path}" for path in report.missing)
    if not report.missing:
        lines.append("  none")
    lines.append("PDF files without an entry:")
    lines.extend(f"  {path}" for path in report.unreferenced)
    if not report.unreferenced:
        lines.append("  none")
    return "\n".join(lines)


__all__ = [
    "PdfReport",
    "count_tags",
    "format_pdf_report",
    "format_tag_counts",
    "load_all_entries",
    "pdf_diagnostic",
]
