"""CLI/bootstrap helpers for the papershelf application."""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import shutil
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from platformdirs import user_cache_dir

from papershelf.action_messages import build_actionable_error
from papershelf.bibtex import fill_entry_from_bibtex
from papershelf.config import get_config_path, load_config, save_config
from papershelf.listing import (
    count_tags,
    format_pdf_report,
    format_tag_counts,
    load_all_entries,
    pdf_diagnostic,
)
from papershelf.loader import WindowedLoader, compute_window_capacity
from papershelf.models import CONFIG_APP_NAME, Author, Entry, Tag, UserConfig
from papershelf.session import InputLoop
from papershelf.store import write_entry

logger = logging.getLogger(__name__)

LOG_FILENAME = "papershelf.log"


def get_entry_dir() -> Path:
    """Return the per-user directory holding entry files, creating it if needed.

    - Linux: ~/.cache/papershelf/
    - macOS: ~/Library/Caches/papershelf/
    """
    entry_dir = Path(user_cache_dir(CONFIG_APP_NAME))
    entry_dir.mkdir(parents=True, exist_ok=True)
    return entry_dir


def _configure_logging(debug: bool) -> None:
    """Log to a rotating file in the cache directory. DEBUG when debug=True."""
    log_dir = Path(user_cache_dir(CONFIG_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILENAME

    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG if debug else logging.INFO)


def _validate_interactive_tty() -> bool:
    """Return True when stdin/stdout are interactive terminals."""
    return bool(sys.stdin.isatty() and sys.stdout.isatty())


def _terminal_rows() -> int:
    return shutil.get_terminal_size(fallback=(0, 0)).lines


def _entry_from_args(args: argparse.Namespace) -> Entry:
    """Build an Entry from the add-entry options, filling gaps from the bibtex."""
    entry = Entry(
        title=args.title or "",
        year=args.year or 0,
        description=args.desc or "",
        bibtex=args.bibtex or "",
        document_name=args.doc or "",
        authors=[Author(name) for name in args.author],
        tags=[Tag(label) for label in args.tag],
    )
    return fill_entry_from_bibtex(entry)


def _resolve_capacity(config: UserConfig, terminal_rows_fn: Callable[[], int]) -> int:
    if config.general.load_size > 0:
        return config.general.load_size
    return compute_window_capacity(terminal_rows_fn())


def _run_browser(
    args: argparse.Namespace,
    entry_dir: Path,
    config: UserConfig,
    *,
    terminal_rows_fn: Callable[[], int],
    validate_interactive_tty_fn: Callable[[], bool],
    app_factory: Callable[..., Any] | None,
) -> int:
    if not validate_interactive_tty_fn():
        print(
            "Error: papershelf --open requires an interactive TTY.",
            file=sys.stderr,
        )
        print("Next steps:", file=sys.stderr)
        print("  - Run papershelf --open directly in a terminal session", file=sys.stderr)
        print("  - Use --list-tags for non-interactive output", file=sys.stderr)
        return 2

    capacity = _resolve_capacity(config, terminal_rows_fn)
    try:
        loader = WindowedLoader.load(capacity, entry_dir, args.filter_tag or None)
    except OSError as e:
        print(f"Error: Failed to list entries in {entry_dir}: {e}", file=sys.stderr)
        return 1
    logger.info(
        "Browsing %d entries (window capacity %d, tag filter %r)",
        loader.total,
        capacity,
        args.filter_tag,
    )

    if app_factory is None:
        from papershelf.app import PaperShelf as _PaperShelf

        app_factory = _PaperShelf

    app = app_factory(InputLoop(loader, config))
    app.run()
    return app.return_code or 0


def _add_entry(args: argparse.Namespace, entry_dir: Path) -> int:
    entry = _entry_from_args(args)
    if not entry.title:
        print(
            build_actionable_error(
                "add the entry",
                why="no title was given and none could be read from the bibtex",
                next_step="pass --title or a bibtex entry with a title field",
            ),
            file=sys.stderr,
        )
        return 1
    try:
        path = write_entry(entry, entry_dir)
    except OSError as e:
        print(f"Error: Failed to write entry to {entry_dir}: {e}", file=sys.stderr)
        return 1
    print(f"Saved {entry.title!r} to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="papershelf",
        description="Keep a personal bibliography and browse it in a TUI",
    )
    parser.add_argument("-t", "--title", type=str, default=None, help="Title of the paper")
    parser.add_argument("-y", "--year", type=int, default=None, help="Year of publication")
    parser.add_argument("--desc", type=str, default=None, help="Short description of the contents")
    parser.add_argument(
        "-b",
        "--bibtex",
        type=str,
        default=None,
        help="BibTeX entry; title, year and authors are read from it when not given",
    )
    parser.add_argument(
        "--doc",
        type=str,
        default=None,
        help="File name of the paper's PDF inside general.pdf_dir",
    )
    parser.add_argument(
        "-a",
        "--author",
        action="append",
        default=[],
        help="Author of the paper (repeat for multiple authors)",
    )
    parser.add_argument(
        "--tag",
        action="append",
        default=[],
        help="Tag to attach to the paper (repeat for multiple tags)",
    )
    parser.add_argument(
        "--filter-tag",
        type=str,
        default=None,
        help="With --open, only browse entries carrying this exact tag",
    )
    parser.add_argument("-o", "--open", action="store_true", help="Open the TUI")
    parser.add_argument(
        "--list-tags",
        action="store_true",
        help="Print every tag with its number of uses and exit",
    )
    parser.add_argument(
        "--pdf-diagnostic",
        action="store_true",
        help="Report missing and unreferenced PDFs and exit",
    )
    parser.add_argument(
        "--write-config",
        action="store_true",
        help="Write the effective configuration to config.json and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (~/.cache/papershelf/papershelf.log)",
    )
    return parser


def main(
    argv: list[str] | None = None,
    *,
    load_config_fn: Callable[[], UserConfig] = load_config,
    get_entry_dir_fn: Callable[[], Path] = get_entry_dir,
    configure_logging_fn: Callable[[bool], None] = _configure_logging,
    validate_interactive_tty_fn: Callable[[], bool] = _validate_interactive_tty,
    terminal_rows_fn: Callable[[], int] = _terminal_rows,
    app_factory: Callable[..., Any] | None = None,
) -> int:
    """Main entry point. Returns exit code."""
    args = build_parser().parse_args(argv)

    configure_logging_fn(args.debug)
    logger.debug("papershelf starting, argv=%s", argv if argv is not None else sys.argv[1:])

    config = load_config_fn()
    try:
        entry_dir = get_entry_dir_fn()
    except OSError as e:
        print(f"Error: Could not create the entry directory: {e}", file=sys.stderr)
        return 1

    if args.write_config:
        if not save_config(config):
            print("Error: Failed to write config (see log for details)", file=sys.stderr)
            return 1
        print(f"Wrote {get_config_path()}")
        return 0

    if args.open:
        return _run_browser(
            args,
            entry_dir,
            config,
            terminal_rows_fn=terminal_rows_fn,
            validate_interactive_tty_fn=validate_interactive_tty_fn,
            app_factory=app_factory,
        )

    if args.list_tags:
        print(format_tag_counts(count_tags(load_all_entries(entry_dir))))
        return 0

    if args.pdf_diagnostic:
        try:
            report = pdf_diagnostic(load_all_entries(entry_dir), config.general.pdf_dir)
        except OSError as e:
            print(
                build_actionable_error(
                    "run the PDF diagnostic",
                    why=f"the PDF directory could not be listed ({e})",
                    next_step="check general.pdf_dir in config.json",
                ),
                file=sys.stderr,
            )
            return 1
        print(format_pdf_report(report))
        return 0

    return _add_entry(args, entry_dir)


__all__ = [
    "LOG_FILENAME",
    "_configure_logging",
    "_entry_from_args",
    "_validate_interactive_tty",
    "build_parser",
    "get_entry_dir",
    "main",
]
