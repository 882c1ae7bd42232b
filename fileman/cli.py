"""Command-line front door for fileman.

Parses CLI options, merges them with persisted config, configures logging,
and either prints one directory listing (``--list``) or opens the GUI.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .file_model import list_directory
from .listing_table import ListingTable
from .presentation import DefaultPresentationProvider
from .runtime import config

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _log_level(value: str) -> str:
    """argparse type for logging level names."""
    name = value.strip().upper()
    if not isinstance(logging.getLevelName(name), int):
        raise argparse.ArgumentTypeError(f"unknown log level: {value!r}")
    return name


def configure_logging(level_name: str) -> None:
    logging.basicConfig(level=getattr(logging, level_name), format=LOG_FORMAT)


def _printable_name(name: str) -> str:
    """Undo surrogate escapes from undecodable filename bytes, replacing them visibly."""
    return os.fsencode(name).decode("utf-8", errors="replace")


def _write_stdout(text: str) -> None:
    encoding = getattr(sys.stdout, "encoding", None) or "utf-8"
    sys.stdout.write(text.encode(encoding, errors="replace").decode(encoding))


def format_listing(table: ListingTable) -> str:
    """Render table rows as aligned text: flags, size, mtime, name."""
    lines: list[str] = []
    for row in range(table.row_count()):
        entry = table.entry_at(row)
        kind = "d" if entry.is_directory else ("f" if entry.is_regular_file else "?")
        flags = (
            kind
            + ("r" if entry.can_read else "-")
            + ("w" if entry.can_write else "-")
            + ("x" if entry.can_execute else "-")
        )
        modified = entry.last_modified.strftime("%Y-%m-%d %H:%M")
        name = _printable_name(str(table.value_at(row, 1)))
        lines.append(f"{flags} {entry.size_bytes:>12} {modified} {name}")
    return "\n".join(lines) + ("\n" if lines else "")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browse the filesystem in a two-pane tree and table window.")
    parser.add_argument(
        "--root",
        dest="roots",
        action="append",
        type=Path,
        default=None,
        metavar="PATH",
        help="Tree root directory (repeatable). Defaults to configured roots or the filesystem roots.",
    )
    parser.add_argument("--show-hidden", action="store_true", help="Include dot-files in listings.")
    parser.add_argument("--log-level", type=_log_level, default=None, help="Logging level name (default: from config).")
    parser.add_argument("--list", dest="list_path", type=Path, metavar="PATH", help="Print the listing of PATH and exit.")
    parser.add_argument(
        "--save-settings",
        action="store_true",
        help="Store the given --root paths and --show-hidden choice as defaults, then continue.",
    )
    return parser


def save_settings(roots: list[Path] | None, show_hidden: bool) -> None:
    """Persist CLI choices; roots are kept only when at least one was given."""
    if roots:
        config.save_tree_roots([root.expanduser().absolute() for root in roots])
    config.save_show_hidden(show_hidden)
    logger.info("saved settings to %s", config.CONFIG_PATH)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or config.load_log_level())
    show_hidden = args.show_hidden or config.load_show_hidden()
    if args.save_settings:
        missing = [root for root in args.roots or () if not root.is_dir()]
        if missing:
            raise SystemExit(f"Not a directory: {missing[0]}")
        save_settings(args.roots, args.show_hidden)

    if args.list_path is not None:
        result = list_directory(args.list_path, show_hidden)
        if result.error is not None:
            raise SystemExit(str(result.error))
        table = ListingTable(DefaultPresentationProvider())
        table.load(result.snapshot)
        _write_stdout(format_listing(table))
        return 0

    roots = args.roots or config.load_tree_roots()
    missing = [root for root in roots if not root.is_dir()]
    if missing:
        raise SystemExit(f"Not a directory: {missing[0]}")

    from .gui import run_app

    run_app(
        roots=roots,
        show_hidden=show_hidden,
        max_workers=config.load_lister_workers(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
