"""Command-line front door for filescram.

Parses CLI options, resolves the target path, and sets up logging.
Then dispatches into the interactive navigator runtime.
"""

from __future__ import annotations

import argparse
import asyncio
import shutil
import sys
from collections.abc import Sequence
from pathlib import Path

from .focus import OverlayHidePolicy
from .runtime import render_snapshot, run_navigator
from .runtime.config import load_overlay_hide_policy, load_preview_limits, load_show_hidden, save_show_hidden
from .runtime.logs import configure_logging
from .ui_theme import theme_for


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filescram",
        description="Browse a directory tree with the keyboard and preview files.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory or file to open. Defaults to current directory.")
    parser.add_argument(
        "--show-hidden",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="List dotfiles (default: saved preference, else shown).",
    )
    parser.add_argument(
        "--overlay-return",
        choices=[policy.value for policy in OverlayHidePolicy],
        default=None,
        help="Where focus goes when the overlay closes.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write debug logs to this file.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Log level for --log-file.",
    )
    parser.add_argument("--render", action="store_true", help="Print one frame for PATH and exit.")
    parser.add_argument("--max-cols", type=_positive_int, default=None, help="Frame width for --render.")
    parser.add_argument("--max-rows", type=_positive_int, default=None, help="Frame height for --render.")
    return parser


def resolve_target(path: Path) -> tuple[Path, Path | None]:
    """Return ``(root_directory, file_to_preview)`` for a CLI path.

    A file opens its parent directory with the file previewed.
    """
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if path.is_dir():
        return path, None
    return path.parent, path


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and launch filescram on a directory or file."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.log_level)

    root, preview_file = resolve_target(Path(args.path) if args.path else Path.cwd())
    show_hidden = load_show_hidden() if args.show_hidden is None else args.show_hidden
    hide_policy = (
        load_overlay_hide_policy() if args.overlay_return is None else OverlayHidePolicy(args.overlay_return)
    )
    options = {
        "show_hidden": show_hidden,
        "hide_policy": hide_policy,
        "preview_limits": load_preview_limits(),
        "theme": theme_for(args.no_color),
    }

    if args.render:
        term = shutil.get_terminal_size((80, 24))
        columns = args.max_cols or term.columns
        rows = args.max_rows or term.lines
        frame = asyncio.run(render_snapshot(root, columns, rows, preview_file, **options))
        sys.stdout.write(frame.removeprefix("\033[H\033[J").replace("\r\n", "\n") + "\n")
        return

    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SystemExit("filescram needs an interactive terminal (use --render for a snapshot).")
    asyncio.run(run_navigator(root, preview_file, on_show_hidden_changed=save_show_hidden, **options))
