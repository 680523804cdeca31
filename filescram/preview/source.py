"""Plain-text preview documents for the selected tree node.

Builds a title/body pair per node: folder info, metadata cards for images,
documents, archives and binaries, size-limit notices, and truncated text.
Source files get a ``Language:`` banner resolved through the Pygments lexer
registry; content is never highlighted.
"""

from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import dataclass
from pathlib import Path

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

from ..tree_model.formatting import format_bytes
from ..tree_model.types import NodeKind, TreeNode

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_PREVIEW_BYTES = 512 * 1024
DEFAULT_MAX_PREVIEW_LINES = 500
BINARY_SAMPLE_BYTES = 1024

IMAGE_SUFFIXES = frozenset({".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp"})
ARCHIVE_SUFFIXES = frozenset({".zip", ".tar", ".gz", ".7z", ".rar"})
BINARY_SUFFIXES = frozenset({".exe", ".dll", ".so", ".dylib"})
PLAIN_SUFFIXES = frozenset({"", ".txt", ".log", ".md", ".markdown", ".json"})


@dataclass(frozen=True)
class PreviewLimits:
    """Upper bounds applied before reading and when truncating text."""

    max_bytes: int = DEFAULT_MAX_PREVIEW_BYTES
    max_lines: int = DEFAULT_MAX_PREVIEW_LINES


@dataclass(frozen=True)
class PreviewDocument:
    """Rendered preview payload: pane title, body text, and category."""

    title: str
    body: str
    kind: str = "text"

    @property
    def lines(self) -> list[str]:
        return self.body.splitlines()


def is_binary_bytes(data: bytes) -> bool:
    """Return whether more than 1% of the leading sample is NUL bytes."""
    sample = data[:BINARY_SAMPLE_BYTES]
    if not sample:
        return False
    return sample.count(0) / len(sample) > 0.01


def decode_text(data: bytes) -> str:
    """Decode file bytes as UTF-8 (BOM stripped), falling back to Latin-1."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def language_name(path: Path) -> str | None:
    """Return a human language name for ``path`` from its filename."""
    if path.suffix.lower() in PLAIN_SUFFIXES:
        return None
    try:
        return get_lexer_for_filename(path.name).name
    except ClassNotFound:
        return None


def _truncate(text: str, limits: PreviewLimits) -> str:
    lines = text.split("\n")
    if len(lines) <= limits.max_lines:
        return text
    head = "\n".join(lines[: limits.max_lines])
    return f"{head}\n\n[... truncated at {limits.max_lines} lines, total: {len(lines)} lines]"


def _modified_label(path: Path) -> str:
    mtime = path.stat().st_mtime
    return _dt.datetime.fromtimestamp(mtime).strftime("%Y-%m-%d %H:%M:%S")


def _metadata_card(path: Path, heading: str, note: str, *, show_format: bool = True) -> str:
    size = path.stat().st_size
    lines = [heading, "=" * 15, ""]
    if show_format:
        lines.append(f"Format: {path.suffix[1:].upper() or 'none'}")
    else:
        lines.append(f"Extension: {path.suffix or 'none'}")
    lines.append(f"Size: {format_bytes(size)}")
    lines.append(f"Modified: {_modified_label(path)}")
    lines.extend(["", note, f"Path: {path}"])
    return "\n".join(lines)


def folder_document(node: TreeNode) -> PreviewDocument:
    body = f"Folder\n{node.path}\n\nUse → to open this folder, Enter or Space to expand it."
    return PreviewDocument(title=node.name, body=body, kind="folder")


def action_document(node: TreeNode) -> PreviewDocument:
    body = node.description or "Press Enter to run this action."
    return PreviewDocument(title=node.name, body=body, kind="action")


def error_document(path: Path, exc: Exception) -> PreviewDocument:
    body = f"Error previewing file:\n{path}\n\n{exc}"
    return PreviewDocument(title=path.name, body=body, kind="error")


def build_file_preview(path: Path, limits: PreviewLimits | None = None) -> PreviewDocument:
    """Build a preview for one file path; read failures become error documents."""
    active = limits or PreviewLimits()
    title = path.name
    suffix = path.suffix.lower()
    try:
        size = path.stat().st_size
        if size > active.max_bytes:
            body = "\n".join(
                [
                    "Large File",
                    "=" * 15,
                    "",
                    f"File size: {format_bytes(size)}",
                    f"Limit: {format_bytes(active.max_bytes)}",
                    "",
                    "File is too large to preview.",
                    f"Path: {path}",
                ]
            )
            return PreviewDocument(title=title, body=body, kind="large")
        if suffix in IMAGE_SUFFIXES:
            note = "[Image preview not available in terminal]"
            return PreviewDocument(title, _metadata_card(path, "Image File", note), kind="image")
        if suffix == ".pdf":
            note = "[PDF preview not available in terminal]"
            return PreviewDocument(title, _metadata_card(path, "PDF Document", note), kind="pdf")
        if suffix in ARCHIVE_SUFFIXES:
            note = "[Archive contents listing not implemented]"
            return PreviewDocument(title, _metadata_card(path, "Archive File", note), kind="archive")
        if suffix in BINARY_SUFFIXES:
            return _binary_document(path)

        data = path.read_bytes()
        if is_binary_bytes(data):
            return _binary_document(path)
        text = decode_text(data)
        language = language_name(path)
        if language is not None:
            body = f"Language: {language}\n{'=' * 20}\n\n{_truncate(text, active)}"
            return PreviewDocument(title, body, kind="code")
        return PreviewDocument(title, _truncate(text, active), kind="text")
    except OSError as exc:
        LOGGER.debug("preview of %s failed", path, exc_info=True)
        return error_document(path, exc)


def _binary_document(path: Path) -> PreviewDocument:
    note = "[Binary content - no preview available]"
    body = _metadata_card(path, "Binary File", note, show_format=False)
    return PreviewDocument(path.name, body, kind="binary")


def build_preview(node: TreeNode, limits: PreviewLimits | None = None) -> PreviewDocument:
    """Build the preview document for a tree node of any kind."""
    if node.kind is NodeKind.FOLDER:
        return folder_document(node)
    if node.kind is NodeKind.ACTION:
        return action_document(node)
    return build_file_preview(node.path, limits)


def message_document(title: str, message: str) -> PreviewDocument:
    return PreviewDocument(title=title, body=message, kind="message")


def help_document(limits: PreviewLimits | None = None) -> PreviewDocument:
    """Return the key and overlay-command reference."""
    active = limits or PreviewLimits()
    body = "\n".join(
        [
            "File Navigator Help",
            "",
            "Navigation:",
            "→ / l      step into folder     ← / h      step out / parent",
            "Space      toggle folder        Enter      toggle folder / open file",
            "↑↓ / j k   move selection       PgUp PgDn  page",
            "Tab        switch pane          q          quit",
            "",
            "Search & Commands:",
            "Ctrl+F     open search overlay",
            "/          open command overlay",
            "Esc        close overlay",
            "",
            "Commands (in overlay):",
            "/help      show this help",
            "/up        go up one directory",
            "/home      go to home directory",
            "/root      go to filesystem root",
            "/search    search for files (not implemented yet)",
            "",
            f"File size limit: {format_bytes(active.max_bytes)}",
            f"Line limit: {active.max_lines} lines",
        ]
    )
    return PreviewDocument(title="Help", body=body, kind="help")


__all__ = [
    "PreviewDocument",
    "PreviewLimits",
    "build_file_preview",
    "build_preview",
    "decode_text",
    "error_document",
    "folder_document",
    "help_document",
    "is_binary_bytes",
    "language_name",
    "message_document",
]
