"""Preview pane content: plain-text documents for the selected node."""

from __future__ import annotations

from .source import (
    PreviewDocument,
    PreviewLimits,
    build_file_preview,
    build_preview,
    decode_text,
    error_document,
    help_document,
    is_binary_bytes,
    language_name,
    message_document,
)

__all__ = [
    "PreviewDocument",
    "PreviewLimits",
    "build_file_preview",
    "build_preview",
    "decode_text",
    "error_document",
    "help_document",
    "is_binary_bytes",
    "language_name",
    "message_document",
]
