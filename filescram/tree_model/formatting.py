"""Byte-size label helpers for tree rows and preview metadata."""

from __future__ import annotations


def human_size(n: int | None) -> str:
    """Return compact size label (``B``/``KB``/``MB``) or ``""`` for ``None``."""
    if n is None:
        return ""
    if n < 1024:
        return f"{n} B"
    kib = n / 1024
    if kib < 1024:
        return f"{kib:.1f} KB"
    return f"{kib / 1024:.1f} MB"


def format_bytes(n: int) -> str:
    """Return a two-decimal size label with the largest fitting unit."""
    if n <= 0:
        return "0 Bytes"
    units = ("Bytes", "KB", "MB", "GB")
    exponent = 0
    while exponent < len(units) - 1 and n >= 1024 ** (exponent + 1):
        exponent += 1
    value = round(n / (1024**exponent), 2)
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[exponent]}"
