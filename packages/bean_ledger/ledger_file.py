"""Ledger file access: read, append and the lightweight account scan.

This is the only I/O boundary of the package. The engine itself consumes and
returns in-memory data; callers (the CLI) read text here, hand it to
:class:`~bean_ledger.ledger.Ledger`, and append new entries here.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from .logging_setup import get_logger
from .parser import scan_open_accounts

_logger = get_logger("bean_ledger.ledger_file")


class LedgerFileError(OSError):
    """Raised when the ledger file cannot be read."""


def read_ledger_text(path: str | PathLike[str]) -> str:
    """Return the ledger file's text.

    Raises :class:`LedgerFileError` when the path is missing, is not a
    regular file, or cannot be decoded/read.
    """

    p = Path(path)
    if not p.exists():
        raise LedgerFileError(f"Ledger file not found at path: {p}")
    if not p.is_file():
        raise LedgerFileError(f"Path is not a file: {p}")
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LedgerFileError(f"Failed to read ledger file {p}: {e}") from e


def append_ledger_text(path: str | PathLike[str], content: str) -> bool:
    """Append ``content`` on a new line at the end of the ledger file.

    Returns ``False`` (after logging the reason) when the file is missing, is
    not a regular file, or the write fails. The file is never created here:
    a wrong path should surface instead of silently starting a new ledger.
    """

    p = Path(path)
    if not p.exists():
        _logger.error("Ledger file not found at path: %s", p)
        return False
    if not p.is_file():
        _logger.error("Path is not a file: %s", p)
        return False
    try:
        with p.open("a", encoding="utf-8") as f:
            f.write("\n" + content)
    except OSError as e:
        _logger.error("Error appending to ledger file %s: %s", p, e)
        return False
    _logger.info("appended %d line(s) to %s", content.count("\n") + 1, p)
    return True


def list_open_account_names(path: str | PathLike[str]) -> list[str]:
    """Sorted account names from ``open`` directives; ``[]`` when unreadable."""

    try:
        text = read_ledger_text(path)
    except LedgerFileError as e:
        _logger.warning("%s", e)
        return []
    return scan_open_accounts(text)


__all__ = [
    "LedgerFileError",
    "append_ledger_text",
    "list_open_account_names",
    "read_ledger_text",
]
