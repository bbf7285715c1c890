"""Amount parsing and formatting helpers shared by the parser, aggregator and
entry formatting."""

from __future__ import annotations

import re
from decimal import ROUND_FLOOR, Decimal, InvalidOperation

CENT = Decimal("0.01")
_HALF_CENT = Decimal("0.005")
# ASCII digits only; Decimal() would also take "1_000" and non-ASCII digits.
_AMOUNT_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)", re.ASCII)
# Differences at or below this are treated as already balanced.
BALANCE_TOLERANCE = Decimal("0.00001")


class AmountParseError(ValueError):
    """Raised when a ledger amount token is not a finite decimal."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"invalid amount: {raw!r}")
        self.raw = raw


def parse_amount(raw: str) -> Decimal:
    """Parse an optionally signed decimal token such as ``-150.00`` or ``+3``."""

    s = raw.strip()
    if not _AMOUNT_RE.fullmatch(s):
        raise AmountParseError(raw)
    try:
        return Decimal(s)
    except InvalidOperation as exc:  # pragma: no cover - pattern already checked
        raise AmountParseError(raw) from exc


def round_cents(d: Decimal) -> Decimal:
    """Round to cents with halves going up, so -0.125 becomes -0.12."""

    return (d + _HALF_CENT).quantize(CENT, rounding=ROUND_FLOOR)


def format_amount(d: Decimal) -> str:
    """Format with exactly two decimals and a leading minus for negatives."""

    q = round_cents(d)
    if q == 0:
        q = abs(q)
    return f"{q:.2f}"


__all__ = [
    "AmountParseError",
    "BALANCE_TOLERANCE",
    "CENT",
    "format_amount",
    "parse_amount",
    "round_cents",
]
