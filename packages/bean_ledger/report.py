"""Rich table builders for balances and transactions.

Builders return :class:`rich.table.Table` objects; printing is left to the
caller's console so the CLI and tests can share them.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from rich.table import Table
from rich.text import Text

from .amounts import format_amount
from .models import Balance, Transaction
from .queries import transaction_summary


def _money(d: Decimal, currency: str) -> str:
    return f"{format_amount(d)} {currency}"


def balances_table(
    balances: Sequence[Balance], *, currency: str, title: str | None = None
) -> Table:
    """Type/account rows with a TOTAL footer over the listed balances."""

    table = Table(title=title, show_footer=True)
    zero = Decimal("0")
    total_start = sum((b.start_balance for b in balances), zero)
    total_end = sum((b.end_balance for b in balances), zero)
    total_diff = sum((b.difference for b in balances), zero)
    total_curr = sum((b.current_balance for b in balances), zero)

    table.add_column("Type", footer="TOTAL")
    table.add_column("Account", footer=f"({len(balances)} shown)")
    table.add_column("Start balance", justify="right", footer=_money(total_start, currency))
    table.add_column("End balance", justify="right", footer=_money(total_end, currency))
    table.add_column("Difference", justify="right", footer=_money(total_diff, currency))
    table.add_column("Current balance", justify="right", footer=_money(total_curr, currency))

    for b in balances:
        table.add_row(
            b.type,
            b.account,
            _money(b.start_balance, currency),
            _money(b.end_balance, currency),
            _money(b.difference, currency),
            _money(b.current_balance, currency),
        )
    return table


def transactions_table(
    transactions: Sequence[Transaction], *, currency: str, title: str | None = None
) -> Table:
    """Date/tag/description/source/target/amount rows with an amount total.

    Amount is the sum of positive postings, i.e. what flowed into the targets.
    """

    summaries = [transaction_summary(t) for t in transactions]
    total = sum((s.amount for s in summaries), Decimal("0"))

    table = Table(title=title, show_footer=True)
    table.add_column("Date")
    table.add_column("Tag")
    table.add_column("Description")
    table.add_column("Source account")
    table.add_column("Target account", footer="TOTAL")
    table.add_column("Amount", justify="right", footer=_money(total, currency))

    for tx, s in zip(transactions, summaries, strict=True):
        description = Text(tx.description, style="dim" if tx.is_synthetic else "")
        table.add_row(
            tx.date,
            " ".join(tx.tags),
            description,
            ", ".join(s.sources),
            ", ".join(s.targets),
            _money(s.amount, currency),
        )
    return table


__all__ = ["balances_table", "transactions_table"]
