"""Per-account balance aggregation over a date window.

For each account the aggregator reports four figures:

- ``start_balance``: balance carried into the window. When the window starts
  before the account was opened, the opening correction (and anything dated
  strictly before the open date) is shown instead, so a freshly opened
  account displays its opening balance rather than zero.
- ``end_balance``: everything dated on or before ``end_date``.
- ``difference``: ``end_balance - start_balance``.
- ``current_balance``: all postings regardless of date.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .amounts import round_cents
from .models import OPENING_BALANCES_ACCOUNT, Balance, DirectiveStore, account_root


@dataclass(slots=True)
class _Totals:
    start: Decimal = Decimal("0")
    end: Decimal = Decimal("0")
    current: Decimal = Decimal("0")


def _counts_toward_start(
    tx_date: str, is_synthetic: bool, start_date: str, open_date: str | None
) -> bool:
    if open_date is not None and start_date < open_date:
        return tx_date <= open_date and (is_synthetic or tx_date < open_date)
    return tx_date < start_date


def get_balances(store: DirectiveStore, start_date: str, end_date: str) -> list[Balance]:
    """Compute balances for every opened or posted account, sorted by name.

    ``Equity:Opening-Balances`` is omitted. Accounts with postings but no
    ``open`` directive are included and always use the plain start rule.
    """

    totals: dict[str, _Totals] = {acc: _Totals() for acc in store.open_accounts}
    for tx in store.transactions:
        for p in tx.postings:
            totals.setdefault(p.account, _Totals())

    for tx in store.transactions:
        for p in tx.postings:
            t = totals[p.account]
            opened = store.open_accounts.get(p.account)
            if _counts_toward_start(
                tx.date, tx.is_synthetic, start_date, opened.date if opened else None
            ):
                t.start += p.amount
            if tx.date <= end_date:
                t.end += p.amount
            t.current += p.amount

    results = [
        Balance(
            account=acc,
            type=account_root(acc),
            start_balance=round_cents(t.start),
            end_balance=round_cents(t.end),
            difference=round_cents(t.end - t.start),
            current_balance=round_cents(t.current),
        )
        for acc, t in totals.items()
        if acc != OPENING_BALANCES_ACCOUNT
    ]
    results.sort(key=lambda b: b.account)
    return results


__all__ = ["get_balances"]
