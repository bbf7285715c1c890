"""Transaction queries and the caller-side filters used by the reports.

``get_transactions`` is the only query the engine itself defines; the filter
helpers mirror what the interactive views offer (tag, source and target
account, account type) and operate on already-fetched lists.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from decimal import Decimal
from typing import NamedTuple

from .models import Balance, DirectiveStore, Transaction


def get_transactions(store: DirectiveStore, start_date: str, end_date: str) -> list[Transaction]:
    """Return transactions dated within ``[start_date, end_date]`` in stored order."""

    return [t for t in store.transactions if start_date <= t.date <= end_date]


class TransactionSummary(NamedTuple):
    """Flow view of a transaction.

    Negative postings are sources, positive postings are targets and the
    amount is the total flowing into targets.
    """

    sources: tuple[str, ...]
    targets: tuple[str, ...]
    amount: Decimal


def transaction_summary(tx: Transaction) -> TransactionSummary:
    sources = tuple(p.account for p in tx.postings if p.amount < 0)
    targets = tuple(p.account for p in tx.postings if p.amount > 0)
    amount = sum((p.amount for p in tx.postings if p.amount > 0), Decimal("0"))
    return TransactionSummary(sources, targets, amount)


def _matches_tag(tx: Transaction, tag: str) -> bool:
    needle = tag.removeprefix("#").lower()
    return any(needle in t.lower() for t in tx.tags)


def filter_transactions(
    transactions: Iterable[Transaction],
    *,
    tag: str | None = None,
    sources: Collection[str] = (),
    targets: Collection[str] = (),
) -> list[Transaction]:
    """Filter transactions by tag and by source/target accounts.

    - ``tag``: case-insensitive substring match against each tag; a leading
      ``#`` on the query is ignored.
    - ``sources``: keep when any negative posting hits one of these accounts.
    - ``targets``: keep when any positive posting hits one of these accounts.

    Empty filters keep everything.
    """

    out: list[Transaction] = []
    for tx in transactions:
        if tag and not _matches_tag(tx, tag):
            continue
        if sources and not any(p.amount < 0 and p.account in sources for p in tx.postings):
            continue
        if targets and not any(p.amount > 0 and p.account in targets for p in tx.postings):
            continue
        out.append(tx)
    return out


def filter_balances(
    balances: Iterable[Balance],
    *,
    types: Collection[str] = (),
    accounts: Collection[str] = (),
) -> list[Balance]:
    """Keep balances whose type is in ``types`` and account in ``accounts``
    (each filter applies only when non-empty)."""

    return [
        b
        for b in balances
        if (not types or b.type in types) and (not accounts or b.account in accounts)
    ]


__all__ = [
    "TransactionSummary",
    "filter_balances",
    "filter_transactions",
    "get_transactions",
    "transaction_summary",
]
