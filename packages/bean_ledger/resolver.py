"""Balance-assertion resolution.

Each ``balance`` assertion declares the cumulative balance of an account at
the start of a day. When the running balance disagrees, the most recent
``pad`` for that account supplies the difference: a synthetic transaction,
dated on the pad, moves the amount from the pad's source account.

Assertions are processed in date order and the transaction list is re-sorted
after every insertion, so later assertions see earlier corrections.
"""

from __future__ import annotations

from decimal import Decimal

from .amounts import BALANCE_TOLERANCE
from .logging_setup import get_logger
from .models import (
    SYNTHETIC_DESCRIPTION,
    BalanceAssertion,
    DirectiveStore,
    PadDirective,
    Posting,
    Transaction,
)

_logger = get_logger("bean_ledger.resolver")


def running_balance(store: DirectiveStore, account: str, before: str) -> Decimal:
    """Sum of ``account`` postings on transactions dated strictly before ``before``."""

    total = Decimal("0")
    for tx in store.transactions:
        if tx.date >= before:
            # Sorted by date; nothing later can qualify.
            break
        for p in tx.postings:
            if p.account == account:
                total += p.amount
    return total


def _latest_pad(pads: list[PadDirective], assertion: BalanceAssertion) -> PadDirective | None:
    chosen: PadDirective | None = None
    for pad in pads:
        if pad.account != assertion.account or pad.date > assertion.date:
            continue
        # Strict comparison keeps the first-parsed pad among equal dates.
        if chosen is None or pad.date > chosen.date:
            chosen = pad
    return chosen


def resolve(store: DirectiveStore) -> list[Transaction]:
    """Insert synthetic corrections so balance assertions hold.

    Mutates ``store`` in place and returns the synthetic transactions created.
    Assertions without an applicable pad are left unenforced. Running this
    again on a resolved store creates nothing.
    """

    created: list[Transaction] = []
    store.balance_assertions.sort(key=lambda a: a.date)

    for assertion in store.balance_assertions:
        running = running_balance(store, assertion.account, assertion.date)
        diff = assertion.amount - running
        if abs(diff) <= BALANCE_TOLERANCE:
            continue

        pad = _latest_pad(store.pads, assertion)
        if pad is None:
            _logger.debug(
                "balance %s on %s is off by %s with no pad; leaving it unenforced",
                assertion.account,
                assertion.date,
                diff,
            )
            continue

        tx = Transaction(
            date=pad.date,
            description=SYNTHETIC_DESCRIPTION,
            tags=[],
            postings=[
                Posting(account=assertion.account, amount=diff, currency=assertion.currency),
                Posting(account=pad.source_account, amount=-diff, currency=assertion.currency),
            ],
            is_synthetic=True,
        )
        store.transactions.append(tx)
        store.sort_transactions()
        created.append(tx)
        _logger.debug(
            "padded %s %s %s from %s on %s",
            assertion.account,
            diff,
            assertion.currency,
            pad.source_account,
            pad.date,
        )

    return created


__all__ = ["resolve", "running_balance"]
