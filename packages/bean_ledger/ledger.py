"""Session-level ledger facade.

``Ledger.load`` parses and resolves into a private store and only then
publishes it, so readers never observe a half-resolved store. A published
store is never mutated again; the next ``load`` replaces it wholesale.
"""

from __future__ import annotations

from .balances import get_balances
from .logging_setup import get_logger
from .models import Balance, DirectiveStore, ParseIssue, Transaction
from .parser import parse
from .queries import get_transactions
from .resolver import resolve

_logger = get_logger("bean_ledger.ledger")


class Ledger:
    """Parsed, resolved view of one ledger text."""

    def __init__(self, text: str | None = None) -> None:
        self._store = DirectiveStore()
        if text is not None:
            self.load(text)

    def load(self, text: str) -> None:
        store = parse(text)
        synthetic = resolve(store)
        self._store = store
        _logger.info(
            "loaded ledger: %d transactions (%d synthetic), %d accounts",
            len(store.transactions),
            len(synthetic),
            len(store.open_accounts),
        )

    @property
    def store(self) -> DirectiveStore:
        return self._store

    @property
    def open_accounts(self) -> dict[str, str]:
        """Opened account names mapped to their open dates."""

        return {acc: d.date for acc, d in self._store.open_accounts.items()}

    @property
    def issues(self) -> list[ParseIssue]:
        return list(self._store.issues)

    def get_balances(self, start_date: str, end_date: str) -> list[Balance]:
        return get_balances(self._store, start_date, end_date)

    def get_transactions(self, start_date: str, end_date: str) -> list[Transaction]:
        return get_transactions(self._store, start_date, end_date)

    def unbalanced_transactions(self) -> list[Transaction]:
        """Transactions whose postings do not sum to zero (reported, never rejected)."""

        return [t for t in self._store.transactions if t.imbalance() != 0]


__all__ = ["Ledger"]
