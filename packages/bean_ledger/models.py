"""Data models for ``bean_ledger``.

Directive and transaction records are frozen ``dataclass`` values; the
per-parse registries live on a single mutable :class:`DirectiveStore` so no
ledger state is ever shared at module level.

Amounts are :class:`decimal.Decimal` and dates are kept as the lexical
``YYYY-MM-DD`` strings found in the ledger text. Zero-padded ISO dates compare
correctly as strings, so no calendar parsing is needed for ordering or window
checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

OPENING_BALANCES_ACCOUNT = "Equity:Opening-Balances"
SYNTHETIC_DESCRIPTION = "Opening Balance Correction"


class AccountType(str, Enum):
    """Top-level account categories recognized by the ledger format."""

    ASSETS = "Assets"
    LIABILITIES = "Liabilities"
    EQUITY = "Equity"
    INCOME = "Income"
    EXPENSES = "Expenses"


def account_root(account: str) -> str:
    """Return the first colon-delimited segment of ``account``."""

    return account.split(":", 1)[0]


def account_type(account: str) -> AccountType | None:
    """Return the :class:`AccountType` of ``account`` or ``None`` for custom roots."""

    try:
        return AccountType(account_root(account))
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Directives
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OpenDirective:
    account: str
    date: str
    currency: str | None = None


@dataclass(frozen=True, slots=True)
class PadDirective:
    """Future mismatches on ``account`` are filled from ``source_account``."""

    date: str
    account: str
    source_account: str


@dataclass(frozen=True, slots=True)
class BalanceAssertion:
    """Expected cumulative balance of ``account`` at the start of ``date``."""

    date: str
    account: str
    amount: Decimal
    currency: str


@dataclass(frozen=True, slots=True)
class Posting:
    account: str
    amount: Decimal
    currency: str


@dataclass(slots=True)
class Transaction:
    """A dated transaction with its postings.

    Mutable only while the parser is appending postings to it; once the store
    has been resolved transactions are treated as read-only.
    """

    date: str
    description: str = ""
    tags: list[str] = field(default_factory=list)
    postings: list[Posting] = field(default_factory=list)
    is_synthetic: bool = False
    flag: str = "*"
    line_no: int | None = None

    def imbalance(self) -> Decimal:
        """Sum of posting amounts (zero for a balanced transaction)."""

        return sum((p.amount for p in self.postings), Decimal("0"))


# ---------------------------------------------------------------------------
# Parse diagnostics
# ---------------------------------------------------------------------------


class IssueKind(str, Enum):
    INVALID_AMOUNT = "invalid_amount"
    MISSING_FIELD = "missing_field"


@dataclass(frozen=True, slots=True)
class ParseIssue:
    """A line the parser skipped, kept so callers can report it."""

    line_no: int
    kind: IssueKind
    message: str
    line: str


# ---------------------------------------------------------------------------
# Store and results
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class DirectiveStore:
    """Everything produced by a single parse.

    ``open_accounts`` maps account name to its :class:`OpenDirective`; a later
    ``open`` for the same account overwrites the earlier one. ``transactions``
    is kept sorted by date (stable) after parsing and after every resolver
    insertion.
    """

    open_accounts: dict[str, OpenDirective] = field(default_factory=dict)
    pads: list[PadDirective] = field(default_factory=list)
    balance_assertions: list[BalanceAssertion] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    issues: list[ParseIssue] = field(default_factory=list)

    def sort_transactions(self) -> None:
        self.transactions.sort(key=lambda t: t.date)


@dataclass(frozen=True, slots=True)
class Balance:
    """Per-account balances for one date window, rounded to cents."""

    account: str
    type: str
    start_balance: Decimal
    end_balance: Decimal
    difference: Decimal
    current_balance: Decimal


__all__ = [
    "OPENING_BALANCES_ACCOUNT",
    "SYNTHETIC_DESCRIPTION",
    "AccountType",
    "account_root",
    "account_type",
    "OpenDirective",
    "PadDirective",
    "BalanceAssertion",
    "Posting",
    "Transaction",
    "IssueKind",
    "ParseIssue",
    "DirectiveStore",
    "Balance",
]
