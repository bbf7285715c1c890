"""Public interface for the ``bean_ledger`` package.

This module exposes the engine entry points and public models as the stable
import surface. There is no runtime logic here, only symbol re-exports.
"""

from .amounts import AmountParseError, parse_amount
from .balances import get_balances
from .entries import (
    NewAccount,
    NewTransaction,
    TransactionKind,
    format_new_account,
    format_new_transaction,
)
from .ledger import Ledger
from .ledger_file import (
    LedgerFileError,
    append_ledger_text,
    list_open_account_names,
    read_ledger_text,
)
from .models import (
    OPENING_BALANCES_ACCOUNT,
    AccountType,
    Balance,
    BalanceAssertion,
    DirectiveStore,
    IssueKind,
    OpenDirective,
    PadDirective,
    ParseIssue,
    Posting,
    Transaction,
)
from .parser import parse, scan_open_accounts
from .queries import filter_balances, filter_transactions, get_transactions
from .resolver import resolve

__all__ = [
    # Engine
    "parse",
    "scan_open_accounts",
    "resolve",
    "get_balances",
    "get_transactions",
    "filter_balances",
    "filter_transactions",
    "Ledger",
    # File boundary
    "read_ledger_text",
    "append_ledger_text",
    "list_open_account_names",
    "LedgerFileError",
    # Entry creation
    "NewAccount",
    "NewTransaction",
    "TransactionKind",
    "format_new_account",
    "format_new_transaction",
    # Models / types
    "AccountType",
    "Balance",
    "BalanceAssertion",
    "DirectiveStore",
    "IssueKind",
    "OpenDirective",
    "PadDirective",
    "ParseIssue",
    "Posting",
    "Transaction",
    "OPENING_BALANCES_ACCOUNT",
    "AmountParseError",
    "parse_amount",
]
