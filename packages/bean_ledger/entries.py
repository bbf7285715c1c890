"""Validated entry-creation requests rendered to ledger text.

Two request shapes back the "add account" and "add transaction" flows:

- :class:`NewAccount` renders an ``open`` directive and, for a non-zero
  opening balance, a ``pad`` from ``Equity:Opening-Balances`` plus a
  ``balance`` assertion on the same date. The resolver later turns that pair
  into the opening correction.
- :class:`NewTransaction` renders a two-posting transaction, preceded by
  ``open`` directives for any account not yet known.

Everything rendered here must parse back with :mod:`bean_ledger.parser`, so
validation is deliberately as strict as the grammar (uppercase currencies,
``[A-Za-z0-9_:-]`` account names, single-line descriptions).
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .amounts import parse_amount
from .models import OPENING_BALANCES_ACCOUNT, AccountType

_ACCOUNT_RE = re.compile(r"^[A-Za-z0-9_:-]+$")
_CURRENCY_RE = re.compile(r"^[A-Z]+$")
_TAG_RE = re.compile(r"^#[A-Za-z0-9_-]+$")


class TransactionKind(str, Enum):
    """Sign convention of a new transaction.

    Expense and Transfer credit the source and debit the target; Income debits
    the source (the receiving asset) and credits the target (the income
    account).
    """

    EXPENSE = "Expense"
    INCOME = "Income"
    TRANSFER = "Transfer"


def _today() -> str:
    return date.today().isoformat()


def _check_date(v: str) -> str:
    try:
        datetime.strptime(v, "%Y-%m-%d")
    except ValueError as exc:
        raise ValueError(f"date must be YYYY-MM-DD, got {v!r}") from exc
    return v


def _check_account(v: str) -> str:
    if not _ACCOUNT_RE.match(v) or v.startswith(":") or v.endswith(":") or "::" in v:
        raise ValueError(
            f"invalid account name {v!r}: use colon-separated letters, digits, '_' or '-'"
        )
    return v


def _to_amount(v: Any) -> Decimal:
    if isinstance(v, Decimal):
        return v
    return parse_amount(str(v))


def _plain(d: Decimal) -> str:
    return format(d, "f")


class _EntryModel(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    date: str = Field(default_factory=_today)
    currency: str = "USD"

    @field_validator("date")
    @classmethod
    def _date_shape(cls, v: str) -> str:
        return _check_date(v)

    @field_validator("currency")
    @classmethod
    def _currency_code(cls, v: str) -> str:
        v = v.upper()
        if not _CURRENCY_RE.match(v):
            raise ValueError(f"currency must be letters only, got {v!r}")
        return v


class NewAccount(_EntryModel):
    """Request to open ``<account_type>:<name>`` with an optional opening balance."""

    account_type: AccountType = AccountType.ASSETS
    name: str
    opening_balance: Decimal = Decimal("0")

    @field_validator("name")
    @classmethod
    def _name_chars(cls, v: str) -> str:
        return _check_account(v)

    @field_validator("opening_balance", mode="before")
    @classmethod
    def _parse_balance(cls, v: Any) -> Decimal:
        return _to_amount(v)

    @property
    def account(self) -> str:
        return f"{self.account_type.value}:{self.name}"


class NewTransaction(_EntryModel):
    """Request to record ``amount`` moving between ``source`` and ``target``."""

    kind: TransactionKind = TransactionKind.EXPENSE
    description: str = ""
    amount: Decimal
    source: str
    target: str
    tags: list[str] = Field(default_factory=list)

    @field_validator("source", "target")
    @classmethod
    def _account_chars(cls, v: str) -> str:
        return _check_account(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, v: Any) -> Decimal:
        return _to_amount(v)

    @field_validator("amount")
    @classmethod
    def _positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("amount must be greater than zero")
        return v

    @field_validator("description")
    @classmethod
    def _single_line(cls, v: str) -> str:
        if "\n" in v or "\r" in v:
            raise ValueError("description must be a single line")
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, v: Any) -> list[str]:
        # Accept "vacation #2024" as well as ["vacation", "#2024"].
        raw = v.split() if isinstance(v, str) else [str(t) for t in (v or [])]
        tags: list[str] = []
        for t in raw:
            for piece in t.split():
                tag = piece if piece.startswith("#") else f"#{piece}"
                if not _TAG_RE.match(tag):
                    raise ValueError(f"invalid tag {piece!r}")
                tags.append(tag)
        return tags

    @model_validator(mode="after")
    def _distinct_accounts(self) -> NewTransaction:
        if self.source == self.target:
            raise ValueError("source and target must be different accounts")
        return self


def format_new_account(req: NewAccount) -> str:
    """Render ``open`` (+ ``pad``/``balance`` for a non-zero opening balance)."""

    lines = [f"{req.date} open {req.account} {req.currency}"]
    if req.opening_balance != 0:
        lines.append(f"{req.date} pad {req.account} {OPENING_BALANCES_ACCOUNT}")
        lines.append(
            f"{req.date} balance {req.account} {_plain(req.opening_balance)} {req.currency}"
        )
    return "\n".join(lines)


def _quote(description: str) -> str:
    return '"' + description.replace("\\", "\\\\").replace('"', '\\"') + '"'


def format_new_transaction(req: NewTransaction, known_accounts: Iterable[str] = ()) -> str:
    """Render the transaction, opening any account missing from ``known_accounts``."""

    known = set(known_accounts)
    lines: list[str] = []
    for account in (req.source, req.target):
        if account not in known:
            lines.append(f"{req.date} open {account} {req.currency}")
            known.add(account)

    header = f"{req.date} * {_quote(req.description)}"
    if req.tags:
        header += " " + " ".join(req.tags)
    lines.append(header)

    if req.kind is TransactionKind.INCOME:
        debit, credit = req.source, req.target
    else:
        debit, credit = req.target, req.source
    amount = _plain(req.amount)
    lines.append(f"  {debit} {amount} {req.currency}")
    lines.append(f"  {credit} -{amount} {req.currency}")
    return "\n".join(lines)


__all__ = [
    "NewAccount",
    "NewTransaction",
    "TransactionKind",
    "format_new_account",
    "format_new_transaction",
]
