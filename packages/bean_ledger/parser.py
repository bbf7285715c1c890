"""Line-oriented parser for the plain-text ledger format.

Grammar (one directive per line, whitespace-separated fields)::

    YYYY-MM-DD open ACCOUNT [CURRENCY]
    YYYY-MM-DD pad ACCOUNT SOURCE_ACCOUNT
    YYYY-MM-DD balance ACCOUNT AMOUNT CURRENCY
    YYYY-MM-DD (*|!) ["DESCRIPTION"] [#tag ...]
      ACCOUNT AMOUNT CURRENCY

Lines whose trimmed content starts with ``;`` are comments. Malformed lines
never abort a parse: they are skipped, and those that look like directives
but cannot be read are recorded as :class:`~bean_ledger.models.ParseIssue`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .amounts import AmountParseError, parse_amount
from .logging_setup import get_logger
from .models import (
    BalanceAssertion,
    DirectiveStore,
    IssueKind,
    OpenDirective,
    PadDirective,
    ParseIssue,
    Posting,
    Transaction,
)

_logger = get_logger("bean_ledger.parser")

_DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")
_DESCRIPTION_RE = re.compile(r'^"((?:[^"\\]|\\.)*)"')
_UNESCAPE_RE = re.compile(r"\\(.)")
_TAG_RE = re.compile(r"(?:^|\s)(#[A-Za-z0-9_-]+)")
# The amount group is loose so that malformed numbers reach parse_amount and
# are reported; tokens containing letters are not amounts at all.
_POSTING_RE = re.compile(r"^\s+([A-Za-z0-9_:-]+)\s+([^\sA-Za-z]+)\s+([A-Z]+)", re.ASCII)
_OPEN_SCAN_RE = re.compile(r"\d{4}-\d{2}-\d{2}\s+open\s+([A-Za-z0-9_:-]+)")

_TRANSACTION_FLAGS = frozenset({"*", "!"})


@dataclass(frozen=True, slots=True)
class _NoTransaction:
    pass


@dataclass(frozen=True, slots=True)
class _InTransaction:
    index: int


_Cursor = _NoTransaction | _InTransaction

_NO_TRANSACTION = _NoTransaction()


def _split_header(rest: str) -> tuple[str, list[str]]:
    """Split a transaction header remainder into description and tags."""

    description = ""
    tag_str = rest
    m = _DESCRIPTION_RE.match(rest)
    if m:
        description = _UNESCAPE_RE.sub(r"\1", m.group(1))
        tag_str = rest[m.end() :].strip()
    return description, _TAG_RE.findall(tag_str)


class _Parser:
    """Single-use parse state: the store under construction plus the cursor."""

    def __init__(self) -> None:
        self.store = DirectiveStore()
        self.cursor: _Cursor = _NO_TRANSACTION

    def _issue(self, line_no: int, kind: IssueKind, message: str, line: str) -> None:
        _logger.debug("line %d skipped: %s", line_no, message)
        self.store.issues.append(ParseIssue(line_no, kind, message, line))

    def _require(self, parts: list[str], n: int, line_no: int, line: str) -> bool:
        if len(parts) >= n:
            return True
        self._issue(
            line_no,
            IssueKind.MISSING_FIELD,
            f"'{parts[1]}' directive expects {n - 2} field(s) after the keyword, "
            f"got {len(parts) - 2}",
            line,
        )
        return False

    def feed(self, line_no: int, line: str) -> None:
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(";"):
            return

        parts = trimmed.split()
        keyword = parts[1] if len(parts) > 1 else None

        if keyword == "open":
            if self._require(parts, 3, line_no, line):
                account = parts[2]
                if account in self.store.open_accounts:
                    _logger.debug("line %d re-opens %s; keeping the later date", line_no, account)
                self.store.open_accounts[account] = OpenDirective(
                    account=account,
                    date=parts[0],
                    currency=parts[3] if len(parts) > 3 else None,
                )
        elif keyword == "pad":
            if self._require(parts, 4, line_no, line):
                self.store.pads.append(
                    PadDirective(date=parts[0], account=parts[2], source_account=parts[3])
                )
        elif keyword == "balance":
            if self._require(parts, 5, line_no, line):
                try:
                    amount = parse_amount(parts[3])
                except AmountParseError as e:
                    self._issue(line_no, IssueKind.INVALID_AMOUNT, str(e), line)
                    return
                self.store.balance_assertions.append(
                    BalanceAssertion(
                        date=parts[0], account=parts[2], amount=amount, currency=parts[4]
                    )
                )
        elif keyword in _TRANSACTION_FLAGS and _DATE_PREFIX_RE.match(parts[0]):
            header = trimmed.split(None, 2)
            description, tags = _split_header(header[2].strip() if len(header) > 2 else "")
            self.store.transactions.append(
                Transaction(
                    date=parts[0],
                    description=description,
                    tags=tags,
                    flag=keyword,
                    line_no=line_no,
                )
            )
            self.cursor = _InTransaction(len(self.store.transactions) - 1)
        elif isinstance(self.cursor, _InTransaction) and line[:1].isspace():
            m = _POSTING_RE.match(line)
            if not m:
                return
            try:
                amount = parse_amount(m.group(2))
            except AmountParseError as e:
                self._issue(line_no, IssueKind.INVALID_AMOUNT, str(e), line)
                return
            self.store.transactions[self.cursor.index].postings.append(
                Posting(account=m.group(1), amount=amount, currency=m.group(3))
            )
        else:
            self.cursor = _NO_TRANSACTION


def parse(text: str) -> DirectiveStore:
    """Parse ledger ``text`` into a fresh :class:`DirectiveStore`.

    Transactions are stable-sorted by date once the scan completes. Balance
    assertions are collected but not applied; see
    :func:`bean_ledger.resolver.resolve`.
    """

    p = _Parser()
    for line_no, line in enumerate(text.splitlines(), start=1):
        p.feed(line_no, line)
    p.store.sort_transactions()
    _logger.debug(
        "parsed %d transactions, %d open accounts, %d pads, %d balance assertions (%d issues)",
        len(p.store.transactions),
        len(p.store.open_accounts),
        len(p.store.pads),
        len(p.store.balance_assertions),
        len(p.store.issues),
    )
    return p.store


def scan_open_accounts(text: str) -> list[str]:
    """Return the distinct accounts named by ``open`` directives, sorted.

    Only ``open`` lines are recognized, anywhere on a line, so this stays
    cheap enough for autocomplete lists.
    """

    accounts: set[str] = set()
    for line in text.splitlines():
        m = _OPEN_SCAN_RE.search(line)
        if m:
            accounts.add(m.group(1))
    return sorted(accounts)


__all__ = ["parse", "scan_open_accounts"]
