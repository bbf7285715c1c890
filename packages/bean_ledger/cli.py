"""CLI for the ``bean_ledger`` package.

This module exposes callable command handlers (``cmd_*``, each returning a
process exit code) and a Typer-based console interface around them. The root
callback loads a local ``.env`` with ``python-dotenv``, configures logging and
resolves :class:`~bean_ledger.settings.LedgerSettings`; handlers receive the
settings explicitly so they can be called directly in tests.

Errors are written to stderr as ``Error: ...`` and yield exit code 1.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from datetime import date
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console

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
from .logging_setup import configure_logging, get_logger
from .models import AccountType
from .queries import filter_balances, filter_transactions
from .report import balances_table, transactions_table
from .settings import LedgerSettings, SettingsError, load_settings, save_settings

_logger = get_logger("bean_ledger.cli")

console = Console()


# ---- Small module-level helpers used by CLI commands -------------------------


def _err(msg: str) -> None:
    print(f"Error: {msg}", file=sys.stderr)


def _default_window(start: str | None, end: str | None) -> tuple[str, str]:
    """Fill a missing window edge: first of the current month .. today."""

    today = date.today()
    return (start or today.replace(day=1).isoformat(), end or today.isoformat())


def _validate_date(value: str | None) -> str | None:
    if value is None:
        return None
    try:
        date.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(f"expected YYYY-MM-DD, got {value!r}") from e
    return value


def _load_ledger(settings: LedgerSettings) -> Ledger:
    return Ledger(read_ledger_text(settings.ledger_path))


def _format_validation_error(e: ValidationError) -> str:
    parts = []
    for item in e.errors():
        loc = ".".join(str(x) for x in item.get("loc", ())) or "input"
        parts.append(f"{loc}: {item.get('msg')}")
    return "; ".join(parts)


# ---- Command handlers --------------------------------------------------------


def cmd_balances(
    settings: LedgerSettings,
    *,
    start: str | None = None,
    end: str | None = None,
    types: Sequence[str] = (),
    accounts: Sequence[str] = (),
) -> int:
    """Print the balance table for ``[start, end]``, optionally filtered by
    account type and account name."""

    start, end = _default_window(start, end)
    try:
        ledger = _load_ledger(settings)
    except LedgerFileError as e:
        _err(str(e))
        return 1

    balances = filter_balances(ledger.get_balances(start, end), types=types, accounts=accounts)
    console.print(
        balances_table(balances, currency=settings.currency, title=f"Balances {start} .. {end}")
    )
    return 0


def cmd_transactions(
    settings: LedgerSettings,
    *,
    start: str | None = None,
    end: str | None = None,
    tag: str | None = None,
    sources: Sequence[str] = (),
    targets: Sequence[str] = (),
) -> int:
    """Print transactions in ``[start, end]`` after tag/source/target filters."""

    start, end = _default_window(start, end)
    try:
        ledger = _load_ledger(settings)
    except LedgerFileError as e:
        _err(str(e))
        return 1

    txs = filter_transactions(
        ledger.get_transactions(start, end), tag=tag, sources=sources, targets=targets
    )
    console.print(
        transactions_table(txs, currency=settings.currency, title=f"Transactions {start} .. {end}")
    )
    return 0


def cmd_accounts(settings: LedgerSettings) -> int:
    """Print opened account names, one per line."""

    for name in list_open_account_names(settings.ledger_path):
        console.print(name, highlight=False)
    return 0


def cmd_add_account(settings: LedgerSettings, request: NewAccount) -> int:
    """Append an ``open`` (plus opening-balance ``pad``/``balance``) entry."""

    if not append_ledger_text(settings.ledger_path, format_new_account(request)):
        _err(f"failed to append to ledger file: {settings.ledger_path}")
        return 1
    console.print(f"Account {request.account} added to {settings.ledger_path}", highlight=False)
    return 0


def cmd_add_transaction(settings: LedgerSettings, request: NewTransaction) -> int:
    """Append a transaction, opening accounts the ledger does not know yet."""

    known = list_open_account_names(settings.ledger_path)
    content = format_new_transaction(request, known)
    if not append_ledger_text(settings.ledger_path, content):
        _err(f"failed to append to ledger file: {settings.ledger_path}")
        return 1
    console.print(f"Transaction added to {settings.ledger_path}", highlight=False)
    return 0


def cmd_check(settings: LedgerSettings) -> int:
    """Report skipped lines and unbalanced transactions.

    Returns 1 when any line was skipped; unbalanced transactions are warnings
    only since the format does not require zero-sum postings.
    """

    try:
        ledger = _load_ledger(settings)
    except LedgerFileError as e:
        _err(str(e))
        return 1

    for issue in ledger.issues:
        console.print(
            f"line {issue.line_no}: {issue.kind.value}: {issue.message}", highlight=False
        )
    for tx in ledger.unbalanced_transactions():
        where = f"line {tx.line_no}" if tx.line_no is not None else tx.date
        console.print(
            f"{where}: warning: transaction {tx.description!r} does not balance "
            f"(off by {tx.imbalance()})",
            highlight=False,
        )
    if ledger.issues:
        return 1
    console.print("OK", highlight=False)
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Balances and transactions from a plain-text double-entry ledger. "
        "Loads BEAN_LEDGER_* settings from a local .env before running."
    ),
)


def _settings(ctx: typer.Context) -> LedgerSettings:
    settings = ctx.obj
    if not isinstance(settings, LedgerSettings):  # pragma: no cover - root callback always sets it
        raise typer.Exit(1)
    return settings


def _exit(code: int) -> None:
    if code:
        raise typer.Exit(code)


StartOption = Annotated[
    str | None,
    typer.Option(
        "--start",
        help="Window start (YYYY-MM-DD). Default: first of month.",
        callback=_validate_date,
    ),
]
EndOption = Annotated[
    str | None,
    typer.Option("--end", help="Window end (YYYY-MM-DD). Default: today.", callback=_validate_date),
]


@app.command("balances")
def balances_cmd(
    ctx: typer.Context,
    start: StartOption = None,
    end: EndOption = None,
    types: Annotated[
        list[str] | None, typer.Option("--type", help="Only these account types (repeatable).")
    ] = None,
    accounts: Annotated[
        list[str] | None, typer.Option("--account", help="Only these accounts (repeatable).")
    ] = None,
) -> None:
    """Show start/end/current balances per account."""

    _exit(
        cmd_balances(
            _settings(ctx), start=start, end=end, types=types or (), accounts=accounts or ()
        )
    )


@app.command("transactions")
def transactions_cmd(
    ctx: typer.Context,
    start: StartOption = None,
    end: EndOption = None,
    tag: Annotated[str | None, typer.Option(help="Tag substring, with or without '#'.")] = None,
    sources: Annotated[
        list[str] | None,
        typer.Option("--source", help="Money leaving these accounts (repeatable)."),
    ] = None,
    targets: Annotated[
        list[str] | None,
        typer.Option("--target", help="Money entering these accounts (repeatable)."),
    ] = None,
) -> None:
    """List transactions in a date window."""

    _exit(
        cmd_transactions(
            _settings(ctx),
            start=start,
            end=end,
            tag=tag,
            sources=sources or (),
            targets=targets or (),
        )
    )


@app.command("accounts")
def accounts_cmd(ctx: typer.Context) -> None:
    """List opened accounts."""

    _exit(cmd_accounts(_settings(ctx)))


@app.command("add-account")
def add_account_cmd(
    ctx: typer.Context,
    name: Annotated[str, typer.Option(help="Name under the type, e.g. Bank:Checking.")],
    account_type: Annotated[
        AccountType, typer.Option("--type", case_sensitive=False, help="Account type.")
    ] = AccountType.ASSETS,
    entry_date: Annotated[
        str | None, typer.Option("--date", help="Open date (YYYY-MM-DD). Default: today.")
    ] = None,
    currency: Annotated[
        str | None, typer.Option(help="Currency code. Default: settings currency.")
    ] = None,
    opening_balance: Annotated[
        str, typer.Option("--opening-balance", help="Balance on the open date.")
    ] = "0",
) -> None:
    """Open a new account, optionally with an opening balance."""

    settings = _settings(ctx)
    fields: dict[str, object] = {
        "account_type": account_type,
        "name": name,
        "currency": currency or settings.currency,
        "opening_balance": opening_balance,
    }
    if entry_date:
        fields["date"] = entry_date
    try:
        request = NewAccount.model_validate(fields)
    except ValidationError as e:
        _err(_format_validation_error(e))
        raise typer.Exit(1) from e
    _exit(cmd_add_account(settings, request))


@app.command("add-transaction")
def add_transaction_cmd(
    ctx: typer.Context,
    amount: Annotated[str, typer.Option(help="Positive amount moved.")],
    description: Annotated[str, typer.Option(help="Payee or narration.")] = "",
    kind: Annotated[
        TransactionKind, typer.Option(case_sensitive=False, help="Sign convention.")
    ] = TransactionKind.EXPENSE,
    source: Annotated[
        str | None, typer.Option(help="Source account (prompted when omitted).")
    ] = None,
    target: Annotated[
        str | None, typer.Option(help="Target account (prompted when omitted).")
    ] = None,
    tags: Annotated[list[str] | None, typer.Option("--tag", help="Tag (repeatable).")] = None,
    entry_date: Annotated[
        str | None, typer.Option("--date", help="Transaction date. Default: today.")
    ] = None,
    currency: Annotated[
        str | None, typer.Option(help="Currency code. Default: settings currency.")
    ] = None,
) -> None:
    """Record a transaction between two accounts."""

    settings = _settings(ctx)
    if source is None or target is None:
        # Local import keeps prompt_toolkit off the non-interactive paths.
        from .term_ui import select_account

        known = list_open_account_names(settings.ledger_path)
        if source is None:
            source = select_account(known, message="Source account: ")
        if target is None:
            target = select_account(known, message="Target account: ")

    fields: dict[str, object] = {
        "kind": kind,
        "description": description,
        "amount": amount,
        "source": source,
        "target": target,
        "tags": tags or [],
        "currency": currency or settings.currency,
    }
    if entry_date:
        fields["date"] = entry_date
    try:
        request = NewTransaction.model_validate(fields)
    except ValidationError as e:
        _err(_format_validation_error(e))
        raise typer.Exit(1) from e
    _exit(cmd_add_transaction(settings, request))


@app.command("check")
def check_cmd(ctx: typer.Context) -> None:
    """Report skipped lines and unbalanced transactions."""

    _exit(cmd_check(_settings(ctx)))


@app.command("settings")
def settings_cmd(
    ctx: typer.Context,
    set_ledger: Annotated[
        str | None, typer.Option("--set-ledger", help="Persist a new ledger file path.")
    ] = None,
    set_currency: Annotated[
        str | None, typer.Option("--set-currency", help="Persist a new default currency.")
    ] = None,
) -> None:
    """Show settings, or persist new values."""

    settings = _settings(ctx)
    updates: dict[str, str] = {}
    if set_ledger:
        updates["ledger_path"] = set_ledger
    if set_currency:
        updates["currency"] = set_currency
    if updates:
        try:
            settings = LedgerSettings.model_validate({**settings.model_dump(), **updates})
        except ValidationError as e:
            _err(_format_validation_error(e))
            raise typer.Exit(1) from e
        path = save_settings(settings)
        console.print(f"Saved settings to {path}", highlight=False)
    console.print(f"ledger_path = {settings.ledger_path}", highlight=False)
    console.print(f"currency = {settings.currency}", highlight=False)


@app.callback()
def _root(
    ctx: typer.Context,
    ledger: Annotated[
        Path | None,
        typer.Option(
            "--ledger",
            help="Ledger file (overrides settings and BEAN_LEDGER_FILE).",
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        int, typer.Option("--verbose", "-v", count=True, help="-v for INFO, -vv for DEBUG.")
    ] = 0,
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding
    already-set variables), configures logging, and resolves settings.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(verbosity=verbose)

    try:
        settings = load_settings()
    except SettingsError as e:
        _err(str(e))
        raise typer.Exit(1) from e
    if ledger is not None:
        settings = settings.model_copy(update={"ledger_path": str(ledger)})
    _logger.debug("using ledger file %s", settings.ledger_path)
    ctx.obj = settings


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
