from decimal import Decimal

import pytest
from pydantic import ValidationError

from bean_ledger import (
    AccountType,
    Ledger,
    NewAccount,
    NewTransaction,
    TransactionKind,
    format_new_account,
    format_new_transaction,
)

KNOWN = ("Assets:Bank", "Expenses:Food", "Income:Salary")


def test_new_account_without_balance_only_opens():
    req = NewAccount(name="Checking", date="2023-02-01")
    assert format_new_account(req) == "2023-02-01 open Assets:Checking USD"


def test_new_account_with_balance_adds_pad_and_assertion():
    req = NewAccount(
        account_type=AccountType.LIABILITIES,
        name="Card",
        date="2023-02-01",
        currency="eur",
        opening_balance="-250.5",
    )
    assert req.account == "Liabilities:Card"
    assert format_new_account(req).splitlines() == [
        "2023-02-01 open Liabilities:Card EUR",
        "2023-02-01 pad Liabilities:Card Equity:Opening-Balances",
        "2023-02-01 balance Liabilities:Card -250.5 EUR",
    ]


def test_rendered_account_shows_opening_balance_in_earlier_window():
    text = format_new_account(
        NewAccount(name="Checking", date="2023-02-01", opening_balance="500")
    )
    ledger = Ledger(text)

    (bal,) = ledger.get_balances("2023-01-01", "2023-01-31")
    assert bal.account == "Assets:Checking"
    assert bal.start_balance == Decimal("500.00")
    assert bal.current_balance == Decimal("500.00")


def test_expense_debits_target_and_credits_source():
    req = NewTransaction(
        description="Lunch",
        amount="12.50",
        source="Assets:Bank",
        target="Expenses:Food",
        date="2023-01-20",
    )
    assert format_new_transaction(req, KNOWN).splitlines() == [
        '2023-01-20 * "Lunch"',
        "  Expenses:Food 12.50 USD",
        "  Assets:Bank -12.50 USD",
    ]


def test_income_debits_source_and_credits_target():
    req = NewTransaction(
        kind=TransactionKind.INCOME,
        description="Paycheck",
        amount=2000,
        source="Assets:Bank",
        target="Income:Salary",
        date="2023-01-31",
    )
    lines = format_new_transaction(req, KNOWN).splitlines()
    assert lines[1:] == ["  Assets:Bank 2000 USD", "  Income:Salary -2000 USD"]


def test_unknown_accounts_are_opened_first():
    req = NewTransaction(
        kind=TransactionKind.TRANSFER,
        amount="40",
        source="Assets:Bank",
        target="Assets:Savings",
        date="2023-03-01",
    )
    lines = format_new_transaction(req, KNOWN).splitlines()
    assert lines[0] == "2023-03-01 open Assets:Savings USD"
    assert lines[1] == '2023-03-01 * ""'


def test_rendered_transaction_parses_back():
    req = NewTransaction(
        description='Dinner at "Mama\'s"',
        amount="35.20",
        source="Assets:Cash",
        target="Expenses:Dining",
        tags="date-night #2023",
        date="2023-04-01",
    )
    ledger = Ledger(format_new_transaction(req))

    (tx,) = ledger.get_transactions("2023-04-01", "2023-04-01")
    assert tx.description == 'Dinner at "Mama\'s"'
    assert tx.tags == ["#date-night", "#2023"]
    assert tx.imbalance() == 0
    assert sorted(ledger.open_accounts) == ["Assets:Cash", "Expenses:Dining"]
    assert ledger.issues == []


def test_tags_accept_lists_and_strip_hash():
    req = NewTransaction(amount=1, source="A:B", target="C:D", tags=["#one", "two"])
    assert req.tags == ["#one", "#two"]


def test_date_defaults_to_today():
    req = NewAccount(name="Cash")
    assert len(req.date) == 10
    assert req.date[4] == "-"


@pytest.mark.parametrize(
    "overrides",
    [
        {"amount": "0"},
        {"amount": "-5"},
        {"amount": "abc"},
        {"date": "2023-13-01"},
        {"date": "01/02/2023"},
        {"currency": "US1"},
        {"target": "Assets:Bank"},
        {"source": "Assets Bank"},
        {"tags": "bad!tag"},
        {"description": "two\nlines"},
        {"memo": "unknown field"},
    ],
)
def test_invalid_transaction_requests_are_rejected(overrides):
    fields = {
        "amount": "10",
        "source": "Assets:Bank",
        "target": "Expenses:Food",
        "date": "2023-01-01",
    }
    fields.update(overrides)
    with pytest.raises(ValidationError):
        NewTransaction(**fields)


@pytest.mark.parametrize("name", ["Bad Name", "Checking:", ":Checking", "A::B", ""])
def test_invalid_account_names_are_rejected(name):
    with pytest.raises(ValidationError):
        NewAccount(name=name)


def test_transfer_debits_target_and_credits_source():
    req = NewTransaction(
        kind=TransactionKind.TRANSFER,
        description="To savings",
        amount="250",
        source="Assets:Bank",
        target="Assets:Savings",
        date="2023-03-01",
    )
    lines = format_new_transaction(req, ("Assets:Bank", "Assets:Savings")).splitlines()
    assert lines == [
        '2023-03-01 * "To savings"',
        "  Assets:Savings 250 USD",
        "  Assets:Bank -250 USD",
    ]
