"""Pytest configuration shared by the ``bean_ledger`` tests.

Settings resolution reads environment variables and a JSON file in the
current working directory, and the CLI loads ``.env`` from the CWD. To keep
tests hermetic each test runs from its own temporary directory with the
``BEAN_LEDGER_*`` variables cleared and the settings file redirected there.
"""

from __future__ import annotations

import os
import sys
import textwrap
from pathlib import Path

import pytest

# Make sure the workspace `packages/` dir is on sys.path so `bean_ledger` is
# importable without an editable install.
_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
if str(_PKG_DIR) not in sys.path:
    sys.path.insert(0, str(_PKG_DIR))


REFERENCE_LEDGER = textwrap.dedent(
    """
    2023-01-01 open Assets:Bank
    2023-01-01 open Assets:Cash
    2023-01-01 open Expenses:Food
    2023-01-01 open Income:Salary

    2023-01-01 pad Assets:Bank Equity:Opening-Balances
    2023-01-02 balance Assets:Bank 1000.00 USD

    2023-01-05 * "Paycheck" #salary
      Assets:Bank     2000.00 USD
      Income:Salary  -2000.00 USD

    2023-01-10 * "Grocery Store" #food #groceries
      Expenses:Food    150.00 USD
      Assets:Bank     -150.00 USD

    2023-01-15 * "ATM Withdrawal"
      Assets:Cash      100.00 USD
      Assets:Bank     -100.00 USD
    """
)


@pytest.fixture(autouse=True)
def _isolate_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run each test from a private CWD with a private settings file."""

    for var in ("BEAN_LEDGER_FILE", "BEAN_LEDGER_CURRENCY", "BEAN_LEDGER_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("BEAN_LEDGER_SETTINGS", os.fspath(tmp_path / "settings.json"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def reference_text() -> str:
    return REFERENCE_LEDGER


@pytest.fixture
def ledger_file(tmp_path: Path) -> Path:
    path = tmp_path / "accounting.beancount"
    path.write_text(REFERENCE_LEDGER, encoding="utf-8")
    return path
