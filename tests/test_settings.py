import json
from pathlib import Path

import pytest

from bean_ledger.settings import (
    LedgerSettings,
    SettingsError,
    load_settings,
    save_settings,
    settings_path,
)


def test_settings_path_honours_env(tmp_path: Path):
    assert settings_path() == (tmp_path / "settings.json").resolve()


def test_settings_path_defaults_to_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("BEAN_LEDGER_SETTINGS")
    assert settings_path() == (tmp_path / ".bean_ledger.json").resolve()


def test_missing_file_yields_defaults():
    s = load_settings()
    assert s.ledger_path == "accounting.beancount"
    assert s.currency == "USD"


def test_save_then_load(tmp_path: Path):
    written = save_settings(LedgerSettings(ledger_path="books/main.beancount", currency="eur"))

    assert written == settings_path()
    assert not written.with_name(written.name + ".tmp").exists()
    loaded = load_settings()
    assert loaded.ledger_path == "books/main.beancount"
    assert loaded.currency == "EUR"


def test_environment_overrides_file(monkeypatch: pytest.MonkeyPatch):
    settings_path().write_text(
        json.dumps({"ledger_path": "a.beancount", "currency": "USD"}), encoding="utf-8"
    )
    monkeypatch.setenv("BEAN_LEDGER_FILE", "b.beancount")
    monkeypatch.setenv("BEAN_LEDGER_CURRENCY", "gbp")

    s = load_settings()
    assert s.ledger_path == "b.beancount"
    assert s.currency == "GBP"


def test_unknown_keys_are_ignored():
    settings_path().write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
    assert load_settings().ledger_path == "accounting.beancount"


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[1, 2]",
        json.dumps({"currency": "U5D"}),
        json.dumps({"ledger_path": ""}),
    ],
)
def test_unusable_settings_file_raises(content: str):
    settings_path().write_text(content, encoding="utf-8")
    with pytest.raises(SettingsError):
        load_settings()
