import logging

import pytest

from bean_ledger.logging_setup import get_logger, resolve_level


def test_default_level_is_warning():
    assert resolve_level() == logging.WARNING


@pytest.mark.parametrize(
    ("verbosity", "expected"),
    [(1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)],
)
def test_verbosity_raises_level(verbosity, expected):
    assert resolve_level(verbosity=verbosity) == expected


def test_environment_level(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("BEAN_LEDGER_LOG_LEVEL", "debug")
    assert resolve_level() == logging.DEBUG
    # -v still wins over the environment.
    assert resolve_level(verbosity=1) == logging.INFO


@pytest.mark.parametrize(
    ("level", "expected"),
    [("INFO", logging.INFO), (" error ", logging.ERROR), ("15", 15), ("nonsense", logging.WARNING)],
)
def test_explicit_level_names(level, expected):
    assert resolve_level(level) == expected


def test_get_logger_is_namespaced():
    log = get_logger("bean_ledger.parser")
    assert log.name == "bean_ledger.parser"
    assert logging.getLogger("bean_ledger").handlers
