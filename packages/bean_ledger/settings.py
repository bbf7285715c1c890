"""User settings: which ledger file to use and the default currency.

Settings live in a small JSON file (default ``./.bean_ledger.json``; override
the location with ``BEAN_LEDGER_SETTINGS``). Individual values can be
overridden per process with ``BEAN_LEDGER_FILE`` and ``BEAN_LEDGER_CURRENCY``,
typically from a local ``.env`` loaded by the CLI.

Atomicity: writes target ``.tmp`` first and then ``os.replace`` into place.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .logging_setup import get_logger

_logger = get_logger("bean_ledger.settings")

SETTINGS_ENV = "BEAN_LEDGER_SETTINGS"
LEDGER_FILE_ENV = "BEAN_LEDGER_FILE"
CURRENCY_ENV = "BEAN_LEDGER_CURRENCY"
DEFAULT_SETTINGS_FILENAME = ".bean_ledger.json"


class SettingsError(Exception):
    """Raised when the settings file exists but cannot be used."""


class LedgerSettings(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    ledger_path: str = "accounting.beancount"
    currency: str = "USD"

    @field_validator("ledger_path")
    @classmethod
    def _non_empty_path(cls, v: str) -> str:
        if not v:
            raise ValueError("ledger_path must be non-empty")
        return v

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, v: str) -> str:
        v = v.upper()
        if not v.isalpha():
            raise ValueError(f"currency must be letters only, got {v!r}")
        return v


def settings_path() -> Path:
    """Return the settings file location (``BEAN_LEDGER_SETTINGS`` or CWD default)."""

    raw = os.getenv(SETTINGS_ENV)
    if raw and raw.strip():
        return Path(raw).expanduser().resolve()
    return (Path.cwd() / DEFAULT_SETTINGS_FILENAME).resolve()


def load_settings(path: Path | None = None) -> LedgerSettings:
    """Load settings from disk, apply environment overrides, and validate.

    A missing file yields defaults. A file that is not valid JSON or fails
    validation raises :class:`SettingsError`.
    """

    p = path or settings_path()
    data: dict[str, object] = {}
    if p.exists():
        try:
            loaded = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise SettingsError(f"failed to read settings file {p}: {e}") from e
        if not isinstance(loaded, dict):
            raise SettingsError(f"settings file {p} must contain a JSON object")
        data.update(loaded)
    else:
        _logger.debug("no settings file at %s; using defaults", p)

    env_file = os.getenv(LEDGER_FILE_ENV)
    if env_file:
        data["ledger_path"] = env_file
    env_currency = os.getenv(CURRENCY_ENV)
    if env_currency:
        data["currency"] = env_currency

    try:
        return LedgerSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"invalid settings in {p}: {e}") from e


def save_settings(settings: LedgerSettings, path: Path | None = None) -> Path:
    """Persist ``settings`` atomically and return the written path."""

    p = path or settings_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_name(p.name + ".tmp")
    tmp.write_text(json.dumps(settings.model_dump(), indent=2) + "\n", encoding="utf-8")
    os.replace(tmp, p)
    _logger.info("saved settings to %s", p)
    return p


__all__ = [
    "LedgerSettings",
    "SettingsError",
    "load_settings",
    "save_settings",
    "settings_path",
]
