"""Tests for settings and logging setup."""

import logging
import pytest

from tallybook.config import DEFAULT_MAX_RECEIPT_BYTES, load_settings
from tallybook.domain.errors import ValidationError
from tallybook.logging_setup import _parse_level, get_logger

ENV_VARS = (
    "TALLYBOOK_DB_PATH",
    "TALLYBOOK_STORAGE_DIR",
    "TALLYBOOK_USER",
    "TALLYBOOK_STORAGE_BASE_URL",
    "TALLYBOOK_LOCALE",
    "TALLYBOOK_CURRENCY",
    "TALLYBOOK_LOG_LEVEL",
    "TALLYBOOK_MAX_RECEIPT_BYTES",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    settings = load_settings()

    assert settings.db_path.endswith("tallybook.db")
    assert settings.storage_dir.endswith("receipts")
    assert settings.owner_id
    assert settings.locale == "pt_PT"
    assert settings.currency == "EUR"
    assert settings.max_receipt_bytes == DEFAULT_MAX_RECEIPT_BYTES


def test_environment(monkeypatch):
    monkeypatch.setenv("TALLYBOOK_DB_PATH", "/tmp/books.db")
    monkeypatch.setenv("TALLYBOOK_USER", "carol")
    monkeypatch.setenv("TALLYBOOK_LOCALE", "en_US")
    monkeypatch.setenv("TALLYBOOK_MAX_RECEIPT_BYTES", "2048")

    settings = load_settings()
    assert settings.db_path == "/tmp/books.db"
    assert settings.owner_id == "carol"
    assert settings.locale == "en_US"
    assert settings.max_receipt_bytes == 2048


def test_overrides_win_and_none_is_ignored(monkeypatch):
    monkeypatch.setenv("TALLYBOOK_USER", "carol")
    settings = load_settings(owner_id="dave", db_path=None)
    assert settings.owner_id == "dave"
    assert settings.db_path.endswith("tallybook.db")


def test_invalid_max_receipt_bytes(monkeypatch):
    monkeypatch.setenv("TALLYBOOK_MAX_RECEIPT_BYTES", "lots")
    with pytest.raises(ValidationError):
        load_settings()


@pytest.mark.parametrize(
    "level,expected",
    [
        ("debug", logging.DEBUG),
        ("WARNING", logging.WARNING),
        ("10", 10),
        (logging.ERROR, logging.ERROR),
        ("nonsense", logging.INFO),
    ],
)
def test_parse_level(level, expected):
    assert _parse_level(level) == expected


def test_parse_level_from_env(monkeypatch):
    monkeypatch.setenv("TALLYBOOK_LOG_LEVEL", "ERROR")
    assert _parse_level(None) == logging.ERROR


def test_get_logger_is_namespaced():
    logger = get_logger("tallybook.domain.test")
    assert logger.name == "tallybook.domain.test"
    assert logging.getLogger("tallybook").handlers
