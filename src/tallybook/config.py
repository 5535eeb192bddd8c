"""Runtime settings for tallybook.

Values come from ``TALLYBOOK_*`` environment variables; explicit keyword
overrides (usually CLI options) take precedence.
"""

import getpass
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from tallybook.domain.errors import ValidationError

DEFAULT_MAX_RECEIPT_BYTES = 10 * 1024 * 1024


def _default_home() -> Path:
    return Path.home() / ".tallybook"


@dataclass(frozen=True)
class Settings:
    """Resolved application settings."""

    db_path: str
    storage_dir: str
    owner_id: str
    storage_base_url: Optional[str] = None
    locale: str = "pt_PT"
    currency: str = "EUR"
    log_level: str = "INFO"
    max_receipt_bytes: int = DEFAULT_MAX_RECEIPT_BYTES


def _default_owner() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "default"


def load_settings(**overrides) -> Settings:
    """Load settings from the environment.

    Args:
        **overrides: Field values that win over the environment. ``None``
            values are ignored so optional CLI options can be passed through.

    Returns:
        Settings instance

    Raises:
        ValidationError: If TALLYBOOK_MAX_RECEIPT_BYTES is not an integer
    """
    env = os.environ
    values = {
        "db_path": env.get("TALLYBOOK_DB_PATH"),
        "storage_dir": env.get("TALLYBOOK_STORAGE_DIR"),
        "owner_id": env.get("TALLYBOOK_USER"),
        "storage_base_url": env.get("TALLYBOOK_STORAGE_BASE_URL"),
        "locale": env.get("TALLYBOOK_LOCALE", "pt_PT"),
        "currency": env.get("TALLYBOOK_CURRENCY", "EUR"),
        "log_level": env.get("TALLYBOOK_LOG_LEVEL", "INFO"),
        "max_receipt_bytes": env.get("TALLYBOOK_MAX_RECEIPT_BYTES"),
    }
    values.update({key: value for key, value in overrides.items() if value is not None})

    if values["db_path"] is None:
        values["db_path"] = str(_default_home() / "tallybook.db")
    if values["storage_dir"] is None:
        values["storage_dir"] = str(_default_home() / "receipts")
    if values["owner_id"] is None:
        values["owner_id"] = _default_owner()

    max_bytes = values["max_receipt_bytes"]
    if max_bytes is None:
        values["max_receipt_bytes"] = DEFAULT_MAX_RECEIPT_BYTES
    else:
        try:
            values["max_receipt_bytes"] = int(max_bytes)
        except (TypeError, ValueError):
            raise ValidationError(
                f"Invalid TALLYBOOK_MAX_RECEIPT_BYTES value '{max_bytes}'"
            )

    return Settings(**values)
