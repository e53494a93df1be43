"""Configuration for fintrack.

Values come from environment variables with sensible defaults:

- ``FINTRACK_DB_PATH``: SQLite file holding the persisted state
  (default ``~/.fintrack/fintrack.db``)
- ``FINTRACK_SMS_SENDERS``: comma-separated sender substrings accepted by SMS
  ingestion
- ``FINTRACK_LOG_LEVEL``: log level name (default WARNING)
"""

import logging
import os
from pathlib import Path
from typing import Optional

# Bank sender IDs as they appear in SMS headers (e.g. "VM-AXISBK")
DEFAULT_SMS_SENDERS = ("AXISBK", "HDFCBK", "ICICIB", "SBIINB", "KOTAKB")

STORAGE_KEY = "fintrack_data"

# Last budget state seen by the alert tracker, keyed by budget id
BUDGET_ALERTS_KEY = "fintrack_budget_alerts"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_db_path(database_path: Optional[str] = None) -> str:
    """Resolve the database path from argument, environment, or default."""
    if database_path is None:
        database_path = os.environ.get("FINTRACK_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".fintrack"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "fintrack.db")

    return database_path


def get_sms_senders() -> tuple[str, ...]:
    """Sender allow-list, from FINTRACK_SMS_SENDERS if set."""
    raw = os.environ.get("FINTRACK_SMS_SENDERS")
    if not raw:
        return DEFAULT_SMS_SENDERS
    return tuple(token.strip() for token in raw.split(",") if token.strip())


def configure_logging(verbose: bool = False) -> None:
    """Configure the root logger once for command-line use."""
    if verbose:
        level = logging.DEBUG
    else:
        level_name = os.environ.get("FINTRACK_LOG_LEVEL", "WARNING").upper()
        level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)
