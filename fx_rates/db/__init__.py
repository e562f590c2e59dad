"""Storage backends for exchange rates."""

from __future__ import annotations

from pathlib import Path
from typing import Final

__all__ = ["DEFAULT_SQLITE_DB_PATH"]

# Relative on purpose: resolved against the working directory when the
# SQLite backend is created, not at import time.
DEFAULT_SQLITE_DB_PATH: Final[Path] = Path("exchange_rates.db")
