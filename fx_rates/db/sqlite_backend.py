"""SQLite backend strategy implementation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fx_rates.db import DEFAULT_SQLITE_DB_PATH
from fx_rates.db.relational_backend import RelationalBackend


class SQLiteBackend(RelationalBackend):
    """Backend strategy that stores rates in a local SQLite file."""

    # Engines are shared between request threads.
    engine_options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}

    def __init__(self, db_path: str | Path = DEFAULT_SQLITE_DB_PATH) -> None:
        self.db_path = Path(db_path).expanduser().resolve()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(f"sqlite:///{self.db_path.as_posix()}")


__all__ = ["SQLiteBackend"]
