"""MySQL backend strategy."""

from __future__ import annotations

from typing import Any

from fx_rates.db.relational_backend import RelationalBackend


class MySQLBackend(RelationalBackend):
    """Relational backend for MySQL/MariaDB; upserts use ``ON DUPLICATE KEY UPDATE``."""

    # MySQL drops idle connections after ``wait_timeout`` (8h by default).
    engine_options: dict[str, Any] = {"pool_pre_ping": True, "pool_recycle": 3600}


__all__ = ["MySQLBackend"]
