"""PostgreSQL backend strategy."""

from __future__ import annotations

from typing import Any

from fx_rates.db.relational_backend import RelationalBackend


class PostgresBackend(RelationalBackend):
    """Relational backend for PostgreSQL; upserts use ``ON CONFLICT DO UPDATE``."""

    engine_options: dict[str, Any] = {"pool_pre_ping": True}


__all__ = ["PostgresBackend"]
