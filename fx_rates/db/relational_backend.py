"""Shared logic for SQL (SQLite/Postgres/MySQL) backends."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, Mapping

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    create_engine,
    delete,
    select,
)
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.dml import Insert

from fx_rates.db.base_backend import BackendStrategy
from fx_rates.errors import InfrastructureError
from fx_rates.models import ExchangeRate
from fx_rates.utils.logger import get_logger

LOGGER = get_logger(__name__)

METADATA = MetaData()

EXCHANGE_RATES = Table(
    "exchange_rates",
    METADATA,
    Column("source", String(16), nullable=False),
    Column("target", String(16), nullable=False),
    Column("date", String(10), nullable=False),
    Column("rate", Float, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    PrimaryKeyConstraint("source", "target", "date", name="pk_exchange_rates"),
)

KEY_COLUMNS = ("source", "target", "date")


def _on_conflict_upsert(insert: Callable[[Table], Any], values: Mapping[str, Any]) -> Insert:
    stmt = insert(EXCHANGE_RATES).values(**values)
    return stmt.on_conflict_do_update(
        index_elements=list(KEY_COLUMNS),
        set_={"rate": stmt.excluded.rate, "updated_at": stmt.excluded.updated_at},
    )


def _sqlite_upsert(values: Mapping[str, Any]) -> Insert:
    return _on_conflict_upsert(sqlite_insert, values)


def _postgresql_upsert(values: Mapping[str, Any]) -> Insert:
    return _on_conflict_upsert(postgresql_insert, values)


def _mysql_upsert(values: Mapping[str, Any]) -> Insert:
    stmt = mysql_insert(EXCHANGE_RATES).values(**values)
    return stmt.on_duplicate_key_update(rate=stmt.inserted.rate, updated_at=stmt.inserted.updated_at)


UPSERT_BUILDERS: dict[str, Callable[[Mapping[str, Any]], Insert]] = {
    "sqlite": _sqlite_upsert,
    "postgresql": _postgresql_upsert,
    "mysql": _mysql_upsert,
    "mariadb": _mysql_upsert,
}


def build_upsert(dialect_name: str, values: Mapping[str, Any]) -> Insert:
    """Return a single-statement insert-or-update for ``dialect_name``."""

    try:
        builder = UPSERT_BUILDERS[dialect_name]
    except KeyError:
        raise ValueError(f"Atomic upsert is not supported for the {dialect_name!r} dialect") from None
    return builder(values)


class RelationalBackend(BackendStrategy):
    """Base class that encapsulates SQLAlchemy powered interactions."""

    engine_options: dict[str, Any] = {}

    def __init__(self, url: str) -> None:
        self.url = url
        self._engine_instance: Engine | None = None

    def _get_engine(self) -> Engine:
        if self._engine_instance is None:
            self._engine_instance = create_engine(self.url, future=True, **self.engine_options)
        return self._engine_instance

    @contextmanager
    def _translate_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            raise InfrastructureError(f"Failed to {action}: {exc}") from exc

    def ensure_schema(self) -> None:
        engine = self._get_engine()
        with self._translate_errors("ensure exchange_rates schema"):
            LOGGER.info("Ensuring exchange_rates schema exists")
            METADATA.create_all(engine)

    def find_latest(self, source: str, target: str) -> ExchangeRate | None:
        stmt = (
            select(EXCHANGE_RATES)
            .where(EXCHANGE_RATES.c.source == source, EXCHANGE_RATES.c.target == target)
            .order_by(EXCHANGE_RATES.c.date.desc())
            .limit(1)
        )
        with self._translate_errors("query exchange rates"):
            with self._get_engine().connect() as connection:
                row = connection.execute(stmt).first()
        return None if row is None else _record_from_mapping(row._mapping)

    def upsert(self, source: str, target: str, rate_date: str, rate: float) -> ExchangeRate:
        engine = self._get_engine()
        now = datetime.now(timezone.utc)
        values = {
            "source": source,
            "target": target,
            "date": rate_date,
            "rate": rate,
            "created_at": now,
            "updated_at": now,
        }
        stmt = build_upsert(engine.dialect.name, values)
        with self._translate_errors("upsert exchange rate"):
            with engine.begin() as connection:
                connection.execute(stmt)
                row = connection.execute(
                    select(EXCHANGE_RATES).where(*_key_clause(source, target, rate_date))
                ).one()
        LOGGER.info("Stored %s→%s rate %s for %s", source, target, rate, rate_date)
        return _record_from_mapping(row._mapping)

    def delete_one(self, source: str, target: str, rate_date: str) -> ExchangeRate | None:
        key = _key_clause(source, target, rate_date)
        with self._translate_errors("delete exchange rate"):
            with self._get_engine().begin() as connection:
                row = connection.execute(select(EXCHANGE_RATES).where(*key)).first()
                if row is None:
                    return None
                # A concurrent delete may have won between the select and here.
                if connection.execute(delete(EXCHANGE_RATES).where(*key)).rowcount == 0:
                    return None
        LOGGER.info("Deleted %s→%s rate for %s", source, target, rate_date)
        return _record_from_mapping(row._mapping)

    def close(self) -> None:  # pragma: no cover - trivial resource cleanup
        if self._engine_instance is not None:
            self._engine_instance.dispose()


def _key_clause(source: str, target: str, rate_date: str) -> tuple[Any, ...]:
    return (
        EXCHANGE_RATES.c.source == source,
        EXCHANGE_RATES.c.target == target,
        EXCHANGE_RATES.c.date == rate_date,
    )


def _record_from_mapping(mapping: Mapping[str, Any]) -> ExchangeRate:
    return ExchangeRate(
        source=mapping["source"],
        target=mapping["target"],
        rate=float(mapping["rate"]),
        date=str(mapping["date"]),
        created_at=mapping["created_at"],
        updated_at=mapping["updated_at"],
    )


__all__ = ["EXCHANGE_RATES", "METADATA", "RelationalBackend", "build_upsert"]
