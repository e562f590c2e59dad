"""Backend strategy interface for the exchange rate store."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fx_rates.models import ExchangeRate


class BackendStrategy(ABC):
    """Common interface implemented by every database backend.

    Implementations receive currency codes and dates that are already
    normalized; they never rewrite keys themselves. Each backend enforces
    uniqueness of ``(source, target, date)`` in the database.
    """

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create required tables/collections and verify connectivity."""

    @abstractmethod
    def find_latest(self, source: str, target: str) -> ExchangeRate | None:
        """Return the rate with the most recent date for the pair, if any."""

    @abstractmethod
    def upsert(self, source: str, target: str, rate_date: str, rate: float) -> ExchangeRate:
        """Atomically insert the rate or replace the stored value for the key."""

    @abstractmethod
    def delete_one(self, source: str, target: str, rate_date: str) -> ExchangeRate | None:
        """Remove and return the rate stored under the exact key."""

    def close(self) -> None:  # pragma: no cover - optional cleanup hook
        """Backends may override to release connections/resources."""

    def __enter__(self) -> "BackendStrategy":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["BackendStrategy"]
