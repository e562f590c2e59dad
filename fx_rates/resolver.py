"""Rate resolution on top of a storage backend."""

from __future__ import annotations

import math
from datetime import date

from fx_rates.db.base_backend import BackendStrategy
from fx_rates.errors import RateNotFoundError
from fx_rates.models import ExchangeInfo
from fx_rates.utils.clock import Clock, SystemClock
from fx_rates.utils.dates import format_rate_date
from fx_rates.utils.logger import get_logger

LOGGER = get_logger(__name__)

IDENTITY_RATE = 1.0


def normalize_currency(code: str) -> str:
    """Return the storage form of a currency code: trimmed and lower-case."""

    normalized = code.strip().lower()
    if not normalized:
        raise ValueError("Currency code must not be blank")
    return normalized


class RateResolver:
    """Looks up, stores and deletes exchange rates through ``backend``.

    The resolver holds no state of its own; the current date comes from
    ``clock`` so identity rates and default upsert dates are reproducible.
    """

    def __init__(self, backend: BackendStrategy, *, clock: Clock | None = None) -> None:
        self.backend = backend
        self.clock = clock or SystemClock()

    def _today(self) -> str:
        return self.clock.today().isoformat()

    def get_exchange_rate(self, source: str, target: str) -> ExchangeInfo:
        """Return the latest rate for ``source``→``target``.

        A direct quote always wins; when none is stored, the reciprocal of the
        latest ``target``→``source`` quote is returned instead.
        """

        src = normalize_currency(source)
        tgt = normalize_currency(target)
        if src == tgt:
            return ExchangeInfo(source=src, target=tgt, rate=IDENTITY_RATE, date=self._today())

        direct = self.backend.find_latest(src, tgt)
        if direct is not None:
            return direct.to_info()

        reverse = self.backend.find_latest(tgt, src)
        if reverse is None:
            LOGGER.info("No stored rate for %s→%s in either direction", src, tgt)
            raise RateNotFoundError(source, target)
        LOGGER.debug("Deriving %s→%s from reciprocal quote dated %s", src, tgt, reverse.date)
        return ExchangeInfo(source=src, target=tgt, rate=1 / reverse.rate, date=reverse.date)

    def post_exchange_rate(
        self,
        source: str,
        target: str,
        rate: float,
        rate_date: str | date | None = None,
    ) -> ExchangeInfo:
        """Insert or overwrite the rate for the pair on ``rate_date`` (default: today)."""

        src = normalize_currency(source)
        tgt = normalize_currency(target)
        final_date = self._today() if rate_date is None else format_rate_date(rate_date)

        if src == tgt:
            # Identity pairs are still written, always with rate 1; the delete
            # path never removes them. Kept for compatibility with stored data.
            LOGGER.warning("Storing identity pair %s→%s on %s with rate 1", src, tgt, final_date)
            final_rate = IDENTITY_RATE
        else:
            final_rate = _validate_rate(rate)

        stored = self.backend.upsert(src, tgt, final_date, final_rate)
        return stored.to_info()

    def delete_exchange_rate(self, source: str, target: str, rate_date: str | date) -> ExchangeInfo:
        """Remove the rate stored for the pair on ``rate_date`` and return it."""

        src = normalize_currency(source)
        tgt = normalize_currency(target)
        final_date = format_rate_date(rate_date)

        if src == tgt:
            LOGGER.warning(
                "Identity pair %s→%s on %s is not deleted from storage", src, tgt, final_date
            )
            return ExchangeInfo(source=src, target=tgt, rate=IDENTITY_RATE, date=final_date)

        deleted = self.backend.delete_one(src, tgt, final_date)
        if deleted is None:
            raise RateNotFoundError(source, target, final_date)
        return deleted.to_info()


def _validate_rate(rate: float) -> float:
    if isinstance(rate, (bool, str, bytes)):
        raise ValueError(f"rate must be a number, got {rate!r}")
    value = float(rate)
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"rate must be a finite positive number, got {rate!r}")
    return value


__all__ = ["IDENTITY_RATE", "RateResolver", "normalize_currency"]
