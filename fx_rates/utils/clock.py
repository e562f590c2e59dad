"""Clock abstraction supplying the "current date" to the resolver."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def today(self) -> date: ...  # pragma: no cover - protocol definition


class SystemClock:
    """Reads the current UTC date from the system."""

    def today(self) -> date:
        return datetime.now(timezone.utc).date()


@dataclass(frozen=True)
class FixedClock:
    """Always reports the same day."""

    day: date

    def today(self) -> date:
        return self.day


__all__ = ["Clock", "FixedClock", "SystemClock"]
