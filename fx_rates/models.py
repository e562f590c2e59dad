"""Data models shared by the resolver and the storage backends."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any


@dataclass(slots=True)
class ExchangeRate:
    """A persisted rate: 1 unit of ``source`` expressed in ``target`` on ``date``."""

    source: str
    target: str
    rate: float
    date: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_info(self) -> "ExchangeInfo":
        return ExchangeInfo(source=self.source, target=self.target, rate=self.rate, date=self.date)


@dataclass(frozen=True, slots=True)
class ExchangeInfo:
    """Rate returned to callers; may be stored, derived or synthesized."""

    source: str
    target: str
    rate: float
    date: str

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


__all__ = ["ExchangeInfo", "ExchangeRate"]
