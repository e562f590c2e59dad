"""Exception hierarchy raised by fx_rates."""

from __future__ import annotations


class FxRatesError(Exception):
    """Base class for every error raised by the package."""


class RateNotFoundError(FxRatesError, LookupError):
    """No stored rate exists for the requested pair (and date, for deletes).

    ``source`` and ``target`` keep the identifiers exactly as the caller passed
    them so diagnostics show the original input rather than the normalized key.
    """

    def __init__(self, source: str, target: str, date: str | None = None) -> None:
        self.source = source
        self.target = target
        self.date = date
        message = f"Exchange rate not found for {source} to {target}"
        if date is not None:
            message = f"{message} on {date}"
        super().__init__(message)


class InfrastructureError(FxRatesError, RuntimeError):
    """The rate store could not be reached or rejected an operation."""


__all__ = ["FxRatesError", "InfrastructureError", "RateNotFoundError"]
