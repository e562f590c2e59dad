"""Allow ``python -m fx_rates``."""

from __future__ import annotations

from fx_rates.cli import main

if __name__ == "__main__":  # pragma: no cover - thin wrapper
    raise SystemExit(main())
