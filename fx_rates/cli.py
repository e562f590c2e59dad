"""Command line access to the exchange rate store."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Sequence

from fx_rates import FxRates
from fx_rates.config import get_settings
from fx_rates.errors import InfrastructureError, RateNotFoundError
from fx_rates.models import ExchangeInfo
from fx_rates.utils.logger import configure_logging, get_logger

LOGGER = get_logger(__name__)

EXIT_NOT_FOUND = 1
EXIT_ERROR = 2

__all__ = ["build_parser", "main", "run"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fx-rates", description=__doc__)
    parser.add_argument(
        "--db",
        dest="db_url",
        default=None,
        help="Database URL (defaults to FX_RATES_DATABASE_URL or the local SQLite file)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    get_cmd = commands.add_parser("get", help="Look up the latest rate for a pair")
    get_cmd.add_argument("source", help="Source currency code (e.g. usd)")
    get_cmd.add_argument("target", help="Target currency code (e.g. krw)")

    put_cmd = commands.add_parser("put", help="Insert or overwrite a rate")
    put_cmd.add_argument("source")
    put_cmd.add_argument("target")
    put_cmd.add_argument("rate", type=float, help="Value of 1 source unit in target")
    put_cmd.add_argument("--date", dest="rate_date", help="Rate date (YYYY-MM-DD), default today")

    delete_cmd = commands.add_parser("delete", help="Delete the rate stored for a date")
    delete_cmd.add_argument("source")
    delete_cmd.add_argument("target")
    delete_cmd.add_argument("--date", dest="rate_date", required=True, help="Rate date (YYYY-MM-DD)")
    return parser


def run(fx: FxRates, args: argparse.Namespace) -> ExchangeInfo:
    """Dispatch parsed ``args`` to the matching facade call."""

    if args.command == "get":
        return fx.resolve_rate(args.source, args.target)
    if args.command == "put":
        return fx.upsert_rate(args.source, args.target, args.rate, args.rate_date)
    if args.command == "delete":
        return fx.delete_rate(args.source, args.target, args.rate_date)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)
    LOGGER.debug("Settings: %s", settings.dict_for_logging())
    try:
        with FxRates(args.db_url, settings=settings) as fx:
            info = run(fx, args)
    except RateNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_NOT_FOUND
    except (InfrastructureError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR
    print(json.dumps(info.as_dict()))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
