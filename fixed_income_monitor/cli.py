"""Command-line interface for the fixed-income monitor."""
from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import replace
from datetime import date
from typing import Any

from .config import AppConfig, load_config
from .errors import ProjectionError
from .formatting import format_currency, format_date, format_pct
from .logging_setup import configure_logging
from .models import IndexRegime, InvestmentTitle, MarketRates, Position
from .services import ExposureMonitor, PortfolioService
from .storage import YamlPortfolioStore
from .storage.yaml_store import check_position


def _add_position_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--institution", required=True, help="Issuing institution")
    parser.add_argument(
        "--regime",
        required=True,
        choices=[r.value for r in IndexRegime],
        help="Index regime",
    )
    parser.add_argument(
        "--rate",
        required=True,
        type=float,
        help="Percent of index (CDI), real spread (IPCA+) or annual rate (Prefixado)",
    )
    parser.add_argument("--principal", required=True, type=float)
    parser.add_argument(
        "--tax-rate", type=float, default=15.0, help="Tax on gain in %% (default: 15)"
    )
    parser.add_argument(
        "--start",
        type=date.fromisoformat,
        default=None,
        help="Start date YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--due", required=True, type=date.fromisoformat, help="Due date YYYY-MM-DD"
    )
    parser.add_argument("--broker", default="")
    parser.add_argument(
        "--title",
        default=InvestmentTitle.CDB.value,
        choices=[t.value for t in InvestmentTitle],
    )
    parser.add_argument("--quantity", type=int, default=1)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="fixed-income-monitor",
        description="Fixed-income projection and deposit-insurance exposure monitor",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in the working directory)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    rates_parser = sub.add_parser(
        "rates", help="Show market rates, or set them and recompute all positions"
    )
    rates_parser.add_argument("--reference-index", type=float, default=None)
    rates_parser.add_argument("--inflation", type=float, default=None)

    _add_position_args(sub.add_parser("preview", help="Project a position without saving"))
    _add_position_args(sub.add_parser("add", help="Project and save a new position"))

    sub.add_parser("list", help="List positions by due date")

    edit_parser = sub.add_parser(
        "edit", help="Change fields of a stored position and reproject it"
    )
    edit_parser.add_argument("position_id")
    edit_parser.add_argument("--institution")
    edit_parser.add_argument("--regime", choices=[r.value for r in IndexRegime])
    edit_parser.add_argument("--rate", type=float)
    edit_parser.add_argument("--principal", type=float)
    edit_parser.add_argument("--tax-rate", type=float)
    edit_parser.add_argument("--start", type=date.fromisoformat)
    edit_parser.add_argument("--due", type=date.fromisoformat)
    edit_parser.add_argument("--broker")
    edit_parser.add_argument("--title", choices=[t.value for t in InvestmentTitle])
    edit_parser.add_argument("--quantity", type=int)

    remove_parser = sub.add_parser("remove", help="Delete a position")
    remove_parser.add_argument("position_id")

    sub.add_parser("recompute", help="Reproject every position at current rates")
    sub.add_parser("exposure", help="Show coverage exposure per institution")
    sub.add_parser("check", help="Single exposure check with alerts")
    sub.add_parser("report", help="Send the portfolio report")

    monitor_parser = sub.add_parser("monitor", help="Continuous monitoring loop")
    monitor_parser.add_argument(
        "interval",
        nargs="?",
        type=int,
        default=None,
        help="Check interval in minutes (overrides config)",
    )

    return parser


def build_service(config: AppConfig) -> PortfolioService:
    store = YamlPortfolioStore(config.storage.path, config.market_defaults.as_rates())
    return PortfolioService(store, store, config.coverage)


def _draft_from_args(args: argparse.Namespace) -> Position:
    position = PortfolioService.new_position(
        institution=args.institution,
        regime=IndexRegime(args.regime),
        principal=args.principal,
        rate_parameter=args.rate,
        tax_rate=args.tax_rate,
        start_date=args.start or date.today(),
        due_date=args.due,
        broker=args.broker,
        title=InvestmentTitle(args.title),
        quantity=args.quantity,
    )
    check_position(position)
    return position


def _edited_from_args(current: Position, args: argparse.Namespace) -> Position:
    changes: dict[str, Any] = {
        "institution": args.institution and args.institution.strip(),
        "regime": args.regime and IndexRegime(args.regime),
        "rate_parameter": args.rate,
        "principal": args.principal,
        "tax_rate": args.tax_rate,
        "start_date": args.start,
        "due_date": args.due,
        "broker": args.broker,
        "title": args.title and InvestmentTitle(args.title),
        "quantity": args.quantity,
    }
    edited = replace(current, **{k: v for k, v in changes.items() if v is not None})
    check_position(edited)
    return edited


def _print_position(position: Position) -> None:
    print(
        f"{position.id}  {position.institution:<20} {position.title.value:<6}"
        f" {position.regime.value:<10} {format_currency(position.principal):>18}"
        f"  due {format_date(position.due_date)}"
        f"  gross {format_currency(position.gross_future_value)}"
        f"  net {format_currency(position.net_future_value)}"
    )


def _print_rates(rates: MarketRates) -> None:
    print(f"Reference index (CDI): {rates.reference_index:.2f}%")
    print(f"Inflation (IPCA):      {rates.inflation:.2f}%")


def _cmd_rates(service: PortfolioService, args: argparse.Namespace) -> None:
    current = service.market_rates()
    if args.reference_index is None and args.inflation is None:
        _print_rates(current)
        return
    rates = MarketRates(
        reference_index=(
            current.reference_index
            if args.reference_index is None
            else args.reference_index
        ),
        inflation=current.inflation if args.inflation is None else args.inflation,
    )
    updated = service.set_market_rates(rates)
    _print_rates(rates)
    print(f"Recomputed {len(updated)} positions")


def _cmd_exposure(service: PortfolioService) -> None:
    report = service.exposure()
    limit = report.per_institution_limit
    print(
        f"Risk: {report.risk_level.value}  total {format_currency(report.global_total)}"
        f" of {format_currency(report.global_limit)}"
        f" ({format_pct(report.global_usage_pct)})"
    )
    if report.uncovered_amount:
        print(f"Uncovered: {format_currency(report.uncovered_amount)}")
    for e in report.institutions:
        flag = "  over limit" if e.exceeds(limit) else ""
        print(
            f"  {e.institution:<24} {format_currency(e.total):>18}"
            f"  {format_pct(e.usage_pct(limit)):>6}{flag}"
        )


async def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    service = build_service(config)

    if args.command == "rates":
        _cmd_rates(service, args)
    elif args.command == "preview":
        result = service.preview(_draft_from_args(args))
        print(f"Gross: {format_currency(result.gross)}")
        print(f"Net:   {format_currency(result.net)}")
    elif args.command == "add":
        _print_position(service.add(_draft_from_args(args)))
    elif args.command == "list":
        for position in service.list_positions():
            _print_position(position)
    elif args.command == "edit":
        current = service.get(args.position_id)
        _print_position(service.update(_edited_from_args(current, args)))
    elif args.command == "remove":
        if not service.remove(args.position_id):
            raise KeyError(f"Unknown position: {args.position_id}")
        print(f"Removed {args.position_id}")
    elif args.command == "recompute":
        print(f"Recomputed {len(service.recompute_all())} positions")
    elif args.command == "exposure":
        _cmd_exposure(service)
    elif args.command == "check":
        await ExposureMonitor(config, service).check_and_alert()
    elif args.command == "report":
        print(await ExposureMonitor(config, service).generate_report())
    elif args.command == "monitor":
        await ExposureMonitor(config, service).run_continuous(args.interval)
    else:
        build_parser().print_help()
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        asyncio.run(_run(args))
    except KeyError as e:
        print(f"error: {e.args[0]}", file=sys.stderr)
        sys.exit(2)
    except (ProjectionError, ValueError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(2)
