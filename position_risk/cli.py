"""Command-line interface for the position risk calculator."""
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict

from .assets import supported_symbols
from .config import load_config
from .logging_setup import configure_logging
from .models import PositionParams, RiskLevel
from .services import InvalidPositionError, RiskAnalyzer


def _add_position_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--asset",
        required=True,
        type=str.upper,
        help=f"Asset symbol ({', '.join(supported_symbols())})",
    )
    parser.add_argument(
        "--collateral", required=True, type=float, help="Collateral in USD"
    )
    parser.add_argument("--leverage", required=True, type=float, help="Leverage (1-50)")
    parser.add_argument(
        "--entry-price", required=True, type=float, help="Entry price in USD"
    )
    parser.add_argument(
        "--short",
        action="store_true",
        help="Short position (default: long)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="position-risk",
        description="Risk calculator for leveraged perpetual positions",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=(
            "Path to config.yaml "
            "(default: config.yaml in project root, else built-in defaults)"
        ),
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    sub = parser.add_subparsers(dest="command")

    liq = sub.add_parser("liquidation", help="Liquidation price and distance")
    _add_position_args(liq)

    pnl = sub.add_parser("pnl", help="PnL at a price, or the configured scenarios")
    _add_position_args(pnl)
    pnl.add_argument(
        "--price",
        type=float,
        default=None,
        help="Hypothetical current price (default: simulate configured moves)",
    )

    fees = sub.add_parser("fees", help="Position, borrowing and funding fees")
    _add_position_args(fees)
    fees.add_argument(
        "--hours",
        type=float,
        default=None,
        help="Holding period in hours (default: configured timeframes)",
    )

    lev = sub.add_parser("leverage", help="Safe leverage recommendation")
    _add_position_args(lev)
    lev.add_argument(
        "--tolerance",
        choices=[r.value for r in RiskLevel],
        default=None,
        help="Risk tolerance (default: from config)",
    )

    rr = sub.add_parser("risk-reward", help="Risk/reward for stop-loss and take-profit")
    _add_position_args(rr)
    rr.add_argument("--stop-loss", type=float, default=None)
    rr.add_argument("--take-profit", type=float, default=None)

    report = sub.add_parser("report", help="Full risk report")
    _add_position_args(report)
    report.add_argument(
        "--tolerance", choices=[r.value for r in RiskLevel], default=None
    )
    report.add_argument("--stop-loss", type=float, default=None)
    report.add_argument("--take-profit", type=float, default=None)
    report.add_argument("--json", action="store_true", help="Print the report as JSON")

    return parser


def _position_from_args(args: argparse.Namespace) -> PositionParams:
    return PositionParams(
        asset=args.asset,
        collateral=args.collateral,
        leverage=args.leverage,
        is_long=not args.short,
        entry_price=args.entry_price,
    )


def _run(args: argparse.Namespace) -> str:
    """Execute the selected command and return its output."""
    config = load_config(args.config)
    analyzer = RiskAnalyzer(config)
    params = _position_from_args(args)

    if args.command == "report":
        report = analyzer.analyze(params, args.tolerance, args.stop_loss, args.take_profit)
        if not report.validation.is_valid:
            raise InvalidPositionError(report.validation.errors)
        if args.json:
            return json.dumps(asdict(report), indent=2)
        return analyzer.format_report(report)

    header = analyzer.format_header(params)
    if args.command == "liquidation":
        body = analyzer.format_liquidation(params, analyzer.liquidation(params))
    elif args.command == "pnl":
        if args.price is None:
            body = analyzer.format_scenarios(params, analyzer.pnl_scenarios(params))
        else:
            body = analyzer.format_pnl(args.price, analyzer.pnl_at(params, args.price))
    elif args.command == "fees":
        body = analyzer.format_fees(analyzer.fee_timeframes(params, args.hours))
    elif args.command == "leverage":
        body = analyzer.format_leverage(
            params, analyzer.recommend_leverage(params, args.tolerance)
        )
    else:
        body = analyzer.format_risk_reward(
            analyzer.assess_risk_reward(params, args.stop_loss, args.take_profit)
        )
    return f"{header}\n\n{body}"


def main(argv: list[str] | None = None) -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(args.log_level)
    try:
        print(_run(args))
    except InvalidPositionError as e:
        print("❌ Invalid position")
        for error in e.errors:
            print(f"  - {error}")
        sys.exit(1)


if __name__ == "__main__":
    main()
