from __future__ import annotations

import argparse
import os
import sqlite3
import sys
from pathlib import Path

from journal_stats.config.accounts import resolve_account_context
from journal_stats.config.app_config import load_app_config
from journal_stats.ingest.sources import load_account_trades
from journal_stats.metrics.filters import partition_trades
from journal_stats.metrics.normalize import chronological, normalize_trades
from journal_stats.metrics_summary import add_query_arguments, query_from_args


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="List journal trades matching the dashboard filters.")
    parser.add_argument(
        "trades_path",
        type=Path,
        nargs="?",
        default=None,
        help="Path to a trades export (json/csv/tsv). Defaults to the account data.",
    )
    add_query_arguments(parser)
    parser.add_argument(
        "--non-executed",
        action="store_true",
        help="List planned trades that were not executed instead.",
    )
    parser.add_argument("--out", type=Path, default=None, help="Write the listing to a file instead of stdout.")
    args = parser.parse_args(argv)

    app_config = load_app_config()
    try:
        context = resolve_account_context(args.account, env=os.environ)
        result = load_account_trades(context, app_config.app.db_path, trades_path=args.trades_path)
    except (FileNotFoundError, ValueError, sqlite3.Error) as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if result.skipped:
        print(f"Skipped {result.skipped} trade rows during normalization.", file=sys.stderr)

    analytics = app_config.analytics
    normalized = normalize_trades(
        result.trades,
        context.balance,
        default_risk_pct=analytics.default_risk_pct,
        default_rr=analytics.default_rr,
    )
    dropped = len(result.trades) - len(normalized)
    if dropped:
        print(f"Skipped {dropped} trades without a Win or Lose outcome.", file=sys.stderr)
    partition = partition_trades(normalized, query_from_args(args))
    trades = partition.non_executed if args.non_executed else partition.executed

    if not trades:
        print("No trades in range.")
        return 0

    output = ["date time market direction outcome be partials r profit pnl_pct setup"]
    for trade in chronological(trades):
        minute = trade.minute_of_day
        time_text = "na" if minute is None else f"{minute // 60:02d}:{minute % 60:02d}"
        output.append(
            f"{trade.trade_date.isoformat()} {time_text} {trade.market} {trade.direction} "
            f"{trade.outcome} {_flag(trade.break_even)} {_flag(trade.partials_taken)} "
            f"{_format_metric(trade.r_multiple)} {_format_metric(trade.profit)} "
            f"{_format_metric(trade.pnl_pct)} {trade.setup}"
        )

    if args.out is None:
        for line in output:
            print(line)
    else:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text("\n".join(output) + "\n", encoding="utf-8")

    return 0


def _flag(value: bool) -> str:
    return "y" if value else "n"


def _format_metric(value: float | None) -> str:
    return "na" if value is None else f"{value:.6g}"


if __name__ == "__main__":
    raise SystemExit(main())
