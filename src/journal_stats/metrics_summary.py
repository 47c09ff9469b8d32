from __future__ import annotations

import argparse
import json
import os
import sqlite3
import sys
from datetime import date
from pathlib import Path

from journal_stats.config.accounts import resolve_account_context
from journal_stats.config.app_config import load_app_config
from journal_stats.dashboard import DashboardData, compute_dashboard, dashboard_to_dict
from journal_stats.ingest.sources import load_account_trades
from journal_stats.metrics.filters import PRESETS, DashboardQuery, build_query


def add_query_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--account", type=str, default=None, help="Account name from accounts config.")
    parser.add_argument("--start", type=date.fromisoformat, default=None, help="Range start (YYYY-MM-DD).")
    parser.add_argument("--end", type=date.fromisoformat, default=None, help="Range end (YYYY-MM-DD).")
    parser.add_argument("--preset", choices=PRESETS, default=None, help="Named date range.")
    parser.add_argument("--market", type=str, default=None, help="Only include this market.")
    parser.add_argument("--year", type=int, default=None, help="Year for the monthly view.")
    parser.add_argument("--strategy", type=str, default=None, help="Only include this strategy id.")


def query_from_args(args: argparse.Namespace) -> DashboardQuery:
    return build_query(
        start=args.start,
        end=args.end,
        preset=args.preset,
        year=args.year,
        market=args.market,
        strategy_id=args.strategy,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compute trade journal dashboard statistics.")
    parser.add_argument(
        "trades_path",
        type=Path,
        nargs="?",
        default=None,
        help="Path to a trades export (json/csv/tsv). Defaults to the account data.",
    )
    add_query_arguments(parser)
    parser.add_argument("--json", action="store_true", help="Print JSON output.")
    parser.add_argument("--out", type=Path, default=None, help="Write output to a file instead of stdout.")
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

    data = compute_dashboard(result.trades, query_from_args(args), context.settings, app_config.analytics)
    if data.skipped:
        print(f"Skipped {data.skipped} trades without a Win or Lose outcome.", file=sys.stderr)

    out_path = args.out
    if args.json or (out_path is not None and out_path.suffix.lower() == ".json"):
        text = json.dumps(dashboard_to_dict(data), indent=2, sort_keys=True)
    else:
        text = _format_dashboard(data)

    if out_path is None:
        print(text)
        return 0

    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text + "\n", encoding="utf-8")
    return 0


def _format_dashboard(data: DashboardData) -> str:
    stats = data.stats
    macro = data.macro
    monthly = data.monthly
    lines = [
        f"account {data.account.name}",
        f"range {data.query.start_date.isoformat()} {data.query.end_date.isoformat()}",
        f"market {data.query.market or 'all'}",
        f"total_trades {stats.total_trades}",
        f"wins {stats.wins}",
        f"losses {stats.losses}",
        f"be_wins {stats.be_wins}",
        f"be_losses {stats.be_losses}",
        f"win_rate {_format_float(stats.win_rate)}",
        f"win_rate_with_be {_format_float(stats.win_rate_with_be)}",
        f"total_profit {_format_float(stats.total_profit)}",
        f"average_profit {_format_float(stats.average_profit)}",
        f"average_pnl_pct {_format_float(stats.average_pnl_pct)}",
        f"max_drawdown {_format_float(stats.max_drawdown)}",
        f"current_streak {stats.current_streak}",
        f"best_streak {stats.best_streak}",
        f"worst_streak {stats.worst_streak}",
        f"average_days_between_trades {_format_float(stats.average_days_between_trades)}",
        f"profit_factor {_format_float(macro.profit_factor)}",
        f"consistency_score {_format_float(macro.consistency_score)}",
        f"consistency_score_with_be {_format_float(macro.consistency_score_with_be)}",
        f"sharpe_with_be {_format_float(macro.sharpe_with_be)}",
        f"trade_quality_index {_format_float(macro.trade_quality_index)}",
        f"total_r {_format_float(macro.total_r)}",
        f"non_executed_trades {data.non_executed.total_trades}",
        f"best_month {monthly.best_month.month if monthly.best_month else 'na'}",
        f"worst_month {monthly.worst_month.month if monthly.worst_month else 'na'}",
    ]
    return "\n".join(lines)


def _format_float(value: float | None) -> str:
    return "na" if value is None else f"{value:.6g}"


if __name__ == "__main__":
    raise SystemExit(main())
