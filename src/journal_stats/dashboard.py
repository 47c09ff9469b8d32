from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable

from journal_stats.config.app_config import AnalyticsSettings, default_analytics_settings
from journal_stats.metrics.categories import CategoryBreakdowns, compute_breakdowns
from journal_stats.metrics.filters import DashboardQuery, partition_trades
from journal_stats.metrics.macro import MacroStats, compute_macro_stats
from journal_stats.metrics.monthly import MonthlyStatsResult, compute_monthly_stats
from journal_stats.metrics.normalize import NormalizedTrade, normalize_trades
from journal_stats.metrics.summary import SummaryStats, compute_summary
from journal_stats.models import AccountSettings, Trade


@dataclass(frozen=True)
class DashboardData:
    account: AccountSettings
    query: DashboardQuery
    stats: SummaryStats
    non_executed: SummaryStats
    macro: MacroStats
    categories: CategoryBreakdowns
    monthly: MonthlyStatsResult
    markets: list[str]
    trades: list[NormalizedTrade]
    skipped: int = 0


def compute_dashboard(
    trades: Iterable[Trade],
    query: DashboardQuery,
    account: AccountSettings,
    settings: AnalyticsSettings | None = None,
) -> DashboardData:
    """Compute every dashboard figure for one account and filter state.

    Only executed trades inside the date range (and matching the market and
    strategy filters) feed ``stats``, ``macro`` and ``categories``.
    ``non_executed`` mirrors ``stats`` over the planned-but-skipped trades.
    The monthly view ignores the date range and market filter and uses
    every executed trade in ``query.year`` instead. Trades without a Win or
    Lose outcome are left out of every figure and counted in ``skipped``.
    """
    settings = settings or default_analytics_settings()
    balance = account.balance
    trade_list = list(trades)
    normalized = normalize_trades(
        trade_list,
        balance,
        default_risk_pct=settings.default_risk_pct,
        default_rr=settings.default_rr,
    )
    partition = partition_trades(normalized, query)
    markets = sorted({trade.market for trade in normalized if trade.executed})

    return DashboardData(
        account=account,
        query=query,
        stats=compute_summary(partition.executed, balance),
        non_executed=compute_summary(partition.non_executed, balance),
        macro=compute_macro_stats(partition.executed, consistency_cv_cap=settings.consistency_cv_cap),
        categories=compute_breakdowns(
            partition.executed,
            balance,
            grade_order=settings.grade_order,
            risk_levels=settings.risk_levels,
        ),
        monthly=compute_monthly_stats(partition.year_executed, query.year),
        markets=markets,
        trades=partition.executed,
        skipped=len(trade_list) - len(normalized),
    )


def dashboard_to_dict(data: DashboardData) -> dict[str, Any]:
    return {
        "account": asdict(data.account),
        "query": {
            "start_date": data.query.start_date.isoformat(),
            "end_date": data.query.end_date.isoformat(),
            "year": data.query.year,
            "market": data.query.market,
            "strategy_id": data.query.strategy_id,
        },
        "stats": asdict(data.stats),
        "non_executed": asdict(data.non_executed),
        "macro": asdict(data.macro),
        "categories": asdict(data.categories),
        "monthly": monthly_to_dict(data.monthly),
        "markets": list(data.markets),
        "skipped": data.skipped,
    }


def monthly_to_dict(monthly: MonthlyStatsResult) -> dict[str, Any]:
    return {
        "year": monthly.year,
        "months": [asdict(row) for row in monthly.months],
        "best_month": asdict(monthly.best_month) if monthly.best_month else None,
        "worst_month": asdict(monthly.worst_month) if monthly.worst_month else None,
    }


def trade_to_dict(trade: NormalizedTrade) -> dict[str, Any]:
    payload = asdict(trade)
    payload["trade_date"] = trade.trade_date.isoformat()
    payload["is_win"] = trade.is_win
    payload["is_loss"] = trade.is_loss
    payload["r_multiple"] = trade.r_multiple
    return payload
