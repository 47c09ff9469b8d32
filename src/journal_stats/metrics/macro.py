from __future__ import annotations

from dataclasses import dataclass
from math import sqrt
from statistics import pstdev
from typing import Iterable

from journal_stats.metrics.normalize import NormalizedTrade

CONSISTENCY_CV_CAP = 1.0


@dataclass(frozen=True)
class MacroStats:
    profit_factor: float
    gross_profit: float
    gross_loss: float
    consistency_score: float
    consistency_score_with_be: float
    sharpe_with_be: float
    trade_quality_index: float
    total_r: float


def compute_macro_stats(
    trades: Iterable[NormalizedTrade],
    *,
    consistency_cv_cap: float = CONSISTENCY_CV_CAP,
) -> MacroStats:
    trade_list = list(trades)
    gross_profit, gross_loss = gross_profit_loss(trade_list)
    non_be = [trade for trade in trade_list if not trade.break_even]

    return MacroStats(
        profit_factor=profit_factor(trade_list),
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        consistency_score=consistency_score(non_be, cap=consistency_cv_cap),
        consistency_score_with_be=consistency_score(trade_list, cap=consistency_cv_cap),
        sharpe_with_be=sharpe_ratio([trade.pnl_pct for trade in trade_list]),
        trade_quality_index=trade_quality_index(trade_list),
        total_r=sum(trade.r_multiple for trade in trade_list),
    )


def gross_profit_loss(trades: Iterable[NormalizedTrade]) -> tuple[float, float]:
    gross_profit = 0.0
    gross_loss = 0.0
    for trade in trades:
        if trade.is_loss:
            gross_loss += trade.profit
        elif trade.is_win or (trade.break_even and trade.partials_taken):
            if trade.profit > 0:
                gross_profit += trade.profit
    return gross_profit, gross_loss


def profit_factor(trades: Iterable[NormalizedTrade]) -> float:
    gross_profit, gross_loss = gross_profit_loss(trades)
    if gross_loss >= 0:
        return 0.0
    return gross_profit / abs(gross_loss)


def consistency_score(trades: Iterable[NormalizedTrade], *, cap: float = CONSISTENCY_CV_CAP) -> float:
    """Score 0-100 for how evenly profit is spread across calendar months.

    100 means every traded month earned the same amount. The coefficient of
    variation of monthly profit is scaled against ``cap``; a losing or flat
    mean scores 0.
    """
    monthly = monthly_profits(trades)
    if not monthly:
        return 0.0
    values = list(monthly.values())
    mean = sum(values) / len(values)
    if mean <= 0:
        return 0.0
    if len(values) < 2 or cap <= 0:
        return 100.0
    variation = pstdev(values) / mean
    return _clamp(1.0 - variation / cap) * 100.0


def monthly_profits(trades: Iterable[NormalizedTrade]) -> dict[tuple[int, int], float]:
    buckets: dict[tuple[int, int], float] = {}
    for trade in trades:
        key = (trade.trade_date.year, trade.trade_date.month)
        buckets[key] = buckets.get(key, 0.0) + trade.profit
    return buckets


def sharpe_ratio(returns: list[float]) -> float:
    n = len(returns)
    if n < 2:
        return 0.0
    mean = sum(returns) / n
    variance = sum((value - mean) ** 2 for value in returns) / (n - 1)
    if variance <= 0:
        return 0.0
    return mean / sqrt(variance)


def trade_quality_index(trades: Iterable[NormalizedTrade]) -> float:
    trade_list = list(trades)
    if not trade_list:
        return 0.0
    wins = sum(1 for trade in trade_list if trade.is_win)
    r_values = [trade.r_multiple for trade in trade_list]
    stability = 1.0 / (1.0 + pstdev(r_values))
    return wins / len(trade_list) * stability


def _clamp(value: float) -> float:
    if value < 0:
        return 0.0
    if value > 1:
        return 1.0
    return value
