from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from journal_stats.metrics.normalize import NormalizedTrade
from journal_stats.metrics.summary import count_outcomes

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


@dataclass(frozen=True)
class MonthlyStats:
    month: str
    total: int
    wins: int
    losses: int
    be_wins: int
    be_losses: int
    profit: float
    win_rate: float
    win_rate_with_be: float


@dataclass(frozen=True)
class MonthlyStatsResult:
    year: int
    months: list[MonthlyStats]
    best_month: MonthlyStats | None
    worst_month: MonthlyStats | None

    def by_name(self) -> dict[str, MonthlyStats]:
        return {row.month: row for row in self.months}


def compute_monthly_stats(trades: Iterable[NormalizedTrade], year: int) -> MonthlyStatsResult:
    buckets: dict[int, list[NormalizedTrade]] = {idx: [] for idx in range(12)}
    for trade in trades:
        if trade.trade_date.year != year:
            continue
        buckets[trade.trade_date.month - 1].append(trade)

    months: list[MonthlyStats] = []
    best: MonthlyStats | None = None
    worst: MonthlyStats | None = None
    for idx, name in enumerate(MONTH_NAMES):
        items = buckets[idx]
        counts = count_outcomes(items)
        row = MonthlyStats(
            month=name,
            total=counts.total,
            wins=counts.wins,
            losses=counts.losses,
            be_wins=counts.be_wins,
            be_losses=counts.be_losses,
            profit=sum(trade.profit for trade in items),
            win_rate=counts.win_rate,
            win_rate_with_be=counts.win_rate_with_be,
        )
        months.append(row)
        if not items:
            continue
        if best is None or row.profit > best.profit:
            best = row
        if worst is None or row.profit < worst.profit:
            worst = row

    return MonthlyStatsResult(year=year, months=months, best_month=best, worst_month=worst)
