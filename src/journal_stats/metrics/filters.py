from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from journal_stats.metrics.normalize import NormalizedTrade

ALL_MARKETS = "all"
PRESETS = ("year", "15days", "30days", "month")


@dataclass(frozen=True)
class DateRange:
    start_date: date
    end_date: date

    def contains(self, value: date) -> bool:
        return self.start_date <= value <= self.end_date


@dataclass(frozen=True)
class DashboardQuery:
    start_date: date
    end_date: date
    year: int
    market: str | None = None
    strategy_id: str | None = None

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)

    def matches_market(self, market: str) -> bool:
        if self.market is None or self.market == ALL_MARKETS:
            return True
        return market == self.market

    def matches_strategy(self, strategy_id: str | None) -> bool:
        if self.strategy_id is None:
            return True
        return strategy_id == self.strategy_id


@dataclass(frozen=True)
class TradePartition:
    executed: list[NormalizedTrade]
    non_executed: list[NormalizedTrade]
    year_executed: list[NormalizedTrade]


def partition_trades(trades: Iterable[NormalizedTrade], query: DashboardQuery) -> TradePartition:
    executed: list[NormalizedTrade] = []
    non_executed: list[NormalizedTrade] = []
    year_executed: list[NormalizedTrade] = []
    date_range = query.date_range

    for trade in trades:
        if not query.matches_strategy(trade.strategy_id):
            continue
        if trade.executed and trade.trade_date.year == query.year:
            year_executed.append(trade)
        if not date_range.contains(trade.trade_date):
            continue
        if not query.matches_market(trade.market):
            continue
        if trade.executed:
            executed.append(trade)
        else:
            non_executed.append(trade)

    return TradePartition(executed=executed, non_executed=non_executed, year_executed=year_executed)


def initial_date_range(today: date | None = None) -> DateRange:
    today = today or date.today()
    return DateRange(today - timedelta(days=29), today)


def preset_range(preset: str, today: date | None = None) -> DateRange:
    today = today or date.today()
    if preset == "year":
        return DateRange(date(today.year, 1, 1), date(today.year, 12, 31))
    if preset == "15days":
        return DateRange(today - timedelta(days=14), today)
    if preset == "30days":
        return DateRange(today - timedelta(days=29), today)
    if preset == "month":
        return calendar_range(today)
    raise ValueError(f"Unknown date range preset: {preset}")


def calendar_range(end_date: date) -> DateRange:
    last_day = calendar.monthrange(end_date.year, end_date.month)[1]
    return DateRange(end_date.replace(day=1), end_date.replace(day=last_day))


def is_custom_range(value: DateRange, today: date | None = None) -> bool:
    today = today or date.today()
    return all(preset_range(preset, today) != value for preset in PRESETS)


def build_query(
    *,
    start: date | None = None,
    end: date | None = None,
    preset: str | None = None,
    year: int | None = None,
    market: str | None = None,
    strategy_id: str | None = None,
    today: date | None = None,
) -> DashboardQuery:
    """Resolve loose filter inputs into a query.

    A known preset wins over explicit dates; an incomplete or inverted
    start/end pair falls back to the last 30 days. The year defaults to the
    year of the range end.
    """
    today = today or date.today()
    preset = (preset or "").strip().lower()
    if preset in PRESETS:
        date_range = preset_range(preset, today)
    elif start is not None and end is not None and start <= end:
        date_range = DateRange(start, end)
    else:
        date_range = initial_date_range(today)

    market = (market or "").strip() or None
    if market is not None and market.lower() == ALL_MARKETS:
        market = None

    return DashboardQuery(
        start_date=date_range.start_date,
        end_date=date_range.end_date,
        year=year or date_range.end_date.year,
        market=market,
        strategy_id=(strategy_id or "").strip() or None,
    )
