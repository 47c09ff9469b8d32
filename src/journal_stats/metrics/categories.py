from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from journal_stats.metrics.normalize import UNSPECIFIED, NormalizedTrade
from journal_stats.metrics.summary import OutcomeCounts, count_outcomes

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
DEFAULT_GRADE_ORDER = ("A+", "A", "B", "C")
DEFAULT_RISK_LEVELS = (0.25, 0.3, 0.35, 0.5, 0.7, 1.0)

NEWS_LABEL = "News"
NO_NEWS_LABEL = "No News"
NEWS_NO_EVENT_LABEL = "News (no event)"
LIQUIDATED = "liquidated"
NOT_LIQUIDATED = "not_liquidated"
LAUNCH_HOUR_LABEL = "Launch hour"
REGULAR_HOUR_LABEL = "Regular"
PARTIALS_LABEL = "Partials"
NO_PARTIALS_LABEL = "No partials"
REENTRY_LABEL = "ReEntry"
BREAK_EVEN_LABEL = "Break Even"
TREND_VALUES = ("Trend-following", "Counter-trend")


@dataclass(frozen=True)
class TimeInterval:
    label: str
    start: int
    end: int

    def contains(self, minute: int) -> bool:
        return self.start <= minute <= self.end


TIME_INTERVALS = (
    TimeInterval("< 10:00", 0, 9 * 60 + 59),
    TimeInterval("10:00 – 11:59", 10 * 60, 11 * 60 + 59),
    TimeInterval("12:00 – 16:59", 12 * 60, 16 * 60 + 59),
    TimeInterval("17:00 – 20:59", 17 * 60, 20 * 60 + 59),
)


@dataclass(frozen=True)
class CategoryStats:
    label: str
    total: int
    wins: int
    losses: int
    be_wins: int
    be_losses: int
    win_rate: float
    win_rate_with_be: float

    @classmethod
    def from_counts(cls, label: str, counts: OutcomeCounts) -> CategoryStats:
        return cls(
            label=label,
            total=counts.total,
            wins=counts.wins,
            losses=counts.losses,
            be_wins=counts.be_wins,
            be_losses=counts.be_losses,
            win_rate=counts.win_rate,
            win_rate_with_be=counts.win_rate_with_be,
        )


@dataclass(frozen=True)
class MarketStats:
    label: str
    total: int
    wins: int
    losses: int
    be_wins: int
    be_losses: int
    win_rate: float
    win_rate_with_be: float
    profit: float
    pnl_pct: float


@dataclass(frozen=True)
class SLSizeStats:
    market: str
    average_sl_size: float


@dataclass(frozen=True)
class PartialTradesStats:
    partial_wins: int
    partial_losses: int
    be_win_partials: int
    be_loss_partials: int
    win_rate: float
    win_rate_with_be: float
    total: int


@dataclass(frozen=True)
class CategoryBreakdowns:
    market: list[MarketStats]
    setup: list[CategoryStats]
    liquidity: list[CategoryStats]
    direction: list[CategoryStats]
    mss: list[CategoryStats]
    news: list[CategoryStats]
    news_name: list[CategoryStats]
    day_of_week: list[CategoryStats]
    time_interval: list[CategoryStats]
    local_high_low: list[CategoryStats]
    launch_hour: list[CategoryStats]
    partials: list[CategoryStats]
    trade_types: list[CategoryStats]
    trend: list[CategoryStats]
    evaluation: list[CategoryStats]
    risk_per_trade: list[CategoryStats]
    sl_size: list[SLSizeStats]
    partial_trades: PartialTradesStats


def compute_breakdowns(
    trades: Iterable[NormalizedTrade],
    balance: float,
    *,
    grade_order: Sequence[str] = DEFAULT_GRADE_ORDER,
    risk_levels: Sequence[float] = DEFAULT_RISK_LEVELS,
) -> CategoryBreakdowns:
    trade_list = list(trades)
    return CategoryBreakdowns(
        market=market_stats(trade_list, balance),
        setup=grouped_stats(trade_list, lambda trade: trade.setup),
        liquidity=grouped_stats(trade_list, lambda trade: trade.liquidity),
        direction=grouped_stats(trade_list, lambda trade: trade.direction),
        mss=grouped_stats(trade_list, lambda trade: trade.mss),
        news=grouped_stats(trade_list, _news_label),
        news_name=news_name_stats(trade_list),
        day_of_week=day_of_week_stats(trade_list),
        time_interval=interval_stats(trade_list),
        local_high_low=local_high_low_stats(trade_list),
        launch_hour=grouped_stats(
            trade_list, lambda trade: LAUNCH_HOUR_LABEL if trade.launch_hour else REGULAR_HOUR_LABEL
        ),
        partials=grouped_stats(
            trade_list, lambda trade: PARTIALS_LABEL if trade.partials_taken else NO_PARTIALS_LABEL
        ),
        trade_types=trade_type_stats(trade_list),
        trend=trend_stats(trade_list),
        evaluation=evaluation_stats(trade_list, grade_order),
        risk_per_trade=risk_level_stats(trade_list, risk_levels),
        sl_size=sl_size_stats(trade_list),
        partial_trades=partial_trades_stats(trade_list),
    )


def grouped_stats(
    trades: Iterable[NormalizedTrade],
    key: Callable[[NormalizedTrade], str],
) -> list[CategoryStats]:
    buckets = _group(trades, key)
    rows = [CategoryStats.from_counts(label, count_outcomes(items)) for label, items in buckets.items()]
    rows.sort(key=lambda row: (-row.total, row.label))
    return rows


def market_stats(trades: Iterable[NormalizedTrade], balance: float) -> list[MarketStats]:
    buckets = _group(trades, lambda trade: trade.market)
    rows: list[MarketStats] = []
    for label, items in buckets.items():
        counts = count_outcomes(items)
        profit = sum(trade.profit for trade in items)
        rows.append(
            MarketStats(
                label=label,
                total=counts.total,
                wins=counts.wins,
                losses=counts.losses,
                be_wins=counts.be_wins,
                be_losses=counts.be_losses,
                win_rate=counts.win_rate,
                win_rate_with_be=counts.win_rate_with_be,
                profit=profit,
                pnl_pct=profit / balance * 100.0 if balance > 0 else 0.0,
            )
        )
    rows.sort(key=lambda row: (-row.total, row.label))
    return rows


def day_of_week_stats(trades: Iterable[NormalizedTrade]) -> list[CategoryStats]:
    buckets = _group(trades, lambda trade: WEEKDAY_NAMES[trade.trade_date.weekday()])
    return [
        CategoryStats.from_counts(day, count_outcomes(buckets[day]))
        for day in WEEKDAY_NAMES
        if day in buckets
    ]


def interval_stats(
    trades: Iterable[NormalizedTrade],
    intervals: Sequence[TimeInterval] = TIME_INTERVALS,
) -> list[CategoryStats]:
    buckets: dict[str, list[NormalizedTrade]] = {interval.label: [] for interval in intervals}
    unspecified: list[NormalizedTrade] = []
    for trade in trades:
        interval = interval_for_minute(trade.minute_of_day, intervals)
        if interval is None:
            unspecified.append(trade)
        else:
            buckets[interval.label].append(trade)

    rows = [
        CategoryStats.from_counts(interval.label, count_outcomes(buckets[interval.label]))
        for interval in intervals
    ]
    if unspecified:
        rows.append(CategoryStats.from_counts(UNSPECIFIED, count_outcomes(unspecified)))
    return rows


def interval_for_minute(
    minute: int | None,
    intervals: Sequence[TimeInterval] = TIME_INTERVALS,
) -> TimeInterval | None:
    if minute is None:
        return None
    for interval in intervals:
        if interval.contains(minute):
            return interval
    return None


def local_high_low_stats(trades: Iterable[NormalizedTrade]) -> list[CategoryStats]:
    buckets = _group(trades, lambda trade: LIQUIDATED if trade.local_high_low else NOT_LIQUIDATED)
    return [
        CategoryStats.from_counts(label, count_outcomes(buckets.get(label, [])))
        for label in (LIQUIDATED, NOT_LIQUIDATED)
    ]


def trade_type_stats(trades: Iterable[NormalizedTrade]) -> list[CategoryStats]:
    trade_list = list(trades)
    rows: list[CategoryStats] = []
    reentries = [trade for trade in trade_list if trade.reentry]
    if reentries:
        rows.append(CategoryStats.from_counts(REENTRY_LABEL, count_outcomes(reentries)))
    break_evens = [trade for trade in trade_list if trade.break_even]
    if break_evens:
        rows.append(CategoryStats.from_counts(BREAK_EVEN_LABEL, count_outcomes(break_evens)))
    return rows


def news_name_stats(
    trades: Iterable[NormalizedTrade],
    *,
    include_unnamed: bool = True,
) -> list[CategoryStats]:
    """Breakdown per named news event over news-related trades.

    News trades without an event name share one trailing bucket when
    ``include_unnamed`` is set.
    """
    news_trades = [trade for trade in trades if trade.news_related]
    named = grouped_stats(
        (trade for trade in news_trades if trade.news_name),
        lambda trade: trade.news_name or UNSPECIFIED,
    )
    unnamed = [trade for trade in news_trades if not trade.news_name]
    if include_unnamed and unnamed:
        named.append(CategoryStats.from_counts(NEWS_NO_EVENT_LABEL, count_outcomes(unnamed)))
    return named


def trend_stats(trades: Iterable[NormalizedTrade]) -> list[CategoryStats]:
    buckets = _group(trades, lambda trade: trade.trend or UNSPECIFIED)
    rows = [
        CategoryStats.from_counts(value, count_outcomes(buckets[value]))
        for value in TREND_VALUES
        if value in buckets
    ]
    rows.sort(key=lambda row: -row.total)
    return rows


def evaluation_stats(trades: Iterable[NormalizedTrade], grade_order: Sequence[str]) -> list[CategoryStats]:
    buckets = _group(trades, lambda trade: trade.evaluation)
    return [
        CategoryStats.from_counts(grade, count_outcomes(buckets[grade]))
        for grade in grade_order
        if grade in buckets
    ]


def risk_level_stats(trades: Iterable[NormalizedTrade], levels: Sequence[float]) -> list[CategoryStats]:
    buckets: dict[float, list[NormalizedTrade]] = {level: [] for level in levels}
    for trade in trades:
        if trade.risk_per_trade is None:
            continue
        for level in levels:
            if abs(trade.risk_per_trade - level) < 1e-9:
                buckets[level].append(trade)
                break
    return [
        CategoryStats.from_counts(f"{level:g}%", count_outcomes(buckets[level]))
        for level in levels
    ]


def sl_size_stats(trades: Iterable[NormalizedTrade]) -> list[SLSizeStats]:
    buckets = _group(trades, lambda trade: trade.market)
    rows: list[SLSizeStats] = []
    for market, items in buckets.items():
        sizes = [trade.sl_size for trade in items if trade.sl_size > 0]
        if not sizes:
            continue
        rows.append(SLSizeStats(market=market, average_sl_size=sum(sizes) / len(sizes)))
    rows.sort(key=lambda row: (-row.average_sl_size, row.market))
    return rows


def partial_trades_stats(trades: Iterable[NormalizedTrade]) -> PartialTradesStats:
    counts = count_outcomes(trade for trade in trades if trade.partials_taken)
    return PartialTradesStats(
        partial_wins=counts.wins,
        partial_losses=counts.losses,
        be_win_partials=counts.be_wins,
        be_loss_partials=counts.be_losses,
        win_rate=counts.win_rate,
        win_rate_with_be=counts.win_rate_with_be,
        total=counts.total,
    )


def _news_label(trade: NormalizedTrade) -> str:
    if trade.news_related is None:
        return UNSPECIFIED
    return NEWS_LABEL if trade.news_related else NO_NEWS_LABEL


def _group(
    trades: Iterable[NormalizedTrade],
    key: Callable[[NormalizedTrade], str],
) -> dict[str, list[NormalizedTrade]]:
    buckets: dict[str, list[NormalizedTrade]] = {}
    for trade in trades:
        buckets.setdefault(key(trade) or UNSPECIFIED, []).append(trade)
    return buckets
