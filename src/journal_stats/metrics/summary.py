from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from journal_stats.metrics.normalize import NormalizedTrade, chronological, has_known_outcome


@dataclass(frozen=True)
class OutcomeCounts:
    wins: int = 0
    losses: int = 0
    be_wins: int = 0
    be_losses: int = 0

    @property
    def total(self) -> int:
        return self.wins + self.losses + self.be_wins + self.be_losses

    @property
    def break_even(self) -> int:
        return self.be_wins + self.be_losses

    @property
    def win_rate(self) -> float:
        return win_rate(self.wins, self.losses)

    @property
    def win_rate_with_be(self) -> float:
        return win_rate_with_be(self.wins, self.losses, self.be_wins, self.be_losses)


@dataclass(frozen=True)
class SummaryStats:
    total_trades: int
    wins: int
    losses: int
    be_wins: int
    be_losses: int
    win_rate: float
    win_rate_with_be: float
    total_profit: float
    average_profit: float
    average_pnl_pct: float
    max_drawdown: float
    current_streak: int
    best_streak: int
    worst_streak: int
    average_days_between_trades: float


def count_outcomes(trades: Iterable[NormalizedTrade]) -> OutcomeCounts:
    wins = losses = be_wins = be_losses = 0
    for trade in trades:
        if trade.is_win:
            wins += 1
        elif trade.is_loss:
            losses += 1
        elif trade.is_be_win:
            be_wins += 1
        elif trade.is_be_loss:
            be_losses += 1
    return OutcomeCounts(wins=wins, losses=losses, be_wins=be_wins, be_losses=be_losses)


def win_rate(wins: int, losses: int) -> float:
    denominator = wins + losses
    if not denominator:
        return 0.0
    return wins / denominator * 100.0


def win_rate_with_be(wins: int, losses: int, be_wins: int, be_losses: int) -> float:
    denominator = wins + losses + be_wins + be_losses
    if not denominator:
        return 0.0
    return (wins + be_wins) / denominator * 100.0


def compute_summary(trades: Iterable[NormalizedTrade], balance: float) -> SummaryStats:
    trade_list = [trade for trade in trades if has_known_outcome(trade)]
    counts = count_outcomes(trade_list)
    total_trades = counts.total

    total_profit = sum(trade.profit for trade in trade_list)
    average_profit = total_profit / total_trades if total_trades else 0.0
    average_pnl_pct = _mean([trade.pnl_pct for trade in trade_list]) or 0.0

    current_streak, best_streak, worst_streak = compute_streaks(trade_list)

    return SummaryStats(
        total_trades=total_trades,
        wins=counts.wins,
        losses=counts.losses,
        be_wins=counts.be_wins,
        be_losses=counts.be_losses,
        win_rate=counts.win_rate,
        win_rate_with_be=counts.win_rate_with_be,
        total_profit=total_profit,
        average_profit=average_profit,
        average_pnl_pct=average_pnl_pct,
        max_drawdown=max_drawdown_pct(trade_list, balance),
        current_streak=current_streak,
        best_streak=best_streak,
        worst_streak=worst_streak,
        average_days_between_trades=average_days_between_trades(trade_list),
    )


def max_drawdown_pct(trades: Iterable[NormalizedTrade], balance: float) -> float:
    equity = balance
    peak = balance
    max_dd = 0.0
    for trade in chronological(trades):
        equity += trade.profit
        if equity > peak:
            peak = equity
        if peak <= 0:
            continue
        drawdown = (peak - equity) / peak
        if drawdown > max_dd:
            max_dd = drawdown
    return max_dd * 100.0


def compute_streaks(trades: Iterable[NormalizedTrade]) -> tuple[int, int, int]:
    """Return (current, best, worst) signed run lengths.

    Break-even trades are skipped, so they neither extend nor end a run.
    """
    current = 0
    best = 0
    worst = 0
    for trade in chronological(trades):
        if trade.is_win:
            current = current + 1 if current >= 0 else 1
        elif trade.is_loss:
            current = current - 1 if current <= 0 else -1
        else:
            continue
        best = max(best, current)
        worst = min(worst, current)
    return current, best, worst


def average_days_between_trades(trades: Iterable[NormalizedTrade]) -> float:
    dates = sorted(trade.trade_date for trade in trades)
    if len(dates) < 2:
        return 0.0
    gaps = [(dates[idx] - dates[idx - 1]).days for idx in range(1, len(dates))]
    return round(sum(gaps) / len(gaps), 1)


def _mean(values: list[float]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)
