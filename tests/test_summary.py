"""Unit tests for the primary statistics."""

from __future__ import annotations

from datetime import date

import pytest

from journal_stats.metrics.summary import (
    average_days_between_trades,
    compute_streaks,
    compute_summary,
    count_outcomes,
    max_drawdown_pct,
    win_rate,
    win_rate_with_be,
)
from journal_stats.models import OUTCOME_LOSE, OUTCOME_WIN

BALANCE = 10_000.0


@pytest.fixture
def win_loss_be(make_normalized):
    return [
        make_normalized(date(2026, 3, 2), OUTCOME_WIN, calculated_profit=200.0),
        make_normalized(date(2026, 3, 3), OUTCOME_LOSE, calculated_profit=-100.0),
        make_normalized(date(2026, 3, 4), OUTCOME_WIN, break_even=True, calculated_profit=0.0),
    ]


class TestWinRates:
    def test_zero_denominators(self):
        assert win_rate(0, 0) == 0.0
        assert win_rate_with_be(0, 0, 0, 0) == 0.0

    def test_break_even_wins_count_toward_with_be_rate(self):
        assert win_rate_with_be(1, 1, 1, 1) == pytest.approx(50.0)
        assert win_rate_with_be(1, 1, 1, 0) == pytest.approx(200.0 / 3)


class TestComputeSummary:
    def test_one_win_one_loss_one_break_even(self, win_loss_be):
        stats = compute_summary(win_loss_be, BALANCE)
        assert stats.total_trades == 3
        assert (stats.wins, stats.losses, stats.be_wins, stats.be_losses) == (1, 1, 1, 0)
        assert stats.win_rate == pytest.approx(50.0)
        assert stats.win_rate_with_be == pytest.approx(66.6667, rel=1e-4)
        assert stats.total_profit == pytest.approx(100.0)
        assert stats.average_profit == pytest.approx(100.0 / 3)
        assert stats.max_drawdown == pytest.approx(100.0 / 10_200.0 * 100.0)
        assert stats.average_days_between_trades == 1.0

    def test_empty_input_is_all_zeros(self):
        stats = compute_summary([], BALANCE)
        assert stats.total_trades == 0
        assert stats.win_rate == 0.0
        assert stats.win_rate_with_be == 0.0
        assert stats.total_profit == 0.0
        assert stats.average_profit == 0.0
        assert stats.average_pnl_pct == 0.0
        assert stats.max_drawdown == 0.0
        assert (stats.current_streak, stats.best_streak, stats.worst_streak) == (0, 0, 0)
        assert stats.average_days_between_trades == 0.0

    def test_only_break_even_trades(self, make_normalized):
        trades = [
            make_normalized(date(2026, 3, 2), OUTCOME_WIN, break_even=True),
            make_normalized(date(2026, 3, 3), OUTCOME_LOSE, break_even=True),
        ]
        stats = compute_summary(trades, BALANCE)
        assert stats.win_rate == 0.0
        assert stats.win_rate_with_be == pytest.approx(50.0)
        assert stats.be_wins == 1
        assert stats.be_losses == 1
        assert stats.current_streak == 0

    def test_counts_always_add_up(self, make_normalized):
        trades = [
            make_normalized(outcome=OUTCOME_WIN),
            make_normalized(outcome=OUTCOME_WIN, break_even=True),
            make_normalized(outcome=OUTCOME_LOSE),
            make_normalized(outcome=OUTCOME_LOSE, break_even=True),
            make_normalized(outcome=OUTCOME_LOSE),
        ]
        counts = count_outcomes(trades)
        assert counts.total == len(trades)
        assert counts.break_even == 2


class TestDrawdown:
    def test_monotonic_equity_has_no_drawdown(self, make_normalized):
        trades = [
            make_normalized(date(2026, 3, day), OUTCOME_WIN, calculated_profit=50.0)
            for day in range(2, 7)
        ]
        assert max_drawdown_pct(trades, BALANCE) == 0.0

    def test_walks_trades_in_time_order(self, make_normalized):
        trades = [
            make_normalized(date(2026, 3, 5), OUTCOME_LOSE, calculated_profit=-500.0),
            make_normalized(date(2026, 3, 2), OUTCOME_WIN, calculated_profit=1_000.0),
        ]
        # peak 11,000 after the win, then down to 10,500
        assert max_drawdown_pct(trades, BALANCE) == pytest.approx(500.0 / 11_000.0 * 100.0)

    def test_never_negative(self, make_normalized):
        trades = [make_normalized(outcome=OUTCOME_LOSE, calculated_profit=-20_000.0)]
        assert max_drawdown_pct(trades, BALANCE) >= 0.0


class TestStreaks:
    def test_break_even_trades_do_not_break_a_run(self, make_normalized):
        sequence = [
            (OUTCOME_WIN, False),
            (OUTCOME_WIN, False),
            (OUTCOME_WIN, True),
            (OUTCOME_WIN, False),
            (OUTCOME_LOSE, False),
            (OUTCOME_LOSE, False),
        ]
        trades = [
            make_normalized(date(2026, 3, idx + 1), outcome, break_even=be)
            for idx, (outcome, be) in enumerate(sequence)
        ]
        assert compute_streaks(trades) == (-2, 3, -2)

    def test_single_win(self, make_normalized):
        assert compute_streaks([make_normalized(outcome=OUTCOME_WIN)]) == (1, 1, 0)


def test_average_days_between_trades_rounds_to_one_decimal(make_normalized):
    trades = [
        make_normalized(date(2026, 3, 1)),
        make_normalized(date(2026, 3, 2)),
        make_normalized(date(2026, 3, 4)),
        make_normalized(date(2026, 3, 5)),
    ]
    # gaps 1, 2, 1
    assert average_days_between_trades(trades) == 1.3


def test_trades_without_a_known_outcome_are_not_counted(make_normalized):
    trades = [
        make_normalized(outcome=OUTCOME_WIN, calculated_profit=100.0),
        make_normalized(outcome=None, calculated_profit=500.0),
        make_normalized(outcome="Scratch", calculated_profit=-20.0),
    ]
    stats = compute_summary(trades, BALANCE)
    assert stats.total_trades == 1
    assert stats.wins + stats.losses + stats.be_wins + stats.be_losses == stats.total_trades
    assert stats.total_profit == pytest.approx(100.0)
