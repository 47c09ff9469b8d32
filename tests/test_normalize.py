"""Unit tests for trade normalization and legacy profit derivation."""

from __future__ import annotations

from datetime import date

import pytest

from journal_stats.metrics.normalize import (
    UNSPECIFIED,
    chronological,
    legacy_profit,
    normalize_trade,
    normalize_trades,
    parse_minute_of_day,
)
from journal_stats.models import OUTCOME_LOSE, OUTCOME_WIN


class TestLegacyProfit:
    def test_win_pays_risk_times_reward(self):
        assert legacy_profit(OUTCOME_WIN, False, False, 10_000, 0.5, 2.0) == pytest.approx(100.0)

    def test_loss_costs_the_risk_amount(self):
        assert legacy_profit(OUTCOME_LOSE, False, False, 10_000, 0.5, 2.0) == pytest.approx(-50.0)

    def test_plain_break_even_is_flat(self):
        assert legacy_profit(OUTCOME_WIN, True, False, 10_000, 0.5, 2.0) == 0.0

    def test_break_even_with_partials_keeps_reward(self):
        assert legacy_profit(OUTCOME_LOSE, True, True, 10_000, 1.0, 3.0) == pytest.approx(300.0)


class TestNormalizeTrade:
    def test_missing_profit_uses_defaults(self, make_trade):
        trade = normalize_trade(make_trade(outcome=OUTCOME_WIN), 10_000)
        assert trade.risk_pct == 0.5
        assert trade.risk_reward == 2.0
        assert trade.profit == pytest.approx(100.0)
        assert trade.pnl_pct == pytest.approx(1.0)

    def test_recorded_values_win(self, make_trade):
        trade = normalize_trade(
            make_trade(outcome=OUTCOME_LOSE, calculated_profit=-80.0, pnl_percentage=-0.9),
            10_000,
        )
        assert trade.profit == -80.0
        assert trade.pnl_pct == -0.9

    def test_zero_balance_keeps_pnl_at_zero(self, make_trade):
        trade = normalize_trade(make_trade(calculated_profit=120.0), 0.0)
        assert trade.pnl_pct == 0.0

    def test_categorical_gaps_become_unspecified(self, make_trade):
        trade = normalize_trade(make_trade(market=None, setup_type="  "), 10_000)
        assert trade.market == UNSPECIFIED
        assert trade.setup == UNSPECIFIED
        assert trade.direction == UNSPECIFIED
        assert trade.evaluation == UNSPECIFIED

    def test_executed_defaults_to_true(self, make_trade):
        assert normalize_trade(make_trade(), 10_000).executed is True
        assert normalize_trade(make_trade(executed=False), 10_000).executed is False

    def test_outcome_flags_are_exclusive(self, make_normalized):
        be_win = make_normalized(outcome=OUTCOME_WIN, break_even=True)
        assert be_win.is_be_win
        assert not be_win.is_win
        assert not be_win.is_loss
        assert be_win.r_multiple == 0.0

    def test_r_multiple(self, make_normalized):
        assert make_normalized(outcome=OUTCOME_WIN, risk_reward_ratio=3.0).r_multiple == 3.0
        assert make_normalized(outcome=OUTCOME_LOSE).r_multiple == -1.0


class TestMinuteOfDay:
    @pytest.mark.parametrize(
        "value,expected",
        [("09:30", 570), ("9:05", 545), ("17:00:30", 1020), ("00:00", 0), ("23:59", 1439)],
    )
    def test_parses_clock_times(self, value, expected):
        assert parse_minute_of_day(value) == expected

    @pytest.mark.parametrize("value", [None, "", "25:00", "10:75", "noon"])
    def test_rejects_invalid_times(self, value):
        assert parse_minute_of_day(value) is None


def test_chronological_orders_by_date_then_time(make_normalized):
    late = make_normalized(trade_date=date(2026, 3, 2), trade_time="15:00")
    early = make_normalized(trade_date=date(2026, 3, 2), trade_time="08:00")
    untimed = make_normalized(trade_date=date(2026, 3, 2))
    previous_day = make_normalized(trade_date=date(2026, 3, 1), trade_time="23:00")
    ordered = chronological([late, early, untimed, previous_day])
    assert ordered == [previous_day, untimed, early, late]


def test_normalize_trades_drops_unknown_outcomes(make_trade):
    trades = [make_trade(outcome=OUTCOME_WIN), make_trade(outcome=None), make_trade(outcome="Scratch")]
    normalized = normalize_trades(trades, 10_000)
    assert [trade.outcome for trade in normalized] == [OUTCOME_WIN]


def test_optional_labels_are_trimmed(make_trade):
    trade = normalize_trade(make_trade(news_name="  NFP ", trend=""), 10_000)
    assert trade.news_name == "NFP"
    assert trade.trend is None
