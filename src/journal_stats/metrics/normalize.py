from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable

from journal_stats.models import OUTCOME_LOSE, OUTCOME_WIN, OUTCOMES, Trade

DEFAULT_RISK_PCT = 0.5
DEFAULT_RR = 2.0
UNSPECIFIED = "Unspecified"

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{1,2})(?::\d{1,2}(?:\.\d+)?)?$")


@dataclass(frozen=True)
class NormalizedTrade:
    trade_id: str
    trade_date: date
    minute_of_day: int | None
    market: str
    direction: str
    outcome: str
    break_even: bool
    partials_taken: bool
    executed: bool
    risk_pct: float
    risk_reward: float
    profit: float
    pnl_pct: float
    setup: str
    liquidity: str
    mss: str
    news_related: bool | None
    news_name: str | None
    local_high_low: bool
    launch_hour: bool
    reentry: bool
    trend: str | None
    sl_size: float
    evaluation: str
    strategy_id: str | None
    risk_per_trade: float | None

    @property
    def is_win(self) -> bool:
        return self.outcome == OUTCOME_WIN and not self.break_even

    @property
    def is_loss(self) -> bool:
        return self.outcome == OUTCOME_LOSE and not self.break_even

    @property
    def is_be_win(self) -> bool:
        return self.outcome == OUTCOME_WIN and self.break_even

    @property
    def is_be_loss(self) -> bool:
        return self.outcome == OUTCOME_LOSE and self.break_even

    @property
    def r_multiple(self) -> float:
        if self.break_even:
            return 0.0
        if self.outcome == OUTCOME_WIN:
            return self.risk_reward
        return -1.0


def normalize_trades(
    trades: Iterable[Trade],
    balance: float,
    *,
    default_risk_pct: float = DEFAULT_RISK_PCT,
    default_rr: float = DEFAULT_RR,
) -> list[NormalizedTrade]:
    """Normalize every trade with a Win or Lose outcome; others are dropped."""
    return [
        normalize_trade(trade, balance, default_risk_pct=default_risk_pct, default_rr=default_rr)
        for trade in trades
        if has_known_outcome(trade)
    ]


def has_known_outcome(trade: Trade | NormalizedTrade) -> bool:
    return trade.outcome in OUTCOMES


def normalize_trade(
    trade: Trade,
    balance: float,
    *,
    default_risk_pct: float = DEFAULT_RISK_PCT,
    default_rr: float = DEFAULT_RR,
) -> NormalizedTrade:
    """Apply every field fallback in one place.

    Numeric gaps become 0, categorical gaps become ``UNSPECIFIED`` and
    ``executed`` defaults to True. Risk % and R:R fall back to the named
    defaults because the legacy profit derivation needs them.
    """
    balance = _number(balance)
    break_even = bool(trade.break_even)
    partials = bool(trade.partials_taken)
    risk_pct = _number(trade.risk_per_trade, default=default_risk_pct)
    risk_reward = _number(trade.risk_reward_ratio, default=default_rr)

    if trade.calculated_profit is not None:
        profit = _number(trade.calculated_profit)
    else:
        profit = legacy_profit(trade.outcome, break_even, partials, balance, risk_pct, risk_reward)

    if trade.pnl_percentage is not None:
        pnl_pct = _number(trade.pnl_percentage)
    elif balance > 0:
        pnl_pct = profit / balance * 100.0
    else:
        pnl_pct = 0.0

    return NormalizedTrade(
        trade_id=trade.trade_id,
        trade_date=trade.trade_date,
        minute_of_day=parse_minute_of_day(trade.trade_time),
        market=_label(trade.market),
        direction=_label(trade.direction),
        outcome=trade.outcome,
        break_even=break_even,
        partials_taken=partials,
        executed=trade.executed is not False,
        risk_pct=risk_pct,
        risk_reward=risk_reward,
        profit=profit,
        pnl_pct=pnl_pct,
        setup=_label(trade.setup_type),
        liquidity=_label(trade.liquidity),
        mss=_label(trade.mss),
        news_related=trade.news_related,
        news_name=_optional_label(trade.news_name),
        local_high_low=bool(trade.local_high_low),
        launch_hour=bool(trade.launch_hour),
        reentry=bool(trade.reentry),
        trend=_optional_label(trade.trend),
        sl_size=_number(trade.sl_size),
        evaluation=_label(trade.evaluation),
        strategy_id=trade.strategy_id,
        risk_per_trade=trade.risk_per_trade,
    )


def legacy_profit(
    outcome: str,
    break_even: bool,
    partials_taken: bool,
    balance: float,
    risk_pct: float,
    risk_reward: float,
) -> float:
    risk_amount = balance * (risk_pct / 100.0)
    if break_even:
        # Partials lock in the planned reward; a plain BE closes flat.
        return risk_amount * risk_reward if partials_taken else 0.0
    if outcome == OUTCOME_WIN:
        return risk_amount * risk_reward
    if outcome == OUTCOME_LOSE:
        return -risk_amount
    return 0.0


def parse_minute_of_day(value: str | None) -> int | None:
    if value is None:
        return None
    match = _TIME_RE.match(str(value).strip())
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour * 60 + minute


def chronological(trades: Iterable[NormalizedTrade]) -> list[NormalizedTrade]:
    return sorted(
        trades,
        key=lambda trade: (
            trade.trade_date,
            trade.minute_of_day if trade.minute_of_day is not None else -1,
        ),
    )


def _label(value: object) -> str:
    if value is None:
        return UNSPECIFIED
    text = str(value).strip()
    return text or UNSPECIFIED


def _optional_label(value: object) -> str | None:
    if value is None:
        return None
    return str(value).strip() or None


def _number(value: object, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if number != number:
        return default
    return number
