from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping

OUTCOME_WIN = "Win"
OUTCOME_LOSE = "Lose"
OUTCOMES = (OUTCOME_WIN, OUTCOME_LOSE)

DIRECTION_LONG = "Long"
DIRECTION_SHORT = "Short"


@dataclass
class Trade:
    trade_id: str
    trade_date: date
    market: str | None
    outcome: str
    trade_time: str | None = None
    direction: str | None = None
    break_even: bool | None = None
    partials_taken: bool | None = None
    risk_per_trade: float | None = None
    risk_reward_ratio: float | None = None
    calculated_profit: float | None = None
    pnl_percentage: float | None = None
    setup_type: str | None = None
    liquidity: str | None = None
    local_high_low: bool | None = None
    mss: str | None = None
    news_related: bool | None = None
    news_name: str | None = None
    sl_size: float | None = None
    launch_hour: bool | None = None
    executed: bool | None = None
    reentry: bool | None = None
    trend: str | None = None
    evaluation: str | None = None
    strategy_id: str | None = None
    account_id: str | None = None
    mode: str | None = None
    notes: str | None = None
    raw: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AccountSettings:
    name: str
    account_id: str | None
    mode: str
    balance: float
    currency: str | None = None
