from __future__ import annotations

import sqlite3
from pathlib import Path

from journal_stats.config.accounts import TRADING_MODES

TRADE_COLUMNS = (
    "id",
    "account_id",
    "strategy_id",
    "trade_date",
    "trade_time",
    "market",
    "direction",
    "trade_outcome",
    "break_even",
    "partials_taken",
    "risk_per_trade",
    "risk_reward_ratio",
    "calculated_profit",
    "pnl_percentage",
    "setup_type",
    "liquidity",
    "local_high_low",
    "mss",
    "news_related",
    "news_name",
    "sl_size",
    "launch_hour",
    "executed",
    "reentry",
    "trend",
    "evaluation",
    "notes",
)


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


def trades_table(mode: str) -> str:
    if mode not in TRADING_MODES:
        raise ValueError(f"Unknown trading mode '{mode}'.")
    return f"{mode}_trades"


def init_db(conn: sqlite3.Connection) -> None:
    for mode in TRADING_MODES:
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {trades_table(mode)} (
                id TEXT PRIMARY KEY,
                account_id TEXT,
                strategy_id TEXT,
                trade_date TEXT NOT NULL,
                trade_time TEXT,
                market TEXT,
                direction TEXT,
                trade_outcome TEXT NOT NULL,
                break_even INTEGER,
                partials_taken INTEGER,
                risk_per_trade REAL,
                risk_reward_ratio REAL,
                calculated_profit REAL,
                pnl_percentage REAL,
                setup_type TEXT,
                liquidity TEXT,
                local_high_low INTEGER,
                mss TEXT,
                news_related INTEGER,
                news_name TEXT,
                sl_size REAL,
                launch_hour INTEGER,
                executed INTEGER,
                reentry INTEGER,
                trend TEXT,
                evaluation TEXT,
                notes TEXT
            )
            """
        )
        conn.execute(
            f"CREATE INDEX IF NOT EXISTS idx_{mode}_trades_account_date "
            f"ON {trades_table(mode)} (account_id, trade_date)"
        )
    conn.commit()
