from __future__ import annotations

import sqlite3
from datetime import date
from typing import Any

from journal_stats.ingest.trades import IngestResult, normalize_records
from journal_stats.storage.sqlite_store import trades_table


def load_trades(
    conn: sqlite3.Connection,
    *,
    account_id: str | None,
    mode: str,
    start_date: date | None = None,
    end_date: date | None = None,
) -> IngestResult:
    rows = _fetch(conn, trades_table(mode), account_id, start_date=start_date, end_date=end_date)
    trades, skipped = normalize_records((dict(row) for row in rows), account_id=account_id, mode=mode)
    return IngestResult(trades=trades, skipped=skipped)


def _fetch(
    conn: sqlite3.Connection,
    table: str,
    account_id: str | None,
    *,
    start_date: date | None,
    end_date: date | None,
) -> list[sqlite3.Row]:
    clauses, params = _account_clause(account_id)
    if start_date is not None:
        clauses.append("trade_date >= ?")
        params.append(start_date.isoformat())
    if end_date is not None:
        clauses.append("trade_date <= ?")
        params.append(end_date.isoformat())
    query = f"SELECT * FROM {table} WHERE {' AND '.join(clauses)} ORDER BY trade_date DESC"
    return conn.execute(query, params).fetchall()


def _account_clause(account_id: str | None) -> tuple[list[str], list[Any]]:
    if account_id is None:
        return ["account_id IS NULL"], []
    return ["account_id = ?"], [account_id]
