from __future__ import annotations

from pathlib import Path

from journal_stats.config.accounts import AccountContext, resolve_data_path
from journal_stats.ingest.trades import IngestResult, load_trades
from journal_stats.storage import sqlite_reader
from journal_stats.storage.sqlite_store import connect

TRADE_FILENAMES = ("trades.json", "trades.csv", "trades.tsv")


def resolve_trades_path(context: AccountContext) -> Path | None:
    for filename in TRADE_FILENAMES:
        path = resolve_data_path(None, context, filename)
        if path.exists():
            return path
    return None


def load_account_trades(
    context: AccountContext,
    db_path: Path,
    *,
    trades_path: Path | None = None,
) -> IngestResult:
    """Load the journal for one account.

    An explicit ``trades_path`` wins. Otherwise the SQLite database is used
    when it exists, then the first trades file found in the account data dir.
    Raises ``FileNotFoundError`` when there is nothing to read.
    """
    if trades_path is not None:
        if not trades_path.exists():
            raise FileNotFoundError(f"Trades file not found: {trades_path}")
        return load_trades(trades_path, account_id=context.account_id, mode=context.mode)

    if db_path.exists():
        conn = connect(db_path)
        try:
            return sqlite_reader.load_trades(conn, account_id=context.account_id, mode=context.mode)
        finally:
            conn.close()

    path = resolve_trades_path(context)
    if path is None:
        raise FileNotFoundError(f"No trade data found for account '{context.name}'.")
    return load_trades(path, account_id=context.account_id, mode=context.mode)
