"""Shared fixtures for the journal statistics tests."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from journal_stats.metrics.normalize import NormalizedTrade, normalize_trade
from journal_stats.models import OUTCOME_WIN, Trade

BALANCE = 10_000.0

_counter = 0


def _next_id() -> str:
    global _counter
    _counter += 1
    return f"t-{_counter}"


@pytest.fixture
def make_trade():
    """Factory for raw Trade records with sensible defaults."""

    def _make(
        trade_date: date = date(2026, 3, 2),
        outcome: str = OUTCOME_WIN,
        **overrides,
    ) -> Trade:
        fields = {
            "trade_id": _next_id(),
            "trade_date": trade_date,
            "market": "EURUSD",
            "outcome": outcome,
        }
        fields.update(overrides)
        return Trade(**fields)

    return _make


@pytest.fixture
def make_normalized(make_trade):
    """Factory for NormalizedTrade values built through the real normalizer."""

    def _make(
        trade_date: date = date(2026, 3, 2),
        outcome: str = OUTCOME_WIN,
        balance: float = BALANCE,
        **overrides,
    ) -> NormalizedTrade:
        return normalize_trade(make_trade(trade_date, outcome, **overrides), balance)

    return _make


@pytest.fixture
def sample_records() -> list[dict]:
    """Journal rows as they appear in a JSON export."""
    return [
        {
            "id": "a1",
            "tradeDate": "2026-03-02",
            "tradeTime": "09:30",
            "market": "EURUSD",
            "direction": "Long",
            "tradeOutcome": "Win",
            "calculatedProfit": 200,
            "setupType": "OTE",
            "newsRelated": False,
            "executed": True,
        },
        {
            "id": "a2",
            "tradeDate": "2026-03-03",
            "tradeTime": "10:15",
            "market": "GBPUSD",
            "direction": "Short",
            "tradeOutcome": "Lose",
            "calculatedProfit": -100,
            "setupType": "OTE",
            "newsRelated": True,
            "executed": True,
        },
        {
            "id": "a3",
            "tradeDate": "2026-03-04",
            "tradeTime": "13:00",
            "market": "EURUSD",
            "direction": "Long",
            "tradeOutcome": "BE",
            "beFinalResult": "Win",
            "calculatedProfit": 0,
            "executed": True,
        },
        {
            "id": "a4",
            "tradeDate": "2026-03-05",
            "market": "EURUSD",
            "tradeOutcome": "Win",
            "calculatedProfit": 150,
            "executed": False,
        },
    ]


@pytest.fixture
def journal_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, sample_records) -> Path:
    """Point config lookups at a temp dir holding a trades.json export."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "trades.json").write_text(json.dumps({"trades": sample_records}), encoding="utf-8")

    app_toml = tmp_path / "app.toml"
    app_toml.write_text(f'[app]\ndb_path = "{(tmp_path / "missing.sqlite").as_posix()}"\n', encoding="utf-8")

    monkeypatch.setenv("JOURNAL_APP_CONFIG", str(app_toml))
    monkeypatch.setenv("JOURNAL_ACCOUNTS_CONFIG", str(tmp_path / "accounts.toml"))
    monkeypatch.setenv("JOURNAL_DATA_DIR", str(data_dir))
    monkeypatch.setenv("JOURNAL_ACCOUNT_BALANCE", str(BALANCE))
    for name in ("JOURNAL_ACCOUNT_NAME", "JOURNAL_ACCOUNT_ID", "JOURNAL_MODE", "JOURNAL_CURRENCY"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path
