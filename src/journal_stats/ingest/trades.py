from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Mapping

from journal_stats.models import DIRECTION_LONG, DIRECTION_SHORT, OUTCOME_LOSE, OUTCOME_WIN, Trade

_WIN_VALUES = {"WIN", "W", "WON", "PROFIT"}
_LOSE_VALUES = {"LOSE", "LOSS", "L", "LOST"}
_BE_VALUES = {"BE", "BREAKEVEN", "BREAK EVEN", "BREAK-EVEN"}
_TRUE_VALUES = {"TRUE", "T", "YES", "Y", "1"}
_FALSE_VALUES = {"FALSE", "F", "NO", "N", "0"}


@dataclass(frozen=True)
class IngestResult:
    trades: list[Trade]
    skipped: int = 0


def load_trades(
    path: str | Path, *, account_id: str | None = None, mode: str | None = None
) -> IngestResult:
    source_path = Path(path)
    suffix = source_path.suffix.lower()
    if suffix == ".json":
        return _load_trades_json(source_path, account_id=account_id, mode=mode)
    if suffix in {".csv", ".tsv"}:
        return _load_trades_csv(
            source_path,
            delimiter="\t" if suffix == ".tsv" else ",",
            account_id=account_id,
            mode=mode,
        )
    raise ValueError(f"Unsupported file type: {source_path.suffix}")


def load_trades_payload(
    payload: Any, *, account_id: str | None = None, mode: str | None = None
) -> IngestResult:
    records = _extract_records(payload)
    trades, skipped = normalize_records(records, account_id=account_id, mode=mode)
    return IngestResult(trades=trades, skipped=skipped)


def _load_trades_json(path: Path, *, account_id: str | None, mode: str | None) -> IngestResult:
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    return load_trades_payload(payload, account_id=account_id, mode=mode)


def _load_trades_csv(
    path: Path, delimiter: str, *, account_id: str | None, mode: str | None
) -> IngestResult:
    with path.open("r", encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle, delimiter=delimiter)
        trades, skipped = normalize_records(reader, account_id=account_id, mode=mode)
    return IngestResult(trades=trades, skipped=skipped)


def _extract_records(payload: Any) -> Iterable[Mapping[str, Any]]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("trades", "data", "result"):
            if key in payload and isinstance(payload[key], list):
                return payload[key]
    raise ValueError("Unsupported JSON format for trades payload")


def normalize_records(
    records: Iterable[Mapping[str, Any]],
    *,
    account_id: str | None = None,
    mode: str | None = None,
) -> tuple[list[Trade], int]:
    trades: list[Trade] = []
    skipped = 0
    for index, raw in enumerate(records):
        if not isinstance(raw, Mapping):
            skipped += 1
            continue
        try:
            trades.append(normalize_trade_record(raw, index=index, account_id=account_id, mode=mode))
        except ValueError:
            skipped += 1
    return trades, skipped


def normalize_trade_record(
    raw: Mapping[str, Any],
    *,
    index: int = 0,
    account_id: str | None = None,
    mode: str | None = None,
) -> Trade:
    trade_date, time_from_date = _parse_trade_date(_pick(raw, "trade_date", "tradeDate", "date"))
    trade_time = _pick(raw, "trade_time", "tradeTime", "time")
    break_even = _to_bool(_pick(raw, "break_even", "breakEven", "be"))
    outcome_raw = _pick(raw, "trade_outcome", "tradeOutcome", "outcome", "result")
    outcome, outcome_is_be = _normalize_outcome(outcome_raw, _pick(raw, "be_final_result", "beFinalResult"))
    if outcome_is_be:
        break_even = True

    trade_id = _pick(raw, "id", "trade_id", "tradeId")
    resolved_account = account_id or _pick(raw, "account_id", "accountId")

    return Trade(
        trade_id=str(trade_id) if trade_id is not None else f"row-{index}",
        trade_date=trade_date,
        trade_time=str(trade_time).strip() if trade_time is not None else time_from_date,
        market=_to_str(_pick(raw, "market", "symbol", "instrument")),
        direction=_normalize_direction(_pick(raw, "direction", "side")),
        outcome=outcome,
        break_even=break_even,
        partials_taken=_to_bool(_pick(raw, "partials_taken", "partialsTaken", "partials")),
        risk_per_trade=_to_float(_pick(raw, "risk_per_trade", "riskPerTrade", "risk")),
        risk_reward_ratio=_to_float(_pick(raw, "risk_reward_ratio", "riskRewardRatio", "rr")),
        calculated_profit=_to_float(_pick(raw, "calculated_profit", "calculatedProfit", "profit")),
        pnl_percentage=_to_float(_pick(raw, "pnl_percentage", "pnlPercentage", "pnl_pct")),
        setup_type=_to_str(_pick(raw, "setup_type", "setupType", "setup")),
        liquidity=_to_str(_pick(raw, "liquidity", "liquidity_taken")),
        local_high_low=_to_bool(_pick(raw, "local_high_low", "localHighLow")),
        mss=_to_str(_pick(raw, "mss", "MSS")),
        news_related=_to_bool(_pick(raw, "news_related", "newsRelated", "news")),
        news_name=_to_str(_pick(raw, "news_name", "newsName", "news_event")),
        sl_size=_to_float(_pick(raw, "sl_size", "slSize", "stop_loss_size")),
        launch_hour=_to_bool(_pick(raw, "launch_hour", "launchHour")),
        executed=_to_bool(_pick(raw, "executed")),
        reentry=_to_bool(_pick(raw, "reentry", "reEntry")),
        trend=_to_str(_pick(raw, "trend")),
        evaluation=_to_str(_pick(raw, "evaluation", "grade")),
        strategy_id=_to_str(_pick(raw, "strategy_id", "strategyId")),
        account_id=str(resolved_account) if resolved_account is not None else None,
        mode=mode or _to_str(_pick(raw, "mode")),
        notes=_to_str(_pick(raw, "notes")),
        raw=dict(raw),
    )


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] not in (None, ""):
            return raw[key]
    return None


def _normalize_outcome(value: Any, be_final: Any) -> tuple[str, bool]:
    if value is None:
        raise ValueError("Missing trade outcome")
    text = str(value).strip().upper()
    if text in _WIN_VALUES:
        return OUTCOME_WIN, False
    if text in _LOSE_VALUES:
        return OUTCOME_LOSE, False
    if text in _BE_VALUES and be_final is not None:
        final, _ = _normalize_outcome(be_final, None)
        return final, True
    raise ValueError(f"Unknown trade outcome: {value}")


def _normalize_direction(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip().upper()
    if text in {"LONG", "BUY", "L"}:
        return DIRECTION_LONG
    if text in {"SHORT", "SELL", "S"}:
        return DIRECTION_SHORT
    return str(value).strip() or None


def _parse_trade_date(value: Any) -> tuple[date, str | None]:
    if value is None:
        raise ValueError("Missing trade date")
    if isinstance(value, datetime):
        return value.date(), value.strftime("%H:%M")
    if isinstance(value, date):
        return value, None
    text = str(value).strip()
    if len(text) == 10:
        try:
            return date.fromisoformat(text), None
        except ValueError as exc:
            raise ValueError("Unsupported trade date format") from exc
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValueError("Unsupported trade date format") from exc
    return parsed.date(), parsed.strftime("%H:%M")


def _to_bool(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().upper()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


def _to_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
