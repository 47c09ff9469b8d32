from __future__ import annotations

import os
import sqlite3
from datetime import date, datetime
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from jinja2 import Undefined

from journal_stats.config.accounts import AccountContext, resolve_account_context
from journal_stats.config.app_config import AppConfig, load_app_config
from journal_stats.dashboard import (
    DashboardData,
    compute_dashboard,
    dashboard_to_dict,
    monthly_to_dict,
    trade_to_dict,
)
from journal_stats.ingest.sources import load_account_trades
from journal_stats.metrics.filters import PRESETS, DashboardQuery, build_query, is_custom_range
from journal_stats.models import Trade

APP_ROOT = Path(__file__).resolve().parent
TEMPLATES = Jinja2Templates(directory=str(APP_ROOT / "templates"))

app = FastAPI(title="Trade Journal Analytics")


@app.get("/", response_class=HTMLResponse)
def dashboard(request: Request) -> HTMLResponse:
    data = _compute(request)
    page = {
        "request": request,
        "page": "dashboard",
        "data": dashboard_to_dict(data),
        "presets": PRESETS,
        "custom_range": is_custom_range(data.query.date_range),
    }
    return TEMPLATES.TemplateResponse(request, "dashboard.html", page)


@app.get("/api/dashboard")
def dashboard_api(request: Request) -> dict[str, Any]:
    data = _compute(request)
    return dashboard_to_dict(data)


@app.get("/api/monthly")
def monthly_api(request: Request) -> dict[str, Any]:
    data = _compute(request)
    return monthly_to_dict(data.monthly)


@app.get("/api/trades")
def trades_api(request: Request) -> list[dict[str, Any]]:
    data = _compute(request)
    return [trade_to_dict(trade) for trade in data.trades]


def _compute(request: Request) -> DashboardData:
    app_config = load_app_config()
    context = _resolve_context(request)
    query = _parse_query(request)
    trades = _load_account_trades(context, app_config)
    return compute_dashboard(trades, query, context.settings, app_config.analytics)


def _resolve_context(request: Request) -> AccountContext:
    account_name = (request.query_params.get("account") or "").strip() or None
    try:
        return resolve_account_context(account_name, env=os.environ)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def _parse_query(request: Request, today: date | None = None) -> DashboardQuery:
    params = request.query_params
    return build_query(
        start=_parse_date(params.get("start")),
        end=_parse_date(params.get("end")),
        preset=params.get("preset"),
        year=_parse_int(params.get("year")),
        market=params.get("market"),
        strategy_id=params.get("strategy"),
        today=today,
    )


def _load_account_trades(context: AccountContext, app_config: AppConfig) -> list[Trade]:
    try:
        result = load_account_trades(context, app_config.app.db_path)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (ValueError, sqlite3.Error) as exc:
        raise HTTPException(status_code=422, detail=f"Unreadable trade data: {exc}") from exc
    return result.trades


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def _parse_int(value: str | None) -> int | None:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def money_filter(value: float | None) -> str:
    if value is None or isinstance(value, Undefined):
        return "n/a"
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return "n/a"
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def percent_filter(value: float | None) -> str:
    if value is None or isinstance(value, Undefined):
        return "n/a"
    return f"{float(value):.1f}%"


TEMPLATES.env.filters.update(
    {
        "money": money_filter,
        "percent": percent_filter,
    }
)


def main() -> None:
    import uvicorn

    app_config = load_app_config()
    uvicorn.run(
        "journal_stats.web.app:app",
        host=app_config.app.host,
        port=app_config.app.port,
        reload=app_config.app.reload,
    )


if __name__ == "__main__":
    main()
