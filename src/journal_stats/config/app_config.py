from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - Python <3.11
    import tomli as tomllib

from journal_stats.metrics.categories import DEFAULT_GRADE_ORDER, DEFAULT_RISK_LEVELS
from journal_stats.metrics.macro import CONSISTENCY_CV_CAP
from journal_stats.metrics.normalize import DEFAULT_RISK_PCT, DEFAULT_RR


@dataclass(frozen=True)
class AppSettings:
    db_path: Path
    host: str
    port: int
    reload: bool


@dataclass(frozen=True)
class AnalyticsSettings:
    default_risk_pct: float
    default_rr: float
    grade_order: tuple[str, ...]
    risk_levels: tuple[float, ...]
    consistency_cv_cap: float


@dataclass(frozen=True)
class AppConfig:
    app: AppSettings
    analytics: AnalyticsSettings


def default_analytics_settings() -> AnalyticsSettings:
    return AnalyticsSettings(
        default_risk_pct=DEFAULT_RISK_PCT,
        default_rr=DEFAULT_RR,
        grade_order=tuple(DEFAULT_GRADE_ORDER),
        risk_levels=tuple(DEFAULT_RISK_LEVELS),
        consistency_cv_cap=CONSISTENCY_CV_CAP,
    )


def load_app_config(path: Path | None = None) -> AppConfig:
    config_path = path or Path(os.environ.get("JOURNAL_APP_CONFIG", "config/app.toml"))
    raw: Mapping[str, Any] = {}
    if config_path.exists():
        raw = tomllib.loads(config_path.read_text(encoding="utf-8"))

    app_raw = _section(raw, "app")
    analytics_raw = _section(raw, "analytics")
    defaults = default_analytics_settings()

    app = AppSettings(
        db_path=Path(app_raw.get("db_path", "data/journal.sqlite")),
        host=str(app_raw.get("host", "127.0.0.1")),
        port=int(app_raw.get("port", 8000)),
        reload=bool(app_raw.get("reload", False)),
    )

    analytics = AnalyticsSettings(
        default_risk_pct=_float_or(analytics_raw.get("default_risk_pct"), defaults.default_risk_pct),
        default_rr=_float_or(analytics_raw.get("default_rr"), defaults.default_rr),
        grade_order=_str_tuple(analytics_raw.get("grade_order")) or defaults.grade_order,
        risk_levels=tuple(_float_list(analytics_raw.get("risk_levels"))) or defaults.risk_levels,
        consistency_cv_cap=_float_or(analytics_raw.get("consistency_cv_cap"), defaults.consistency_cv_cap),
    )

    return AppConfig(app=app, analytics=analytics)


def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if isinstance(value, Mapping):
        return value
    return {}


def _float_or(value: Any, default: float) -> float:
    if value in (None, ""):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _float_list(value: Any) -> list[float]:
    if not isinstance(value, list):
        return []
    output: list[float] = []
    for item in value:
        try:
            output.append(float(item))
        except (TypeError, ValueError):
            continue
    return output


def _str_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(item).strip() for item in value if str(item).strip())
