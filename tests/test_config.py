"""Tests for app and account configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from journal_stats.config.accounts import (
    DEFAULT_MODE,
    load_accounts_config,
    normalize_mode,
    resolve_account_context,
    resolve_data_path,
)
from journal_stats.config.app_config import default_analytics_settings, load_app_config

ACCOUNTS_TOML = """
default_account = "main"

[accounts.main]
account_id = "acc-1"
mode = "live"
balance = 25000
currency = "USD"
data_dir = "data/main"

[accounts.practice]
mode = "Backtesting"
account_balance = "5000"
active = false
"""


@pytest.fixture
def accounts_path(tmp_path):
    path = tmp_path / "accounts.toml"
    path.write_text(ACCOUNTS_TOML, encoding="utf-8")
    return path


class TestAppConfig:
    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_app_config(tmp_path / "missing.toml")
        assert config.app.db_path == Path("data/journal.sqlite")
        assert config.app.port == 8000
        assert config.analytics == default_analytics_settings()

    def test_reads_sections(self, tmp_path):
        path = tmp_path / "app.toml"
        path.write_text(
            "[app]\n"
            'db_path = "x/journal.sqlite"\n'
            "port = 9000\n"
            "reload = true\n"
            "[analytics]\n"
            "default_risk_pct = 1.0\n"
            'grade_order = ["S", "A"]\n'
            "risk_levels = [0.5, 1.0]\n"
            "consistency_cv_cap = 2\n",
            encoding="utf-8",
        )
        config = load_app_config(path)
        assert config.app.db_path == Path("x/journal.sqlite")
        assert config.app.port == 9000
        assert config.app.reload is True
        assert config.analytics.default_risk_pct == 1.0
        assert config.analytics.default_rr == 2.0
        assert config.analytics.grade_order == ("S", "A")
        assert config.analytics.risk_levels == (0.5, 1.0)
        assert config.analytics.consistency_cv_cap == 2.0

    def test_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "env.toml"
        path.write_text("[app]\nport = 8123\n", encoding="utf-8")
        monkeypatch.setenv("JOURNAL_APP_CONFIG", str(path))
        assert load_app_config().app.port == 8123


class TestAccounts:
    def test_load_accounts(self, accounts_path):
        config = load_accounts_config(accounts_path)
        assert config.default_account == "main"
        practice = config.accounts["practice"]
        assert practice.mode == "backtesting"
        assert practice.balance == 5000.0
        assert practice.active is False
        assert practice.data_dir == Path("data/practice")

    def test_default_account_must_exist(self, tmp_path):
        path = tmp_path / "accounts.toml"
        path.write_text('default_account = "ghost"\n[accounts.main]\nmode = "live"\n', encoding="utf-8")
        with pytest.raises(ValueError):
            load_accounts_config(path)

    def test_resolve_default_account(self, accounts_path):
        context = resolve_account_context(env={}, config_path=accounts_path)
        assert context.name == "main"
        assert context.account_id == "acc-1"
        assert context.balance == 25_000.0
        assert context.settings.currency == "USD"

    def test_resolve_named_account_with_balance_override(self, accounts_path):
        env = {"JOURNAL_ACCOUNT_BALANCE": "1234.5"}
        context = resolve_account_context("practice", env=env, config_path=accounts_path)
        assert context.account_id == "practice"
        assert context.balance == 1234.5
        assert context.mode == "backtesting"

    def test_unknown_account(self, accounts_path):
        with pytest.raises(ValueError):
            resolve_account_context("nope", env={}, config_path=accounts_path)

    def test_environment_only_context(self, tmp_path):
        env = {
            "JOURNAL_DATA_DIR": str(tmp_path),
            "JOURNAL_ACCOUNT_ID": "env-acc",
            "JOURNAL_MODE": "demo",
            "JOURNAL_ACCOUNT_BALANCE": "700",
        }
        context = resolve_account_context(env=env, config_path=tmp_path / "missing.toml")
        assert context.name == "default"
        assert context.account_id == "env-acc"
        assert context.mode == "demo"
        assert context.balance == 700.0
        assert resolve_data_path(None, context, "trades.json") == tmp_path / "trades.json"
        assert resolve_data_path("other.json", context, "trades.json") == Path("other.json")


def test_normalize_mode():
    assert normalize_mode(None) == DEFAULT_MODE
    assert normalize_mode(" DEMO ") == "demo"
    with pytest.raises(ValueError):
        normalize_mode("paper")
