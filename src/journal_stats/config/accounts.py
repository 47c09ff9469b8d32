from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - Python <3.11
    import tomli as tomllib

from journal_stats.models import AccountSettings

TRADING_MODES = ("live", "backtesting", "demo")
DEFAULT_MODE = "live"
DEFAULT_BALANCE = 0.0


@dataclass(frozen=True)
class AccountConfig:
    name: str
    account_id: str | None
    mode: str
    balance: float
    currency: str | None
    data_dir: Path
    active: bool


@dataclass(frozen=True)
class AccountsConfig:
    default_account: str | None
    accounts: dict[str, AccountConfig]


@dataclass(frozen=True)
class AccountContext:
    name: str
    account_id: str | None
    mode: str
    balance: float
    currency: str | None
    data_dir: Path
    active: bool

    @property
    def settings(self) -> AccountSettings:
        return AccountSettings(
            name=self.name,
            account_id=self.account_id,
            mode=self.mode,
            balance=self.balance,
            currency=self.currency,
        )


def normalize_mode(value: object) -> str:
    mode = str(value or DEFAULT_MODE).strip().lower() or DEFAULT_MODE
    if mode not in TRADING_MODES:
        raise ValueError(f"Unknown trading mode '{value}'.")
    return mode


def load_accounts_config(path: Path) -> AccountsConfig:
    if not path.exists():
        return AccountsConfig(default_account=None, accounts={})
    raw = tomllib.loads(path.read_text(encoding="utf-8"))
    default_account = raw.get("default_account")
    accounts_block = raw.get("accounts", {}) if isinstance(raw, dict) else {}
    accounts: dict[str, AccountConfig] = {}
    for name, cfg in accounts_block.items():
        if not isinstance(cfg, Mapping):
            continue
        account_id = cfg.get("account_id") or cfg.get("accountId")
        balance = cfg.get("balance") if "balance" in cfg else cfg.get("account_balance")
        data_dir = cfg.get("data_dir") or cfg.get("dataDir") or f"data/{name}"
        currency = cfg.get("currency")
        active_raw = cfg.get("active")
        accounts[name] = AccountConfig(
            name=name,
            account_id=str(account_id).strip() if account_id else None,
            mode=normalize_mode(cfg.get("mode")),
            balance=_parse_optional_float(balance) or DEFAULT_BALANCE,
            currency=str(currency) if currency else None,
            data_dir=Path(data_dir),
            active=True if active_raw is None else bool(active_raw),
        )
    if default_account and default_account not in accounts:
        raise ValueError(f"Default account '{default_account}' not found in accounts config.")
    return AccountsConfig(default_account=default_account, accounts=accounts)


def resolve_account_context(
    account_name: str | None = None,
    env: Mapping[str, str] | None = None,
    config_path: Path | None = None,
) -> AccountContext:
    env = os.environ if env is None else env
    config_path = Path(
        config_path
        or env.get("JOURNAL_ACCOUNTS_CONFIG", "config/accounts.toml")
    )
    config = load_accounts_config(config_path)
    resolved_name = (
        account_name
        or env.get("JOURNAL_ACCOUNT_NAME")
        or config.default_account
        or (next(iter(config.accounts)) if config.accounts else "default")
    )
    balance_override = _parse_optional_float(env.get("JOURNAL_ACCOUNT_BALANCE"))
    if config.accounts:
        if resolved_name not in config.accounts:
            raise ValueError(f"Unknown account '{resolved_name}'.")
        account = config.accounts[resolved_name]
        return AccountContext(
            name=account.name,
            account_id=account.account_id or account.name,
            mode=account.mode,
            balance=balance_override if balance_override is not None else account.balance,
            currency=account.currency,
            data_dir=account.data_dir,
            active=account.active,
        )
    return AccountContext(
        name=resolved_name,
        account_id=env.get("JOURNAL_ACCOUNT_ID") or None,
        mode=normalize_mode(env.get("JOURNAL_MODE")),
        balance=balance_override if balance_override is not None else DEFAULT_BALANCE,
        currency=env.get("JOURNAL_CURRENCY") or None,
        data_dir=Path(env.get("JOURNAL_DATA_DIR", "data")),
        active=True,
    )


def resolve_data_path(
    override: str | Path | None, context: AccountContext, filename: str
) -> Path:
    if override:
        return Path(override)
    return context.data_dir / filename


def _parse_optional_float(value: object) -> float | None:
    if value is None:
        return None
    if not isinstance(value, (str, int, float)):
        return None
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        value = stripped
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
