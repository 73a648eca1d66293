"""Configuration models for reproducible backtest runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from setup_backtest.data.provider import DEFAULT_EXTEND_DAYS, DEFAULT_INTERVAL
from setup_backtest.data.twelvedata import API_KEY_ENV, DEFAULT_BASE_URL


@dataclass(frozen=True)
class SimulationSettings:
    position_size: float = 1.0
    leverage: float = 100.0
    extend_days: int = DEFAULT_EXTEND_DAYS
    interval: str = DEFAULT_INTERVAL
    isolate_group_errors: bool = False
    fetch_concurrency: int = 1


@dataclass(frozen=True)
class ProviderConfig:
    kind: str = "twelvedata"
    base_url: str = DEFAULT_BASE_URL
    api_key_env: str = API_KEY_ENV
    timeout_seconds: float = 10.0
    csv_root: Optional[str] = None
    cache_path: Optional[str] = None


@dataclass(frozen=True)
class MonitoringConfig:
    audit_log_path: str = "runtime/audit.log"
    log_level: str = "INFO"
    log_dir: Optional[str] = None


@dataclass(frozen=True)
class BacktestConfig:
    name: str
    version: str
    run_id_prefix: str
    simulation: SimulationSettings = SimulationSettings()
    provider: ProviderConfig = ProviderConfig()
    monitoring: MonitoringConfig = MonitoringConfig()
