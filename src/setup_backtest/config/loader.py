"""Load and freeze configuration files."""

from __future__ import annotations

import hashlib
import json
import os
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import yaml

from setup_backtest.config.models import (
    BacktestConfig,
    MonitoringConfig,
    ProviderConfig,
    SimulationSettings,
)
from setup_backtest.data.cache import CachedPriceProvider, PriceHistoryCache
from setup_backtest.data.offline import CsvPriceProvider
from setup_backtest.data.provider import PriceSeriesProvider
from setup_backtest.data.twelvedata import TwelveDataProvider

PROVIDER_KINDS = ("twelvedata", "csv")


def load_config(path: str | Path) -> BacktestConfig:
    path = Path(path)
    data = _load_yaml(path)

    name = _require(data, "name")
    version = str(_require(data, "version"))
    run_id_prefix = data.get("run_id_prefix", name)

    return BacktestConfig(
        name=name,
        version=version,
        run_id_prefix=run_id_prefix,
        simulation=_parse_simulation(_section(data, "simulation")),
        provider=_parse_provider(_section(data, "provider")),
        monitoring=_parse_monitoring(_section(data, "monitoring")),
    )


def compute_config_hash(path: str | Path) -> str:
    path = Path(path)
    content = path.read_bytes()
    return hashlib.sha256(content).hexdigest()


def _lock_path_for(path: Path, lock_path: Optional[str | Path]) -> Path:
    if lock_path is None:
        return path.with_suffix(path.suffix + ".lock.json")
    return Path(lock_path)


def freeze_config(path: str | Path, lock_path: Optional[str | Path] = None) -> Path:
    path = Path(path)
    lock_path = _lock_path_for(path, lock_path)
    payload = {
        "config_path": str(path),
        "config_hash": compute_config_hash(path),
        "frozen_at_utc": datetime.now(timezone.utc).isoformat(),
    }
    lock_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return lock_path


def verify_config_lock(path: str | Path, lock_path: Optional[str | Path] = None) -> bool:
    path = Path(path)
    lock_path = _lock_path_for(path, lock_path)
    if not lock_path.exists():
        return False
    payload = json.loads(lock_path.read_text(encoding="utf-8"))
    return payload.get("config_hash") == compute_config_hash(path)


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Config must be a mapping")
    return data


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise ValueError(f"Missing required config key: {key}")
    return data[key]


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section {key} must be a mapping")
    return section


def _parse_simulation(data: dict[str, Any]) -> SimulationSettings:
    defaults = SimulationSettings()
    settings = SimulationSettings(
        position_size=float(data.get("position_size", defaults.position_size)),
        leverage=float(data.get("leverage", defaults.leverage)),
        extend_days=int(data.get("extend_days", defaults.extend_days)),
        interval=str(data.get("interval", defaults.interval)),
        isolate_group_errors=bool(data.get("isolate_group_errors", defaults.isolate_group_errors)),
        fetch_concurrency=int(data.get("fetch_concurrency", defaults.fetch_concurrency)),
    )
    if settings.leverage <= 0:
        raise ValueError(f"Invalid leverage: {settings.leverage}")
    if settings.extend_days < 0:
        raise ValueError(f"Invalid extend_days: {settings.extend_days}")
    if settings.fetch_concurrency < 1:
        raise ValueError(f"Invalid fetch_concurrency: {settings.fetch_concurrency}")
    return settings


def _parse_provider(data: dict[str, Any]) -> ProviderConfig:
    defaults = ProviderConfig()
    kind = str(data.get("kind", defaults.kind)).lower()
    if kind not in PROVIDER_KINDS:
        raise ValueError(f"Invalid kind: {kind}")
    csv_root = data.get("csv_root")
    if kind == "csv" and not csv_root:
        raise ValueError("Missing required config key: csv_root")
    cache_path = data.get("cache_path")
    return ProviderConfig(
        kind=kind,
        base_url=str(data.get("base_url", defaults.base_url)),
        api_key_env=str(data.get("api_key_env", defaults.api_key_env)),
        timeout_seconds=float(data.get("timeout_seconds", defaults.timeout_seconds)),
        csv_root=str(csv_root) if csv_root else None,
        cache_path=str(cache_path) if cache_path else None,
    )


def _parse_monitoring(data: dict[str, Any]) -> MonitoringConfig:
    log_dir = data.get("log_dir")
    return MonitoringConfig(
        audit_log_path=str(data.get("audit_log_path", "runtime/audit.log")),
        log_level=str(data.get("log_level", "INFO")).upper(),
        log_dir=str(log_dir) if log_dir else None,
    )


def serialize_config(config: BacktestConfig) -> dict[str, Any]:
    return asdict(config)


def build_provider(config: BacktestConfig) -> PriceSeriesProvider:
    """Construct the configured provider, wrapped in the price cache when one is set."""
    settings = config.provider
    if settings.kind == "csv":
        provider: PriceSeriesProvider = CsvPriceProvider(settings.csv_root)
    else:
        provider = TwelveDataProvider(
            api_key=os.getenv(settings.api_key_env, ""),
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
        )
    if settings.cache_path:
        provider = CachedPriceProvider(provider, PriceHistoryCache(settings.cache_path))
    return provider
