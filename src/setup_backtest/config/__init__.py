"""Config loading and freezing."""

from setup_backtest.config.loader import (
    build_provider,
    compute_config_hash,
    freeze_config,
    load_config,
    serialize_config,
    verify_config_lock,
)
from setup_backtest.config.models import (
    BacktestConfig,
    MonitoringConfig,
    ProviderConfig,
    SimulationSettings,
)

__all__ = [
    "BacktestConfig",
    "MonitoringConfig",
    "ProviderConfig",
    "SimulationSettings",
    "build_provider",
    "compute_config_hash",
    "freeze_config",
    "load_config",
    "serialize_config",
    "verify_config_lock",
]
