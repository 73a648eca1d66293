"""Instrument conventions."""

from setup_backtest.instruments.classifier import (
    FX_CONTRACT_SIZE,
    AssetType,
    classify,
    is_jpy_quoted,
    pip_multiplier,
    pip_size,
)
from setup_backtest.instruments.symbols import (
    PROVIDER_SYMBOLS,
    clean_instrument,
    is_supported,
    map_to_provider_symbol,
)

__all__ = [
    "AssetType",
    "FX_CONTRACT_SIZE",
    "PROVIDER_SYMBOLS",
    "classify",
    "clean_instrument",
    "is_jpy_quoted",
    "is_supported",
    "map_to_provider_symbol",
    "pip_multiplier",
    "pip_size",
]
