"""Instrument classification and pip conventions."""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional


class AssetType(str, Enum):
    FX = "fx"
    METAL = "metal"
    CRYPTO = "crypto"
    OTHER = "other"


FIAT_CODES = frozenset(
    {
        "AUD",
        "CAD",
        "CHF",
        "CNH",
        "CZK",
        "DKK",
        "EUR",
        "GBP",
        "HKD",
        "HUF",
        "JPY",
        "MXN",
        "NOK",
        "NZD",
        "PLN",
        "SEK",
        "SGD",
        "TRY",
        "USD",
        "ZAR",
    }
)
METAL_CODES = frozenset({"XAU", "XAG", "XPT", "XPD"})
CRYPTO_CODES = frozenset({"BTC", "ETH", "BNB", "SOL", "XRP", "XLM", "ADA", "DOGE", "LTC"})

METAL_NAMES = frozenset({"GOLD", "SILVER", "PLATINUM", "PALLADIUM"})
CRYPTO_NAMES = frozenset({"BITCOIN", "ETHEREUM", "STELLAR"})

FX_CONTRACT_SIZE = 100_000

_SEPARATORS = re.compile(r"[/_\-\s]+")


def _split_pair(symbol: str) -> Optional[tuple[str, str]]:
    cleaned = symbol.strip().upper()
    parts = [part for part in _SEPARATORS.split(cleaned) if part]
    if len(parts) == 2:
        return parts[0], parts[1]
    if len(parts) == 1 and len(parts[0]) == 6 and parts[0].isalpha():
        return parts[0][:3], parts[0][3:]
    return None


def classify(symbol: str) -> AssetType:
    upper = symbol.strip().upper()
    # Gold quotes like a currency pair but is valued per unit.
    if "GOLD" in upper or upper == "XAUUSD":
        return AssetType.METAL

    words = set(_SEPARATORS.split(upper))
    if words & METAL_NAMES:
        return AssetType.METAL
    if words & CRYPTO_NAMES:
        return AssetType.CRYPTO

    pair = _split_pair(upper)
    if pair is None:
        if upper in CRYPTO_CODES:
            return AssetType.CRYPTO
        return AssetType.OTHER

    base, quote = pair
    if base in METAL_CODES:
        return AssetType.METAL
    if base in CRYPTO_CODES:
        return AssetType.CRYPTO
    if base in FIAT_CODES and quote in FIAT_CODES:
        return AssetType.FX
    return AssetType.OTHER


def is_jpy_quoted(symbol: str) -> bool:
    return "JPY" in symbol.upper()


def pip_size(symbol: str) -> float:
    return 0.01 if is_jpy_quoted(symbol) else 0.0001


def pip_multiplier(symbol: str) -> int:
    return 100 if is_jpy_quoted(symbol) else 10_000
