"""Map user-facing instrument names to price-provider symbols."""

from __future__ import annotations

import re
from typing import Optional

# None marks instruments the time-series source cannot serve (futures).
PROVIDER_SYMBOLS: dict[str, Optional[str]] = {
    # FX
    "EUR/USD": "EUR/USD",
    "GBP/USD": "GBP/USD",
    "USD/JPY": "USD/JPY",
    "USD/CHF": "USD/CHF",
    "AUD/USD": "AUD/USD",
    "NZD/USD": "NZD/USD",
    "USD/CAD": "USD/CAD",
    "EUR/GBP": "EUR/GBP",
    "EUR/JPY": "EUR/JPY",
    "GBP/JPY": "GBP/JPY",
    "AUD/JPY": "AUD/JPY",
    # Crypto
    "BITCOIN": "BTC/USD",
    "BTC": "BTC/USD",
    "BTC/USD": "BTC/USD",
    "BITCOIN (BTC)": "BTC/USD",
    "ETHEREUM": "ETH/USD",
    "ETH": "ETH/USD",
    "ETH/USD": "ETH/USD",
    "XLM": "XLM/USD",
    "XLM/USD": "XLM/USD",
    "XLM-USD": "XLM/USD",
    "STELLAR": "XLM/USD",
    # Metals
    "GOLD": "XAU/USD",
    "XAU/USD": "XAU/USD",
    "XAUUSD": "XAU/USD",
    "SILVER": "XAG/USD",
    "XAG/USD": "XAG/USD",
    "XAGUSD": "XAG/USD",
    # Energy
    "OIL": "WTI/USD",
    "WTI": "WTI/USD",
    "CRUDE OIL": "WTI/USD",
    "BRENT": "BRENT/USD",
    "NATURAL GAS": "NATGAS/USD",
    "NG": "NATGAS/USD",
    "NATGAS": "NATGAS/USD",
    # Stocks
    "GOOGL": "GOOGL",
    "AAPL": "AAPL",
    "MSFT": "MSFT",
    "TSLA": "TSLA",
    # Indices
    "SPX": "SPX",
    "US500": "SPX",
    "NDX": "NDX",
    "DJI": "DJI",
    # Futures
    "COFFEE": None,
    "KC=F": None,
    "CORN": None,
    "ZC=F": None,
    "WHEAT": None,
    "ZW=F": None,
    "SOYBEANS": None,
    "ZS=F": None,
}

_PARENS = re.compile(r"\(([^)]+)\)")
_WHITESPACE = re.compile(r"\s+")
_UPPER_LOOKUP = {key.upper(): value for key, value in PROVIDER_SYMBOLS.items()}


def clean_instrument(instrument: str) -> str:
    """Extract a parenthesised code if present and collapse whitespace."""
    match = _PARENS.search(instrument)
    if match:
        instrument = match.group(1)
    return _WHITESPACE.sub(" ", instrument.strip())


def map_to_provider_symbol(instrument: str) -> Optional[str]:
    """Return the provider symbol, or None when the instrument is not served.

    Unmapped instruments pass through cleaned; the provider decides.
    """
    cleaned = clean_instrument(instrument)
    key = cleaned.upper()
    if key in _UPPER_LOOKUP:
        return _UPPER_LOOKUP[key]
    return cleaned


def is_supported(instrument: str) -> bool:
    return map_to_provider_symbol(instrument) is not None
