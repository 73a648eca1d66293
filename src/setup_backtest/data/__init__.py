"""Price series providers."""

from setup_backtest.data.cache import CachedPriceProvider, PriceHistoryCache
from setup_backtest.data.offline import CsvPriceProvider, StaticPriceProvider, csv_filename
from setup_backtest.data.provider import (
    DEFAULT_EXTEND_DAYS,
    DEFAULT_INTERVAL,
    FetchFailed,
    FetchOutcome,
    MalformedPriceData,
    PriceRequest,
    PriceSeries,
    PriceSeriesProvider,
    Unsupported,
    bar_from_record,
    parse_bar_time,
    sort_bars,
)
from setup_backtest.data.twelvedata import TwelveDataProvider

__all__ = [
    "CachedPriceProvider",
    "CsvPriceProvider",
    "DEFAULT_EXTEND_DAYS",
    "DEFAULT_INTERVAL",
    "FetchFailed",
    "FetchOutcome",
    "MalformedPriceData",
    "PriceHistoryCache",
    "PriceRequest",
    "PriceSeries",
    "PriceSeriesProvider",
    "StaticPriceProvider",
    "TwelveDataProvider",
    "Unsupported",
    "bar_from_record",
    "csv_filename",
    "parse_bar_time",
    "sort_bars",
]
