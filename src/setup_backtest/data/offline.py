"""Offline price providers for local runs and tests."""

from __future__ import annotations

import asyncio
import csv
import re
from datetime import date
from pathlib import Path
from typing import Mapping, Sequence, Union

from setup_backtest.data.provider import (
    FetchFailed,
    FetchOutcome,
    PriceRequest,
    PriceSeries,
    PriceSeriesProvider,
    Unsupported,
    bar_from_record,
    sort_bars,
)
from setup_backtest.simulator.models import PriceBar

NO_DATA = "No data available for this period"

_FILE_SAFE = re.compile(r"[^A-Z0-9]+")

SeriesEntry = Union[Sequence[PriceBar], PriceSeries, Unsupported, FetchFailed, Exception]


def _in_window(bars: Sequence[PriceBar], start: date, end: date) -> list[PriceBar]:
    return [bar for bar in bars if start <= bar.time.date() <= end]


class StaticPriceProvider(PriceSeriesProvider):
    """Serve fixed bars or outcomes per instrument.

    An ``Exception`` entry is raised from ``fetch`` to stand in for a
    provider that breaks unexpectedly.
    """

    def __init__(self, series: Mapping[str, SeriesEntry]) -> None:
        self.series = dict(series)
        self.requests: list[PriceRequest] = []

    async def fetch(self, request: PriceRequest) -> FetchOutcome:
        self.requests.append(request)
        entry = self.series.get(request.instrument)
        if entry is None:
            return FetchFailed(request.instrument, NO_DATA)
        if isinstance(entry, Exception):
            raise entry
        if isinstance(entry, (Unsupported, FetchFailed)):
            return entry
        bars = entry.bars if isinstance(entry, PriceSeries) else list(entry)
        start, end = request.window()
        window = _in_window(bars, start, end)
        if not window:
            return FetchFailed(request.instrument, NO_DATA)
        return PriceSeries(window)


def csv_filename(instrument: str) -> str:
    return _FILE_SAFE.sub("", instrument.upper()) + ".csv"


class CsvPriceProvider(PriceSeriesProvider):
    """Read ``<root>/<SYMBOL>.csv`` files with date,open,high,low,close[,volume]."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _read(self, path: Path) -> list[PriceBar]:
        with path.open("r", encoding="utf-8", newline="") as handle:
            return [bar_from_record(row) for row in csv.DictReader(handle)]

    async def fetch(self, request: PriceRequest) -> FetchOutcome:
        path = self.root / csv_filename(request.instrument)
        if not path.exists():
            return FetchFailed(request.instrument, f"No price file {path.name}")
        bars = await asyncio.to_thread(self._read, path)
        start, end = request.window()
        window = _in_window(sort_bars(bars), start, end)
        if not window:
            return FetchFailed(request.instrument, NO_DATA)
        return PriceSeries(window)
