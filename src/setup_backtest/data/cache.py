"""SQLite price history cache in front of a price provider."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from datetime import date, timedelta
from pathlib import Path
from typing import Iterable

from setup_backtest.data.provider import (
    FetchOutcome,
    PriceRequest,
    PriceSeries,
    PriceSeriesProvider,
    parse_bar_time,
)
from setup_backtest.simulator.models import PriceBar

logger = logging.getLogger(__name__)


class PriceHistoryCache:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._local = threading.local()
        self._conn()

    def _conn(self) -> sqlite3.Connection:
        conn = getattr(self._local, "conn", None)
        if conn is None:
            conn = sqlite3.connect(self.path)
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS price_history_cache (
                    instrument TEXT NOT NULL,
                    interval TEXT NOT NULL,
                    date TEXT NOT NULL,
                    open REAL NOT NULL,
                    high REAL NOT NULL,
                    low REAL NOT NULL,
                    close REAL NOT NULL,
                    volume REAL,
                    PRIMARY KEY (instrument, interval, date)
                )
                """
            )
            conn.commit()
            self._local.conn = conn
        return conn

    def load(self, instrument: str, interval: str, start: date, end: date) -> list[PriceBar]:
        conn = self._conn()
        rows = conn.execute(
            "SELECT date, open, high, low, close, volume FROM price_history_cache "
            "WHERE instrument = ? AND interval = ? AND date >= ? AND date < ? ORDER BY date ASC",
            (instrument, interval, start.isoformat(), (end + timedelta(days=1)).isoformat()),
        ).fetchall()
        return [
            PriceBar(
                time=parse_bar_time(row[0]),
                open=row[1],
                high=row[2],
                low=row[3],
                close=row[4],
                volume=row[5],
            )
            for row in rows
        ]

    def store(self, instrument: str, interval: str, bars: Iterable[PriceBar]) -> int:
        conn = self._conn()
        rows = [
            (instrument, interval, bar.time.isoformat(), bar.open, bar.high, bar.low, bar.close, bar.volume)
            for bar in bars
        ]
        conn.executemany(
            "INSERT INTO price_history_cache (instrument, interval, date, open, high, low, close, volume) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?) "
            "ON CONFLICT (instrument, interval, date) DO UPDATE SET "
            "open = excluded.open, high = excluded.high, low = excluded.low, "
            "close = excluded.close, volume = excluded.volume",
            rows,
        )
        conn.commit()
        return len(rows)

    def close(self) -> None:
        conn = getattr(self._local, "conn", None)
        if conn is None:
            return
        conn.close()
        self._local.conn = None


class CachedPriceProvider(PriceSeriesProvider):
    """Serve any cached rows in the requested window; otherwise fetch and store."""

    def __init__(self, upstream: PriceSeriesProvider, cache: PriceHistoryCache) -> None:
        self.upstream = upstream
        self.cache = cache

    async def fetch(self, request: PriceRequest) -> FetchOutcome:
        start, end = request.window()
        cached = await asyncio.to_thread(self.cache.load, request.instrument, request.interval, start, end)
        if cached:
            logger.info("Returning %d cached bars for %s", len(cached), request.instrument)
            last = cached[-1].time.date()
            if last < request.end:
                logger.warning(
                    "Cached bars for %s stop at %s, before requested end %s; later setups may stay open",
                    request.instrument,
                    last.isoformat(),
                    request.end.isoformat(),
                )
            return PriceSeries(cached)

        outcome = await self.upstream.fetch(request)
        if isinstance(outcome, PriceSeries) and outcome.bars:
            stored = await asyncio.to_thread(
                self.cache.store, request.instrument, request.interval, outcome.bars
            )
            logger.info("Cached %d bars for %s", stored, request.instrument)
        return outcome

    async def close(self) -> None:
        await self.upstream.close()
        self.cache.close()
