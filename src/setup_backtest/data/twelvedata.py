"""
twelvedata.py
-------------
Historical OHLC bars from the TwelveData ``/time_series`` endpoint.

Transport failures, non-200 responses, API-level ``status: error``
payloads and empty ``values`` lists all come back as ``FetchFailed`` so
the simulator can mark the instrument group and move on. Instruments the
symbol table marks as unavailable come back as ``Unsupported`` without a
request. A payload whose rows cannot be parsed raises
``MalformedPriceData``.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Optional

import aiohttp

from setup_backtest.data.provider import (
    FetchFailed,
    FetchOutcome,
    MalformedPriceData,
    PriceRequest,
    PriceSeries,
    PriceSeriesProvider,
    Unsupported,
    bar_from_record,
    sort_bars,
)
from setup_backtest.instruments.symbols import map_to_provider_symbol

DEFAULT_BASE_URL = "https://api.twelvedata.com"
API_KEY_ENV = "TWELVE_DATA_API_KEY"

logger = logging.getLogger(__name__)


class TwelveDataProvider(PriceSeriesProvider):
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.api_key = api_key or os.getenv(API_KEY_ENV, "")
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._session = session
        self._owns_session = session is None
        self.metrics = {"requests_sent": 0, "errors": 0}

    async def __aenter__(self) -> "TwelveDataProvider":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _params(self, request: PriceRequest, symbol: str) -> dict[str, str]:
        return {
            "symbol": symbol,
            "interval": request.interval,
            "start_date": request.start_iso(),
            "end_date": request.end_iso(),
            "apikey": self.api_key,
            "format": "JSON",
        }

    async def fetch(self, request: PriceRequest) -> FetchOutcome:
        symbol = map_to_provider_symbol(request.instrument)
        if symbol is None:
            logger.info("Instrument %s not supported by TwelveData", request.instrument)
            return Unsupported(request.instrument, f"Instrument not supported: {request.instrument}")

        url = f"{self.base_url}/time_series"
        session = self._get_session()
        logger.info(
            "Fetching %s (%s) %s..%s",
            request.instrument,
            symbol,
            request.start_iso(),
            request.end_iso(),
        )
        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            async with session.get(url, params=self._params(request, symbol), timeout=timeout) as resp:
                self.metrics["requests_sent"] += 1
                if resp.status != 200:
                    self.metrics["errors"] += 1
                    logger.warning("TwelveData HTTP %s for %s", resp.status, symbol)
                    return FetchFailed(request.instrument, f"HTTP {resp.status}")
                payload = await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            self.metrics["errors"] += 1
            logger.warning("Request failed for %s: %s", symbol, exc)
            return FetchFailed(request.instrument, str(exc) or exc.__class__.__name__)

        return self.parse_payload(request, symbol, payload)

    @staticmethod
    def parse_payload(request: PriceRequest, symbol: str, payload: Any) -> FetchOutcome:
        if not isinstance(payload, dict):
            raise MalformedPriceData(f"Unexpected TwelveData payload for {symbol}")

        if payload.get("status") == "error":
            message = payload.get("message") or "unknown error"
            logger.warning("TwelveData error for %s: %s", symbol, message)
            return FetchFailed(request.instrument, f"Instrument not supported: {symbol} ({message})")

        values = payload.get("values") or []
        if not values:
            logger.info("No data returned for %s", symbol)
            return FetchFailed(request.instrument, "No data available for this period")

        bars = [bar_from_record(row) for row in values]
        return PriceSeries(sort_bars(bars))
