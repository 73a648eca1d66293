"""Price series provider interface."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, Union

from setup_backtest.simulator.models import PriceBar

DEFAULT_INTERVAL = "1day"
DEFAULT_EXTEND_DAYS = 7


class MalformedPriceData(ValueError):
    """Provider payload could not be parsed into bars."""


@dataclass(frozen=True)
class PriceRequest:
    instrument: str
    start: date
    end: date
    interval: str = DEFAULT_INTERVAL
    extend_days: int = DEFAULT_EXTEND_DAYS

    def window(self) -> tuple[date, date]:
        pad = timedelta(days=max(0, self.extend_days))
        return self.start - pad, self.end + pad

    def start_iso(self) -> str:
        return self.window()[0].isoformat()

    def end_iso(self) -> str:
        return self.window()[1].isoformat()


@dataclass(frozen=True)
class PriceSeries:
    bars: list[PriceBar] = field(default_factory=list)


@dataclass(frozen=True)
class Unsupported:
    instrument: str
    reason: str = "not_supported"


@dataclass(frozen=True)
class FetchFailed:
    instrument: str
    reason: str


FetchOutcome = Union[PriceSeries, Unsupported, FetchFailed]


def parse_bar_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    raw = str(value or "").strip()
    if not raw:
        raise MalformedPriceData("Bar is missing a date")
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError as exc:
        raise MalformedPriceData(f"Invalid bar date: {raw}") from exc


def bar_from_record(record: dict[str, Any]) -> PriceBar:
    """Build a bar from a ``{date, open, high, low, close[, volume]}`` mapping."""
    stamp = record.get("date", record.get("datetime", record.get("time")))
    try:
        volume = record.get("volume")
        return PriceBar(
            time=parse_bar_time(stamp),
            open=float(record["open"]),
            high=float(record["high"]),
            low=float(record["low"]),
            close=float(record["close"]),
            volume=float(volume) if volume not in (None, "") else None,
        )
    except MalformedPriceData:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedPriceData(f"Malformed price row: {record!r}") from exc


def sort_bars(bars: Iterable[PriceBar]) -> list[PriceBar]:
    return sorted(bars, key=lambda bar: bar.time)


class PriceSeriesProvider:
    async def fetch(self, request: PriceRequest) -> FetchOutcome:  # pragma: no cover - interface
        raise NotImplementedError

    async def close(self) -> None:
        return None
