"""Simulation data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional


class Direction(str, Enum):
    LONG = "Long"
    SHORT = "Short"

    @property
    def sign(self) -> int:
        return 1 if self is Direction.LONG else -1

    @classmethod
    def parse(cls, value: Any) -> "Direction":
        if isinstance(value, Direction):
            return value
        key = str(value).strip().lower()
        if key in {"long", "buy"}:
            return cls.LONG
        if key in {"short", "sell"}:
            return cls.SHORT
        raise ValueError(f"Invalid direction: {value}")


class Outcome(str, Enum):
    TP_HIT = "tp_hit"
    SL_HIT = "sl_hit"
    OPEN = "open"
    INSUFFICIENT_DATA = "insufficient_data"
    NOT_SUPPORTED = "not_supported"

    @property
    def is_resolved(self) -> bool:
        return self in {Outcome.TP_HIT, Outcome.SL_HIT}

    @property
    def is_unavailable(self) -> bool:
        return self in {Outcome.INSUFFICIENT_DATA, Outcome.NOT_SUPPORTED}


class RecordedStatus(str, Enum):
    TP_HIT = "TP Hit"
    SL_HIT = "SL Hit"
    OPEN = "Open"


@dataclass(frozen=True)
class TradeSetup:
    id: str
    instrument: str
    direction: Direction
    entry: float
    take_profit: float
    stop_loss: float
    date: date
    confidence: float = 0.0
    status: RecordedStatus = RecordedStatus.OPEN
    user_id: Optional[str] = None

    @property
    def has_take_profit(self) -> bool:
        return bool(self.take_profit) and self.take_profit > 0

    @property
    def has_stop_loss(self) -> bool:
        return bool(self.stop_loss) and self.stop_loss > 0


@dataclass(frozen=True)
class PriceBar:
    time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: Optional[float] = None


@dataclass(frozen=True)
class Resolution:
    outcome: Outcome
    hit_time: Optional[datetime] = None
    hit_price: Optional[float] = None
    bars_to_resolution: int = 0


@dataclass(frozen=True)
class PnLResult:
    pnl_usd: float = 0.0
    pnl_percent: float = 0.0


@dataclass(frozen=True)
class SimulatedTrade:
    setup: TradeSetup
    outcome: Outcome
    hit_time: Optional[datetime] = None
    hit_price: Optional[float] = None
    bars_to_resolution: int = 0
    pnl_usd: float = 0.0
    pnl_percent: float = 0.0

    @property
    def id(self) -> str:
        return self.setup.id

    @property
    def instrument(self) -> str:
        return self.setup.instrument

    @property
    def direction(self) -> Direction:
        return self.setup.direction

    @property
    def confidence(self) -> float:
        return self.setup.confidence

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.setup.id,
            "date": self.setup.date.isoformat(),
            "instrument": self.setup.instrument,
            "direction": self.setup.direction.value,
            "entry": self.setup.entry,
            "tp": self.setup.take_profit,
            "sl": self.setup.stop_loss,
            "confidence": self.setup.confidence,
            "status": self.setup.status.value,
            "user_id": self.setup.user_id,
            "simulated_outcome": self.outcome.value,
            "hit_date": self.hit_time.date().isoformat() if self.hit_time else None,
            "hit_time": self.hit_time.isoformat() if self.hit_time else None,
            "hit_price": self.hit_price,
            "bars_to_resolution": self.bars_to_resolution,
            "simulated_pnl_usd": self.pnl_usd,
            "simulated_pnl_percent": self.pnl_percent,
        }


@dataclass(frozen=True)
class SimulationStats:
    total_pnl: float
    win_rate: float
    avg_win_pnl: float
    avg_loss_pnl: float
    profit_factor: float
    max_drawdown: float
    total_trades: int = 0
    resolved_trades: int = 0
    wins: int = 0
    losses: int = 0
    open_trades: int = 0
    unavailable_trades: int = 0

    @classmethod
    def empty(cls) -> "SimulationStats":
        return cls(
            total_pnl=0.0,
            win_rate=0.0,
            avg_win_pnl=0.0,
            avg_loss_pnl=0.0,
            profit_factor=0.0,
            max_drawdown=0.0,
        )


@dataclass(frozen=True)
class EquityPoint:
    trade_id: str
    time: Optional[datetime]
    cumulative_pnl: float


@dataclass(frozen=True)
class SimulationResult:
    simulated_trades: list[SimulatedTrade]
    stats: SimulationStats
    equity_curve: list[EquityPoint] = field(default_factory=list)
    notices: list[str] = field(default_factory=list)
