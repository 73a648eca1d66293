"""Dashboard-style summaries over recorded setups and simulated trades."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from setup_backtest.simulator.models import (
    Direction,
    Outcome,
    RecordedStatus,
    SimulatedTrade,
    TradeSetup,
)

HIGH_CONFIDENCE = 80.0


@dataclass(frozen=True)
class RecordedStats:
    total_trades: int
    win_rate: float
    avg_risk_reward: float
    cumulative_pnl_percent: float
    avg_pnl_percent: float
    active_trades: int


@dataclass(frozen=True)
class InstrumentSummary:
    instrument: str
    wins: int
    resolved: int
    total: int
    total_pnl: float

    @property
    def win_rate(self) -> float:
        return self.wins / self.resolved * 100 if self.resolved else 0.0


def recorded_pnl_percent(setup: TradeSetup) -> float:
    """Percent move from entry to the level the recorded status says was hit."""
    if not setup.entry:
        return 0.0
    if setup.status is RecordedStatus.TP_HIT and setup.has_take_profit:
        level = setup.take_profit
    elif setup.status is RecordedStatus.SL_HIT and setup.has_stop_loss:
        level = setup.stop_loss
    else:
        return 0.0
    return setup.direction.sign * (level - setup.entry) / setup.entry * 100


def recorded_stats(setups: Sequence[TradeSetup]) -> RecordedStats:
    """Statistics from recorded statuses, independent of any simulation.

    Win rate here is over all setups, open ones included. Setups with
    zero risk (entry equal to stop) are left out of the risk-reward average.
    """
    total = len(setups)
    if not total:
        return RecordedStats(0, 0.0, 0.0, 0.0, 0.0, 0)

    wins = sum(1 for setup in setups if setup.status is RecordedStatus.TP_HIT)
    ratios = [
        abs((setup.take_profit - setup.entry) / (setup.entry - setup.stop_loss))
        for setup in setups
        if setup.entry != setup.stop_loss
    ]
    cumulative = sum(recorded_pnl_percent(setup) for setup in setups)
    return RecordedStats(
        total_trades=total,
        win_rate=wins / total * 100,
        avg_risk_reward=sum(ratios) / len(ratios) if ratios else 0.0,
        cumulative_pnl_percent=cumulative,
        avg_pnl_percent=cumulative / total,
        active_trades=sum(1 for setup in setups if setup.status is RecordedStatus.OPEN),
    )


def _win_rate(trades: Iterable[SimulatedTrade]) -> float:
    resolved = [trade for trade in trades if trade.outcome.is_resolved]
    if not resolved:
        return 0.0
    wins = sum(1 for trade in resolved if trade.outcome is Outcome.TP_HIT)
    return wins / len(resolved) * 100


def instrument_breakdown(trades: Sequence[SimulatedTrade]) -> list[InstrumentSummary]:
    grouped: dict[str, list[SimulatedTrade]] = {}
    for trade in trades:
        grouped.setdefault(trade.instrument, []).append(trade)
    return [
        InstrumentSummary(
            instrument=instrument,
            wins=sum(1 for trade in group if trade.outcome is Outcome.TP_HIT),
            resolved=sum(1 for trade in group if trade.outcome.is_resolved),
            total=len(group),
            total_pnl=sum(trade.pnl_usd for trade in group),
        )
        for instrument, group in grouped.items()
    ]


def top_instrument(trades: Sequence[SimulatedTrade]) -> Optional[InstrumentSummary]:
    breakdown = instrument_breakdown(trades)
    if not breakdown:
        return None
    return max(breakdown, key=lambda summary: summary.total_pnl)


def direction_win_rates(trades: Sequence[SimulatedTrade]) -> dict[Direction, float]:
    return {
        direction: _win_rate(trade for trade in trades if trade.direction is direction)
        for direction in Direction
    }


def confidence_win_rate(trades: Sequence[SimulatedTrade], threshold: float = HIGH_CONFIDENCE) -> float:
    return _win_rate(trade for trade in trades if trade.confidence >= threshold)
