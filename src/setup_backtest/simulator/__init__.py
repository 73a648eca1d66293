"""Trade resolution, P&L and portfolio statistics."""

from setup_backtest.simulator.insights import (
    InstrumentSummary,
    RecordedStats,
    confidence_win_rate,
    direction_win_rates,
    instrument_breakdown,
    recorded_pnl_percent,
    recorded_stats,
    top_instrument,
)
from setup_backtest.simulator.models import (
    Direction,
    EquityPoint,
    Outcome,
    PnLResult,
    PriceBar,
    RecordedStatus,
    Resolution,
    SimulatedTrade,
    SimulationResult,
    SimulationStats,
    TradeSetup,
)
from setup_backtest.simulator.pnl import compute_pnl
from setup_backtest.simulator.resolver import bars_from_setup, resolve
from setup_backtest.simulator.stats import compute_stats, equity_curve, max_drawdown

__all__ = [
    "Direction",
    "EquityPoint",
    "InstrumentSummary",
    "Outcome",
    "PnLResult",
    "PriceBar",
    "RecordedStats",
    "RecordedStatus",
    "Resolution",
    "SimulatedTrade",
    "SimulationResult",
    "SimulationStats",
    "TradeSetup",
    "bars_from_setup",
    "compute_pnl",
    "compute_stats",
    "confidence_win_rate",
    "direction_win_rates",
    "equity_curve",
    "instrument_breakdown",
    "max_drawdown",
    "recorded_pnl_percent",
    "recorded_stats",
    "resolve",
    "top_instrument",
]
