"""Replay recorded trade setups against historical prices."""

from setup_backtest.simulator.engine import (
    BacktestSimulator,
    SimulationCancelled,
    run_simulation,
    simulate_setup,
)

__version__ = "0.1.0"

__all__ = [
    "BacktestSimulator",
    "SimulationCancelled",
    "run_simulation",
    "simulate_setup",
]
