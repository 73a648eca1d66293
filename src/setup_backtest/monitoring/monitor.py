"""Routing of simulation data-quality events to a notifier."""

from __future__ import annotations

from dataclasses import dataclass

from setup_backtest.monitoring.notifier import Notifier


@dataclass
class SimulationMonitor:
    notifier: Notifier

    def no_data(self, instrument: str, reason: str) -> str:
        message = f"No data for {instrument}: {reason}"
        self.notifier.notify("NO_DATA", message)
        return message

    def not_supported(self, instrument: str, reason: str) -> str:
        message = f"{instrument} not supported by the data source ({reason})"
        self.notifier.notify("NOT_SUPPORTED", message)
        return message

    def group_error(self, instrument: str, error: BaseException) -> str:
        message = f"Simulation failed for {instrument}: {error}"
        self.notifier.notify("GROUP_ERROR", message)
        return message
