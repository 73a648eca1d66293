"""Monitoring exports."""

from setup_backtest.monitoring.audit import AuditLog
from setup_backtest.monitoring.logging_setup import setup_logging
from setup_backtest.monitoring.monitor import SimulationMonitor
from setup_backtest.monitoring.notifier import CollectingNotifier, LogNotifier, Notifier

__all__ = [
    "AuditLog",
    "CollectingNotifier",
    "LogNotifier",
    "Notifier",
    "SimulationMonitor",
    "setup_logging",
]
