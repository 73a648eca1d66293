"""Replay trade setups against historical price bars."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from setup_backtest.data.provider import (
    DEFAULT_EXTEND_DAYS,
    DEFAULT_INTERVAL,
    FetchFailed,
    FetchOutcome,
    PriceRequest,
    PriceSeries,
    PriceSeriesProvider,
    Unsupported,
    sort_bars,
)
from setup_backtest.instruments.classifier import AssetType, classify
from setup_backtest.monitoring.audit import AuditLog
from setup_backtest.monitoring.monitor import SimulationMonitor
from setup_backtest.monitoring.notifier import LogNotifier
from setup_backtest.simulator.models import (
    Outcome,
    PriceBar,
    SimulatedTrade,
    SimulationResult,
    SimulationStats,
    TradeSetup,
)
from setup_backtest.simulator.pnl import compute_pnl
from setup_backtest.simulator.resolver import resolve
from setup_backtest.simulator.stats import compute_stats, equity_curve

logger = logging.getLogger(__name__)

GroupResult = tuple[list[SimulatedTrade], list[str]]


class SimulationCancelled(RuntimeError):
    pass


def group_by_instrument(setups: Iterable[TradeSetup]) -> dict[str, list[TradeSetup]]:
    groups: dict[str, list[TradeSetup]] = {}
    for setup in setups:
        groups.setdefault(setup.instrument, []).append(setup)
    return groups


def terminal_trades(setups: Iterable[TradeSetup], outcome: Outcome) -> list[SimulatedTrade]:
    return [SimulatedTrade(setup=setup, outcome=outcome) for setup in setups]


def simulate_setup(
    setup: TradeSetup,
    bars: Sequence[PriceBar],
    position_size: float,
    leverage: float,
    asset_type: Optional[AssetType] = None,
) -> SimulatedTrade:
    """Resolve and price one setup against bars sorted ascending."""
    resolution = resolve(setup, bars)
    trade = SimulatedTrade(
        setup=setup,
        outcome=resolution.outcome,
        hit_time=resolution.hit_time,
        hit_price=resolution.hit_price,
        bars_to_resolution=resolution.bars_to_resolution,
    )
    pnl = compute_pnl(trade, position_size, leverage, asset_type)
    return replace(trade, pnl_usd=pnl.pnl_usd, pnl_percent=pnl.pnl_percent)


class BacktestSimulator:
    """Group setups by instrument, fetch bars once per group, resolve each setup.

    A group whose data is unsupported or missing is marked terminal without
    affecting other groups. Any other exception aborts the run unless
    ``isolate_group_errors`` is set, in which case the group is marked
    ``insufficient_data``.
    """

    def __init__(
        self,
        provider: PriceSeriesProvider,
        monitor: Optional[SimulationMonitor] = None,
        audit_log: Optional[AuditLog] = None,
        isolate_group_errors: bool = False,
        fetch_concurrency: int = 1,
    ) -> None:
        if fetch_concurrency < 1:
            raise ValueError("fetch_concurrency must be >= 1")
        self.provider = provider
        self.monitor = monitor or SimulationMonitor(LogNotifier())
        self._audit_log = audit_log
        self.isolate_group_errors = isolate_group_errors
        self.fetch_concurrency = fetch_concurrency

    def _log(self, event: str, payload: dict) -> None:
        if self._audit_log is None:
            return
        self._audit_log.log(event, payload)

    async def run(
        self,
        setups: Iterable[TradeSetup],
        position_size: float,
        leverage: float,
        extend_days: int = DEFAULT_EXTEND_DAYS,
        interval: str = DEFAULT_INTERVAL,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> SimulationResult:
        setups = list(setups)
        if not setups:
            return SimulationResult(simulated_trades=[], stats=SimulationStats.empty())

        groups = group_by_instrument(setups)
        self._log(
            "simulation_started",
            {
                "setups": len(setups),
                "instruments": list(groups),
                "position_size": position_size,
                "leverage": leverage,
                "extend_days": extend_days,
                "interval": interval,
            },
        )
        semaphore = asyncio.Semaphore(self.fetch_concurrency)

        def job(instrument: str, group: list[TradeSetup]):
            return self._run_group(
                instrument, group, position_size, leverage, extend_days, interval, semaphore, cancel_event
            )

        if self.fetch_concurrency == 1:
            batches = [await job(instrument, group) for instrument, group in groups.items()]
        else:
            # A failing group cancels its siblings before the error reaches the caller.
            try:
                async with asyncio.TaskGroup() as task_group:
                    tasks = [task_group.create_task(job(instrument, group)) for instrument, group in groups.items()]
            except ExceptionGroup as failures:
                raise failures.exceptions[0] from None
            batches = [task.result() for task in tasks]

        simulated: list[SimulatedTrade] = []
        notices: list[str] = []
        for trades, group_notices in batches:
            simulated.extend(trades)
            notices.extend(group_notices)

        stats = compute_stats(simulated)
        self._log(
            "simulation_finished",
            {
                "trades": stats.total_trades,
                "resolved": stats.resolved_trades,
                "total_pnl": stats.total_pnl,
                "win_rate": stats.win_rate,
                "max_drawdown": stats.max_drawdown,
            },
        )
        return SimulationResult(
            simulated_trades=simulated,
            stats=stats,
            equity_curve=equity_curve(simulated),
            notices=notices,
        )

    async def _run_group(
        self,
        instrument: str,
        group: list[TradeSetup],
        position_size: float,
        leverage: float,
        extend_days: int,
        interval: str,
        semaphore: asyncio.Semaphore,
        cancel_event: Optional[asyncio.Event],
    ) -> GroupResult:
        async with semaphore:
            if cancel_event is not None and cancel_event.is_set():
                raise SimulationCancelled(f"Simulation cancelled before fetching {instrument}")
            dates = [setup.date for setup in group]
            request = PriceRequest(
                instrument=instrument,
                start=min(dates),
                end=max(dates),
                interval=interval,
                extend_days=extend_days,
            )
            try:
                outcome = await self.provider.fetch(request)
                return self._price_group(instrument, group, outcome, position_size, leverage)
            except Exception as exc:
                if not self.isolate_group_errors:
                    raise
                logger.exception("Group %s failed, marking insufficient_data", instrument)
                self._log("group_error", {"instrument": instrument, "error": str(exc)})
                notice = self.monitor.group_error(instrument, exc)
                return terminal_trades(group, Outcome.INSUFFICIENT_DATA), [notice]

    def _price_group(
        self,
        instrument: str,
        group: list[TradeSetup],
        outcome: FetchOutcome,
        position_size: float,
        leverage: float,
    ) -> GroupResult:
        if isinstance(outcome, Unsupported):
            logger.warning("Instrument %s not supported: %s", instrument, outcome.reason)
            self._log("group_fetched", {"instrument": instrument, "result": Outcome.NOT_SUPPORTED.value})
            notice = self.monitor.not_supported(instrument, outcome.reason)
            return terminal_trades(group, Outcome.NOT_SUPPORTED), [notice]

        if isinstance(outcome, PriceSeries) and not outcome.bars:
            outcome = FetchFailed(instrument, "No data available for this period")

        if isinstance(outcome, FetchFailed):
            logger.error("No price data for %s: %s", instrument, outcome.reason)
            self._log(
                "group_fetched",
                {
                    "instrument": instrument,
                    "result": Outcome.INSUFFICIENT_DATA.value,
                    "reason": outcome.reason,
                },
            )
            notice = self.monitor.no_data(instrument, outcome.reason)
            return terminal_trades(group, Outcome.INSUFFICIENT_DATA), [notice]

        if not isinstance(outcome, PriceSeries):
            raise TypeError(f"Unexpected fetch outcome for {instrument}: {outcome!r}")

        bars = sort_bars(outcome.bars)
        asset_type = classify(instrument)
        trades = [simulate_setup(setup, bars, position_size, leverage, asset_type) for setup in group]
        self._log(
            "group_fetched",
            {"instrument": instrument, "result": "bars", "bars": len(bars), "trades": len(trades)},
        )
        return trades, []


async def run_simulation(
    setups: Iterable[TradeSetup],
    provider: PriceSeriesProvider,
    position_size: float,
    leverage: float,
    extend_days: int = DEFAULT_EXTEND_DAYS,
    interval: str = DEFAULT_INTERVAL,
    cancel_event: Optional[asyncio.Event] = None,
    **kwargs,
) -> SimulationResult:
    """Build a simulator from ``kwargs`` and run it once."""
    simulator = BacktestSimulator(provider, **kwargs)
    return await simulator.run(
        setups,
        position_size,
        leverage,
        extend_days=extend_days,
        interval=interval,
        cancel_event=cancel_event,
    )
