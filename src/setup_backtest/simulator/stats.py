"""Portfolio-level aggregation over simulated trades."""

from __future__ import annotations

from typing import Iterable, Sequence

from setup_backtest.simulator.models import EquityPoint, Outcome, SimulatedTrade, SimulationStats


def max_drawdown(pnls: Iterable[float]) -> float:
    """Largest peak-to-trough drop of the cumulative sum, peak starting at 0."""
    peak = 0.0
    cumulative = 0.0
    worst = 0.0
    for pnl in pnls:
        cumulative += pnl
        if cumulative > peak:
            peak = cumulative
        drawdown = peak - cumulative
        if drawdown > worst:
            worst = drawdown
    return worst


def equity_curve(trades: Iterable[SimulatedTrade]) -> list[EquityPoint]:
    points: list[EquityPoint] = []
    cumulative = 0.0
    for trade in trades:
        cumulative += trade.pnl_usd
        points.append(EquityPoint(trade_id=trade.id, time=trade.hit_time, cumulative_pnl=cumulative))
    return points


def compute_stats(trades: Sequence[SimulatedTrade]) -> SimulationStats:
    if not trades:
        return SimulationStats.empty()

    winners = [trade for trade in trades if trade.outcome is Outcome.TP_HIT]
    losers = [trade for trade in trades if trade.outcome is Outcome.SL_HIT]
    resolved = len(winners) + len(losers)

    total_pnl = sum(trade.pnl_usd for trade in trades)
    win_rate = len(winners) / resolved * 100 if resolved else 0.0
    avg_win = sum(trade.pnl_usd for trade in winners) / len(winners) if winners else 0.0
    avg_loss = abs(sum(trade.pnl_usd for trade in losers) / len(losers)) if losers else 0.0
    # Average-based ratio, not gross profit over gross loss.
    profit_factor = avg_win / avg_loss if avg_loss > 0 else 0.0

    return SimulationStats(
        total_pnl=total_pnl,
        win_rate=win_rate,
        avg_win_pnl=avg_win,
        avg_loss_pnl=avg_loss,
        profit_factor=profit_factor,
        max_drawdown=max_drawdown(trade.pnl_usd for trade in trades),
        total_trades=len(trades),
        resolved_trades=resolved,
        wins=len(winners),
        losses=len(losers),
        open_trades=sum(1 for trade in trades if trade.outcome is Outcome.OPEN),
        unavailable_trades=sum(1 for trade in trades if trade.outcome.is_unavailable),
    )
