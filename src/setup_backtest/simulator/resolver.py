"""Bar-by-bar stop-loss / take-profit resolution."""

from __future__ import annotations

from datetime import datetime, time
from typing import Iterable

from setup_backtest.simulator.models import Direction, Outcome, PriceBar, Resolution, TradeSetup


def _setup_start(setup: TradeSetup, bar: PriceBar) -> datetime:
    return datetime.combine(setup.date, time.min, tzinfo=bar.time.tzinfo)


def bars_from_setup(setup: TradeSetup, bars: Iterable[PriceBar]) -> list[PriceBar]:
    """Bars at or after the setup date, assuming ascending input."""
    return [bar for bar in bars if bar.time >= _setup_start(setup, bar)]


def resolve(setup: TradeSetup, bars: Iterable[PriceBar]) -> Resolution:
    """Walk bars forward and report the first level touched.

    The stop is checked before the target on every bar, so a bar whose
    range spans both levels always resolves as ``sl_hit``. Levels of 0
    are treated as unset and never checked.
    """
    future = bars_from_setup(setup, bars)
    if not future:
        return Resolution(outcome=Outcome.OPEN, bars_to_resolution=0)

    check_stop = setup.has_stop_loss
    check_target = setup.has_take_profit
    count = 0
    for bar in future:
        count += 1
        if setup.direction is Direction.LONG:
            if check_stop and bar.low <= setup.stop_loss:
                return Resolution(Outcome.SL_HIT, bar.time, setup.stop_loss, count)
            if check_target and bar.high >= setup.take_profit:
                return Resolution(Outcome.TP_HIT, bar.time, setup.take_profit, count)
        else:
            if check_stop and bar.high >= setup.stop_loss:
                return Resolution(Outcome.SL_HIT, bar.time, setup.stop_loss, count)
            if check_target and bar.low <= setup.take_profit:
                return Resolution(Outcome.TP_HIT, bar.time, setup.take_profit, count)

    return Resolution(outcome=Outcome.OPEN, bars_to_resolution=count)
