"""Realized P&L for resolved setups."""

from __future__ import annotations

from typing import Optional

from setup_backtest.instruments.classifier import (
    FX_CONTRACT_SIZE,
    AssetType,
    classify,
    pip_multiplier,
    pip_size,
)
from setup_backtest.simulator.models import PnLResult, SimulatedTrade


def compute_pnl(
    trade: SimulatedTrade,
    position_size: float,
    leverage: float,
    asset_type: Optional[AssetType] = None,
) -> PnLResult:
    """Price a resolution in account currency and as a percent of margin.

    FX pairs are valued in pips on a 100,000-unit contract; everything
    else (metals included) is position_size units of price change.
    Anything that is not a tp/sl hit prices at zero.
    """
    if not trade.outcome.is_resolved or not trade.hit_price:
        return PnLResult()

    instrument = trade.setup.instrument
    entry = trade.setup.entry
    sign = trade.setup.direction.sign
    if asset_type is None:
        asset_type = classify(instrument)
    is_fx = asset_type is AssetType.FX
    price_change = trade.hit_price - entry

    if is_fx:
        pips = price_change * pip_multiplier(instrument)
        pip_value = position_size * FX_CONTRACT_SIZE * pip_size(instrument)
        pnl_usd = pips * pip_value * sign
        notional = position_size * FX_CONTRACT_SIZE * entry
    else:
        pnl_usd = position_size * price_change * sign
        notional = position_size * entry

    margin = notional / leverage if leverage > 0 else 0.0
    pnl_percent = pnl_usd / margin * 100 if margin > 0 else 0.0
    return PnLResult(pnl_usd=pnl_usd, pnl_percent=pnl_percent)
