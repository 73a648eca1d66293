from datetime import date, datetime

import pytest

from setup_backtest.instruments import AssetType
from setup_backtest.simulator import Direction, Outcome, SimulatedTrade, TradeSetup, compute_pnl


def _trade(instrument, direction, entry, tp, sl, outcome, hit_price):
    setup = TradeSetup(
        id="t",
        instrument=instrument,
        direction=direction,
        entry=entry,
        take_profit=tp,
        stop_loss=sl,
        date=date(2025, 9, 1),
    )
    return SimulatedTrade(setup=setup, outcome=outcome, hit_time=datetime(2025, 9, 2), hit_price=hit_price)


def test_fx_long_take_profit():
    trade = _trade("EUR/USD", Direction.LONG, 1.0732, 1.0835, 1.0680, Outcome.TP_HIT, 1.0835)

    pnl = compute_pnl(trade, position_size=1.0, leverage=100)

    assert pnl.pnl_usd == pytest.approx(1030.0)
    assert pnl.pnl_percent == pytest.approx(1030.0 / 1073.2 * 100)


def test_fx_short_jpy_stop_uses_jpy_pips():
    trade = _trade("USD/JPY", Direction.SHORT, 148.65, 147.80, 149.25, Outcome.SL_HIT, 149.25)

    pnl = compute_pnl(trade, position_size=0.1, leverage=50)

    # 60 pips at 100 per pip for a 0.1 lot.
    assert pnl.pnl_usd == pytest.approx(-6000.0)
    margin = 0.1 * 100_000 * 148.65 / 50
    assert pnl.pnl_percent == pytest.approx(-6000.0 / margin * 100)


def test_non_fx_uses_units_of_price_change():
    trade = _trade("XAU/USD", Direction.LONG, 2330.0, 2360.0, 2310.0, Outcome.TP_HIT, 2360.0)

    pnl = compute_pnl(trade, position_size=2.0, leverage=100)

    assert pnl.pnl_usd == pytest.approx(60.0)
    assert pnl.pnl_percent == pytest.approx(60.0 / 46.6 * 100)


def test_short_take_profit_is_positive():
    trade = _trade("BTC/USD", Direction.SHORT, 68000.0, 66000.0, 69000.0, Outcome.TP_HIT, 66000.0)

    pnl = compute_pnl(trade, position_size=1.0, leverage=10)

    assert pnl.pnl_usd == pytest.approx(2000.0)
    assert pnl.pnl_percent > 0


def test_long_stop_is_negative():
    trade = _trade("GBP/USD", Direction.LONG, 1.2650, 1.2800, 1.2600, Outcome.SL_HIT, 1.2600)
    assert compute_pnl(trade, 1.0, 100).pnl_usd < 0


def test_unresolved_outcomes_price_at_zero():
    for outcome in (Outcome.OPEN, Outcome.INSUFFICIENT_DATA, Outcome.NOT_SUPPORTED):
        trade = _trade("EUR/USD", Direction.LONG, 1.0732, 1.0835, 1.0680, outcome, None)
        pnl = compute_pnl(trade, 1.0, 100)
        assert pnl.pnl_usd == 0.0
        assert pnl.pnl_percent == 0.0


def test_zero_divisors_degrade_to_zero_percent():
    trade = _trade("EUR/USD", Direction.LONG, 1.0732, 1.0835, 1.0680, Outcome.TP_HIT, 1.0835)

    no_leverage = compute_pnl(trade, 1.0, 0)
    assert no_leverage.pnl_usd == pytest.approx(1030.0)
    assert no_leverage.pnl_percent == 0.0

    no_size = compute_pnl(trade, 0.0, 100)
    assert no_size.pnl_usd == 0.0
    assert no_size.pnl_percent == 0.0


def test_explicit_asset_type_overrides_classification():
    trade = _trade("EUR/USD", Direction.LONG, 1.0732, 1.0835, 1.0680, Outcome.TP_HIT, 1.0835)

    pnl = compute_pnl(trade, 1.0, 100, asset_type=AssetType.OTHER)

    assert pnl.pnl_usd == pytest.approx(0.0103)
