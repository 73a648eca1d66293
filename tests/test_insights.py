from datetime import date

import pytest

from setup_backtest.simulator import (
    Direction,
    Outcome,
    RecordedStatus,
    SimulatedTrade,
    TradeSetup,
    confidence_win_rate,
    direction_win_rates,
    instrument_breakdown,
    recorded_pnl_percent,
    recorded_stats,
    top_instrument,
)


def _setup(
    setup_id="s",
    instrument="EUR/USD",
    direction=Direction.LONG,
    entry=100.0,
    tp=110.0,
    sl=95.0,
    status=RecordedStatus.OPEN,
    confidence=0.0,
) -> TradeSetup:
    return TradeSetup(
        id=setup_id,
        instrument=instrument,
        direction=direction,
        entry=entry,
        take_profit=tp,
        stop_loss=sl,
        date=date(2024, 6, 3),
        confidence=confidence,
        status=status,
    )


def _simulated(setup: TradeSetup, outcome: Outcome, pnl: float = 0.0) -> SimulatedTrade:
    return SimulatedTrade(setup=setup, outcome=outcome, pnl_usd=pnl)


def test_recorded_pnl_percent_follows_recorded_status():
    assert recorded_pnl_percent(_setup(status=RecordedStatus.TP_HIT)) == pytest.approx(10.0)
    assert recorded_pnl_percent(_setup(status=RecordedStatus.SL_HIT)) == pytest.approx(-5.0)
    short_stop = _setup(direction=Direction.SHORT, tp=90.0, sl=105.0, status=RecordedStatus.SL_HIT)
    assert recorded_pnl_percent(short_stop) == pytest.approx(-5.0)
    assert recorded_pnl_percent(_setup(status=RecordedStatus.OPEN)) == 0.0
    assert recorded_pnl_percent(_setup(tp=0.0, status=RecordedStatus.TP_HIT)) == 0.0


def test_recorded_stats():
    setups = [
        _setup("a", status=RecordedStatus.TP_HIT),
        _setup("b", status=RecordedStatus.SL_HIT),
        _setup("c", status=RecordedStatus.OPEN),
        _setup("d", sl=100.0, status=RecordedStatus.OPEN),
    ]

    stats = recorded_stats(setups)

    assert stats.total_trades == 4
    assert stats.win_rate == pytest.approx(25.0)
    # Zero-risk setup "d" is left out of the average.
    assert stats.avg_risk_reward == pytest.approx(2.0)
    assert stats.cumulative_pnl_percent == pytest.approx(5.0)
    assert stats.avg_pnl_percent == pytest.approx(1.25)
    assert stats.active_trades == 2


def test_recorded_stats_empty():
    stats = recorded_stats([])
    assert stats.total_trades == 0
    assert stats.win_rate == 0.0


def test_instrument_breakdown_and_top_instrument():
    trades = [
        _simulated(_setup("a", "EUR/USD"), Outcome.TP_HIT, 300.0),
        _simulated(_setup("b", "EUR/USD"), Outcome.SL_HIT, -100.0),
        _simulated(_setup("c", "XAU/USD"), Outcome.TP_HIT, 50.0),
        _simulated(_setup("d", "XAU/USD"), Outcome.OPEN),
    ]

    breakdown = instrument_breakdown(trades)

    assert [summary.instrument for summary in breakdown] == ["EUR/USD", "XAU/USD"]
    eur, gold = breakdown
    assert (eur.wins, eur.resolved, eur.total) == (1, 2, 2)
    assert eur.win_rate == pytest.approx(50.0)
    assert eur.total_pnl == pytest.approx(200.0)
    assert gold.win_rate == pytest.approx(100.0)
    assert top_instrument(trades).instrument == "EUR/USD"
    assert top_instrument([]) is None


def test_direction_and_confidence_win_rates():
    trades = [
        _simulated(_setup("a", confidence=90), Outcome.TP_HIT),
        _simulated(_setup("b", confidence=85), Outcome.SL_HIT),
        _simulated(_setup("c", confidence=50), Outcome.TP_HIT),
        _simulated(_setup("d", direction=Direction.SHORT, confidence=95), Outcome.SL_HIT),
        _simulated(_setup("e", direction=Direction.SHORT, confidence=99), Outcome.OPEN),
    ]

    rates = direction_win_rates(trades)

    assert rates[Direction.LONG] == pytest.approx(200 / 3)
    assert rates[Direction.SHORT] == 0.0
    assert confidence_win_rate(trades) == pytest.approx(100 / 3)
    assert confidence_win_rate(trades, threshold=60) == pytest.approx(100 / 3)
    assert confidence_win_rate(trades, threshold=100) == 0.0
