from datetime import date, datetime, timezone

from setup_backtest.simulator import Direction, Outcome, PriceBar, TradeSetup, resolve


def _bar(day: date, high: float, low: float, tzinfo=None) -> PriceBar:
    stamp = datetime(day.year, day.month, day.day, tzinfo=tzinfo)
    mid = (high + low) / 2
    return PriceBar(time=stamp, open=mid, high=high, low=low, close=mid)


def _eurusd_long(stop_loss: float = 1.0680) -> TradeSetup:
    return TradeSetup(
        id="eu-1",
        instrument="EUR/USD",
        direction=Direction.LONG,
        entry=1.0732,
        take_profit=1.0835,
        stop_loss=stop_loss,
        date=date(2025, 9, 1),
    )


def test_long_take_profit_hit():
    bars = [
        _bar(date(2025, 8, 29), high=1.0900, low=1.0600),
        _bar(date(2025, 9, 1), high=1.0790, low=1.0700),
        _bar(date(2025, 9, 2), high=1.0840, low=1.0710),
        _bar(date(2025, 9, 3), high=1.0700, low=1.0500),
    ]

    resolution = resolve(_eurusd_long(), bars)

    assert resolution.outcome is Outcome.TP_HIT
    assert resolution.hit_price == 1.0835
    assert resolution.hit_time == datetime(2025, 9, 2)
    assert resolution.bars_to_resolution == 2


def test_stop_checked_before_target_on_same_bar():
    bars = [_bar(date(2025, 9, 1), high=1.0900, low=1.0600)]

    resolution = resolve(_eurusd_long(), bars)

    assert resolution.outcome is Outcome.SL_HIT
    assert resolution.hit_price == 1.0680
    assert resolution.bars_to_resolution == 1


def test_short_stop_checked_before_target_on_same_bar():
    setup = TradeSetup(
        id="uj-2",
        instrument="USD/JPY",
        direction=Direction.SHORT,
        entry=148.65,
        take_profit=147.80,
        stop_loss=149.25,
        date=date(2025, 9, 1),
    )
    bars = [_bar(date(2025, 9, 1), high=149.50, low=147.50)]

    resolution = resolve(setup, bars)

    assert resolution.outcome is Outcome.SL_HIT
    assert resolution.hit_price == 149.25
    assert resolution.bars_to_resolution == 1


def test_short_stop_loss_hit():
    setup = TradeSetup(
        id="uj-1",
        instrument="USD/JPY",
        direction=Direction.SHORT,
        entry=148.65,
        take_profit=147.80,
        stop_loss=149.25,
        date=date(2025, 9, 1),
    )
    bars = [
        _bar(date(2025, 9, 1), high=148.90, low=148.20),
        _bar(date(2025, 9, 2), high=149.30, low=148.50),
    ]

    resolution = resolve(setup, bars)

    assert resolution.outcome is Outcome.SL_HIT
    assert resolution.hit_price == 149.25
    assert resolution.bars_to_resolution == 2


def test_no_bars_or_only_earlier_bars_stay_open():
    assert resolve(_eurusd_long(), []).outcome is Outcome.OPEN
    assert resolve(_eurusd_long(), []).bars_to_resolution == 0

    earlier = [_bar(date(2025, 8, 29), high=1.2, low=1.0)]
    resolution = resolve(_eurusd_long(), earlier)
    assert resolution.outcome is Outcome.OPEN
    assert resolution.bars_to_resolution == 0
    assert resolution.hit_price is None


def test_unset_stop_never_resolves_to_stop():
    setup = _eurusd_long(stop_loss=0.0)
    crash = [_bar(date(2025, 9, 1), high=1.0740, low=0.5)]

    open_resolution = resolve(setup, crash)
    assert open_resolution.outcome is Outcome.OPEN
    assert open_resolution.bars_to_resolution == 1

    rally = crash + [_bar(date(2025, 9, 2), high=1.0900, low=0.5)]
    assert resolve(setup, rally).outcome is Outcome.TP_HIT


def test_resolution_is_deterministic():
    bars = [
        _bar(date(2025, 9, 1), high=1.0790, low=1.0700),
        _bar(date(2025, 9, 2), high=1.0840, low=1.0710),
    ]
    assert resolve(_eurusd_long(), bars) == resolve(_eurusd_long(), bars)


def test_timezone_aware_bars_compare_against_setup_date():
    bars = [
        _bar(date(2025, 8, 31), high=1.0900, low=1.0700, tzinfo=timezone.utc),
        _bar(date(2025, 9, 1), high=1.0840, low=1.0700, tzinfo=timezone.utc),
    ]

    resolution = resolve(_eurusd_long(), bars)

    assert resolution.outcome is Outcome.TP_HIT
    assert resolution.bars_to_resolution == 1
