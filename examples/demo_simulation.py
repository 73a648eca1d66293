import asyncio
from datetime import date, datetime

from setup_backtest import BacktestSimulator
from setup_backtest.data import StaticPriceProvider, Unsupported
from setup_backtest.simulator import Direction, PriceBar, TradeSetup


def bar(day: int, open_: float, high: float, low: float, close: float) -> PriceBar:
    return PriceBar(time=datetime(2024, 6, day), open=open_, high=high, low=low, close=close)


provider = StaticPriceProvider(
    {
        "EUR/USD": [
            bar(3, 1.1000, 1.1020, 1.0980, 1.1010),
            bar(4, 1.1010, 1.1060, 1.1000, 1.1040),
            bar(5, 1.1040, 1.1090, 1.1030, 1.1070),
        ],
        "BTC/USD": [
            bar(3, 68000, 69000, 67000, 68500),
            bar(4, 68500, 68800, 66500, 67000),
        ],
        "COFFEE": Unsupported("COFFEE"),
    }
)

setups = [
    TradeSetup("a", "EUR/USD", Direction.LONG, 1.1000, 1.1050, 1.0950, date(2024, 6, 3), confidence=85),
    TradeSetup("b", "BTC/USD", Direction.LONG, 68000, 70000, 66800, date(2024, 6, 3), confidence=60),
    TradeSetup("c", "EUR/USD", Direction.SHORT, 1.1040, 1.0990, 1.1200, date(2024, 6, 4)),
    TradeSetup("d", "COFFEE", Direction.LONG, 220.0, 230.0, 215.0, date(2024, 6, 3)),
]

result = asyncio.run(BacktestSimulator(provider).run(setups, position_size=1.0, leverage=100))
for trade in result.simulated_trades:
    print(f"{trade.id} {trade.instrument:8} {trade.outcome.value:16} {trade.pnl_usd:10.2f} {trade.pnl_percent:8.2f}%")
stats = result.stats
print("Total P&L:", round(stats.total_pnl, 2))
print("Win rate:", round(stats.win_rate, 1))
print("Profit factor:", round(stats.profit_factor, 2))
print("Max drawdown:", round(stats.max_drawdown, 2))
