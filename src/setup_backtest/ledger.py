"""Read recorded trade setups and write simulation reports."""

from __future__ import annotations

import csv
import json
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional, Sequence

from setup_backtest.simulator.insights import (
    confidence_win_rate,
    direction_win_rates,
    instrument_breakdown,
    recorded_stats,
    top_instrument,
)
from setup_backtest.simulator.models import (
    Direction,
    RecordedStatus,
    SimulationResult,
    TradeSetup,
)

# Stored-setup column names accepted alongside the short engine names.
_ALIASES = {
    "entry": ("entry", "entry_price"),
    "take_profit": ("tp", "take_profit", "take_profit_1"),
    "stop_loss": ("sl", "stop_loss"),
    "date": ("date", "created_at"),
    "instrument": ("instrument", "symbol"),
}

_STATUS_ALIASES = {
    "tp hit": RecordedStatus.TP_HIT,
    "tp_hit": RecordedStatus.TP_HIT,
    "sl hit": RecordedStatus.SL_HIT,
    "sl_hit": RecordedStatus.SL_HIT,
    "open": RecordedStatus.OPEN,
}


def _pick(record: dict[str, Any], field: str) -> Any:
    for key in _ALIASES[field]:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def _price(value: Any, field: str) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid {field}: {value}") from exc


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = str(value).strip()
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value}") from exc


def _parse_status(value: Any) -> RecordedStatus:
    if value in (None, ""):
        return RecordedStatus.OPEN
    try:
        return _STATUS_ALIASES[str(value).strip().lower()]
    except KeyError as exc:
        raise ValueError(f"Invalid status: {value}") from exc


def setup_from_record(record: dict[str, Any], default_id: Optional[str] = None) -> TradeSetup:
    """Build a setup from either engine-style or stored-setup field names.

    Missing take-profit or stop-loss levels become 0, which the resolver
    treats as unset.
    """
    instrument = _pick(record, "instrument")
    if not instrument:
        raise ValueError("Missing required field: instrument")
    entry = _pick(record, "entry")
    if entry is None:
        raise ValueError("Missing required field: entry")
    created = _pick(record, "date")
    if created is None:
        raise ValueError("Missing required field: date")
    setup_id = record.get("id") or default_id
    if not setup_id:
        raise ValueError("Missing required field: id")
    confidence = record.get("confidence")
    if confidence == "":
        confidence = None

    return TradeSetup(
        id=str(setup_id),
        instrument=str(instrument).strip(),
        direction=Direction.parse(record.get("direction")),
        entry=_price(entry, "entry"),
        take_profit=_price(_pick(record, "take_profit"), "take_profit"),
        stop_loss=_price(_pick(record, "stop_loss"), "stop_loss"),
        date=_parse_date(created),
        confidence=_price(confidence, "confidence"),
        status=_parse_status(record.get("status")),
        user_id=record.get("user_id") or None,
    )


def _read_records(path: Path) -> list[dict[str, Any]]:
    if path.suffix.lower() == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(data, dict):
            data = data.get("setups", [])
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of setups in {path}")
        return data
    with path.open("r", encoding="utf-8", newline="") as handle:
        return list(csv.DictReader(handle))


def load_setups(path: str | Path) -> list[TradeSetup]:
    path = Path(path)
    setups = []
    for index, record in enumerate(_read_records(path), start=1):
        try:
            setups.append(setup_from_record(record, default_id=f"row-{index}"))
        except ValueError as exc:
            raise ValueError(f"{path.name} row {index}: {exc}") from exc
    return setups


def build_report(
    result: SimulationResult,
    setups: Optional[Sequence[TradeSetup]] = None,
    run_id: Optional[str] = None,
    config_hash: Optional[str] = None,
    settings: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    trades = result.simulated_trades
    top = top_instrument(trades)
    report: dict[str, Any] = {
        "run_id": run_id,
        "config_hash": config_hash,
        "settings": settings or {},
        "summary": asdict(result.stats),
        "trades": [trade.to_dict() for trade in trades],
        "equity_curve": [
            {
                "trade_id": point.trade_id,
                "time": point.time.isoformat() if point.time else None,
                "cumulative_pnl": point.cumulative_pnl,
            }
            for point in result.equity_curve
        ],
        "insights": {
            "instruments": [
                {**asdict(summary), "win_rate": summary.win_rate}
                for summary in instrument_breakdown(trades)
            ],
            "top_instrument": top.instrument if top else None,
            "direction_win_rates": {
                direction.value: rate for direction, rate in direction_win_rates(trades).items()
            },
            "high_confidence_win_rate": confidence_win_rate(trades),
        },
        "notices": list(result.notices),
    }
    if setups is not None:
        report["recorded"] = asdict(recorded_stats(setups))
    return report
