from __future__ import annotations

import argparse
import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path

from setup_backtest import BacktestSimulator
from setup_backtest.config import build_provider, load_config, serialize_config
from setup_backtest.ledger import build_report, load_setups
from setup_backtest.monitoring import CollectingNotifier, SimulationMonitor, setup_logging
from setup_backtest.runtime import create_run_context


async def _run(args: argparse.Namespace) -> dict:
    config_path = Path(args.config)
    config = load_config(config_path)
    setup_logging(config.monitoring.log_level, config.monitoring.log_dir)

    settings = config.simulation
    position_size = args.position_size if args.position_size is not None else settings.position_size
    leverage = args.leverage if args.leverage is not None else settings.leverage
    extend_days = args.extend_days if args.extend_days is not None else settings.extend_days

    context = create_run_context(config_path, config)
    audit_log = context.audit_log(config.monitoring.audit_log_path)
    setups = load_setups(args.setups)
    provider = build_provider(config)
    simulator = BacktestSimulator(
        provider,
        monitor=SimulationMonitor(CollectingNotifier()),
        audit_log=audit_log,
        isolate_group_errors=settings.isolate_group_errors,
        fetch_concurrency=settings.fetch_concurrency,
    )
    try:
        result = await simulator.run(
            setups,
            position_size,
            leverage,
            extend_days=extend_days,
            interval=settings.interval,
        )
    finally:
        await provider.close()

    report = build_report(
        result,
        setups=setups,
        run_id=context.run_id,
        config_hash=context.config_hash,
        settings={
            "position_size": position_size,
            "leverage": leverage,
            "extend_days": extend_days,
            "interval": settings.interval,
        },
    )
    report["generated_at_utc"] = datetime.now(timezone.utc).isoformat()
    report["run"] = context.to_dict()
    report["config"] = serialize_config(config)
    return report


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", required=True)
    parser.add_argument("--setups", required=True)
    parser.add_argument("--output", required=True)
    parser.add_argument("--position-size", type=float, default=None)
    parser.add_argument("--leverage", type=float, default=None)
    parser.add_argument("--extend-days", type=int, default=None)
    args = parser.parse_args()

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    report = asyncio.run(_run(args))
    output_path.write_text(json.dumps(report, indent=2, default=str), encoding="utf-8")
    summary = report["summary"]
    print(
        f"Simulated {summary['total_trades']} setups: "
        f"P&L {summary['total_pnl']:.2f}, win rate {summary['win_rate']:.1f}%"
    )
    for notice in report["notices"]:
        print(f"  ! {notice}")
    print(f"Wrote {output_path}")


if __name__ == "__main__":
    main()
