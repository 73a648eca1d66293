"""Run identity for a backtest invocation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from setup_backtest.config.loader import compute_config_hash
from setup_backtest.config.models import BacktestConfig
from setup_backtest.monitoring.audit import AuditLog


@dataclass(frozen=True)
class RunContext:
    run_id: str
    config_name: str
    config_version: str
    config_path: Path
    config_hash: str
    started_at: datetime

    def audit_log(self, path: str | Path) -> AuditLog:
        return AuditLog(path, run_id=self.run_id, config_hash=self.config_hash)

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "config_name": self.config_name,
            "config_version": self.config_version,
            "config_path": str(self.config_path),
            "config_hash": self.config_hash,
            "started_at_utc": self.started_at.isoformat(),
        }


def create_run_context(
    config_path: str | Path,
    config: BacktestConfig,
    run_id: Optional[str] = None,
) -> RunContext:
    """Identify a run by config prefix, UTC start time and the config file's hash."""
    path = Path(config_path)
    config_hash = compute_config_hash(path)
    started_at = datetime.now(timezone.utc)
    if run_id is None:
        stamp = started_at.strftime("%Y%m%dT%H%M%SZ")
        run_id = f"{config.run_id_prefix}-{stamp}-{config_hash[:8]}"
    return RunContext(
        run_id=run_id,
        config_name=config.name,
        config_version=config.version,
        config_path=path,
        config_hash=config_hash,
        started_at=started_at,
    )
