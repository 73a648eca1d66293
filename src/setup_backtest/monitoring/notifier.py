"""Notification backends."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field


class Notifier:
    def notify(self, event: str, message: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError


@dataclass
class LogNotifier(Notifier):
    prefix: str = "[BACKTEST]"
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("setup_backtest.notifications"))

    def notify(self, event: str, message: str) -> None:
        self.logger.warning("%s %s: %s", self.prefix, event, message)


@dataclass
class CollectingNotifier(Notifier):
    """Keep notifications in memory so a caller can surface them after a run."""

    messages: list[tuple[str, str]] = field(default_factory=list)

    def notify(self, event: str, message: str) -> None:
        self.messages.append((event, message))
