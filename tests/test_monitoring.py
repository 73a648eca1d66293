import logging
import logging.handlers

from setup_backtest.monitoring import (
    AuditLog,
    CollectingNotifier,
    LogNotifier,
    SimulationMonitor,
    setup_logging,
)
from setup_backtest.config import BacktestConfig
from setup_backtest.runtime import create_run_context


def test_audit_log_appends_json_lines(tmp_path):
    audit = AuditLog(tmp_path / "nested" / "audit.log", run_id="run-1", config_hash="abc")
    audit.log("simulation_started", {"setups": 3})
    audit.log("simulation_finished", {"trades": 3})

    events = audit.read()

    assert [event["event"] for event in events] == ["simulation_started", "simulation_finished"]
    assert events[0]["payload"] == {"setups": 3}
    assert events[0]["config_hash"] == "abc"
    assert events[0]["ts"].endswith("Z")


def test_monitor_routes_events_to_notifier():
    notifier = CollectingNotifier()
    monitor = SimulationMonitor(notifier)

    message = monitor.no_data("EUR/USD", "HTTP 500")
    monitor.not_supported("COFFEE", "futures")
    monitor.group_error("GBP/USD", RuntimeError("boom"))

    assert message == "No data for EUR/USD: HTTP 500"
    assert [event for event, _ in notifier.messages] == ["NO_DATA", "NOT_SUPPORTED", "GROUP_ERROR"]


def test_log_notifier_writes_warning(caplog):
    notifier = LogNotifier(prefix="[TEST]")
    with caplog.at_level(logging.WARNING, logger="setup_backtest.notifications"):
        notifier.notify("NO_DATA", "No data for EUR/USD")
    assert "[TEST] NO_DATA: No data for EUR/USD" in caplog.text


def test_setup_logging_adds_rotating_file(tmp_path):
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        for handler in saved_handlers:
            root.removeHandler(handler)
        logger = setup_logging("debug", tmp_path / "logs", console_output=False)
        logging.getLogger("setup_backtest.test").info("hello")
        handlers = list(logger.handlers)
        for handler in handlers:
            handler.close()
            logger.removeHandler(handler)
    finally:
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)

    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.handlers.RotatingFileHandler)
    assert "hello" in (tmp_path / "logs" / "backtest.log").read_text(encoding="utf-8")


def test_run_context_builds_run_id(tmp_path):
    path = tmp_path / "backtest.yaml"
    path.write_text("name: x\nversion: 1\n", encoding="utf-8")
    config = BacktestConfig(name="x", version="1", run_id_prefix="backtest")

    context = create_run_context(path, config)
    audit = context.audit_log(tmp_path / "audit.log")

    assert context.run_id.startswith("backtest-")
    assert context.run_id.endswith(context.config_hash[:8])
    assert audit.run_id == context.run_id
    assert context.to_dict()["config_version"] == "1"
    assert create_run_context(path, config, run_id="fixed").run_id == "fixed"
