"""
Test that monitor_logging can be imported without circular import and logger works.
"""

from __future__ import annotations

import json


def test_logging_import():
    """Import get_logger from monitor_logging and use the logger."""
    from transfer_monitor.monitor_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")


def test_json_output_goes_to_stderr(capsys):
    """Log lines are JSON on stderr with event_type, level and bound slot."""
    from transfer_monitor.monitor_logging import bind_slot, configure_structlog

    configure_structlog(level="INFO", fmt="json")
    bind_slot(250684537).info("walker_block_transfers", transfer_count=2)
    captured = capsys.readouterr()
    assert captured.out == ""
    record = json.loads(captured.err.strip().splitlines()[-1])
    assert record["event_type"] == "walker_block_transfers"
    assert record["slot"] == 250684537
    assert record["level"] == "info"
    assert "timestamp" in record


def test_level_filtering(capsys):
    from transfer_monitor.monitor_logging import configure_structlog, get_logger

    configure_structlog(level="WARNING", fmt="json")
    try:
        get_logger("test").info("hidden_event")
        assert capsys.readouterr().err == ""
    finally:
        configure_structlog(level="INFO", fmt="json")


def test_module_logger_carries_its_name(capsys):
    """get_logger(name) renders the module name under the logger key."""
    from transfer_monitor.monitor_logging import configure_structlog, get_logger

    configure_structlog(level="INFO", fmt="json")
    get_logger("transfer_monitor.solana_listener.walker").info("walker_block_transfers")
    record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert record["logger"] == "transfer_monitor.solana_listener.walker"
    assert "logger_name" not in record


def test_logger_created_before_reconfigure_follows_new_level(capsys):
    """Module-level loggers are created at import; --log-level must still apply."""
    from transfer_monitor.monitor_logging import configure_structlog, get_logger

    configure_structlog(level="INFO", fmt="json")
    logger = get_logger("test")
    configure_structlog(level="ERROR", fmt="json")
    try:
        logger.warning("filtered_event")
        assert capsys.readouterr().err == ""
        logger.error("kept_event")
        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["event_type"] == "kept_event"
    finally:
        configure_structlog(level="INFO", fmt="json")
