"""
Unit Tests: Structured Logging

Tests:
    - Extra fields and run context on records
    - JSON formatting
"""

import io
import json
import logging

import pytest

from beaconscale.observability.logging import (
    JsonFormatter,
    KeyValueFormatter,
    LogLevel,
    StructuredLogger,
    current_context,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestStructuredLogger:
    """Tests for StructuredLogger."""

    def test_extra_fields(self, caplog):
        log = StructuredLogger("beaconscale.test")
        with caplog.at_level(logging.INFO, logger="beaconscale.test"):
            log.info("Analysis started", target_concurrency=150)

        assert caplog.records[-1].target_concurrency == 150

    def test_context(self, caplog):
        log = StructuredLogger("beaconscale.test")
        with caplog.at_level(logging.INFO, logger="beaconscale.test"):
            with StructuredLogger.context(run_id="abc123"):
                assert current_context() == {"run_id": "abc123"}
                log.info("inside")
            log.info("outside")

        inside, outside = caplog.records[-2:]
        assert inside.run_id == "abc123"
        assert not hasattr(outside, "run_id")
        assert current_context() == {}

    def test_with_extra(self, caplog):
        log = StructuredLogger("beaconscale.test").with_extra(scenario="session_creation")
        with caplog.at_level(logging.WARNING, logger="beaconscale.test"):
            log.warning("slow")

        assert caplog.records[-1].scenario == "session_creation"

    def test_level_filtering(self, caplog):
        log = StructuredLogger("beaconscale.test")
        with caplog.at_level(logging.WARNING, logger="beaconscale.test"):
            log.debug("hidden")

        assert not [r for r in caplog.records if r.getMessage() == "hidden"]


class TestJsonFormatter:
    """Tests for JSON output."""

    def test_format(self):
        logger = logging.getLogger("beaconscale.json")
        record = logger.makeRecord(
            "beaconscale.json", logging.INFO, __file__, 1, "Verdict ready", (), None,
            extra={"rating": "POOR"},
        )
        data = json.loads(JsonFormatter().format(record))

        assert data["message"] == "Verdict ready"
        assert data["level"] == "INFO"
        assert data["logger"] == "beaconscale.json"
        assert data["rating"] == "POOR"
        assert "@timestamp" in data

    def test_key_value(self):
        logger = logging.getLogger("beaconscale.text")
        record = logger.makeRecord(
            "beaconscale.text", logging.WARNING, __file__, 1, "Pool saturated", (), None,
            extra={"waiting": 30},
        )
        line = KeyValueFormatter().format(record)

        assert "Pool saturated" in line
        assert line.endswith("| waiting=30")

    def test_setup_logging(self, restore_root_logger):
        stream = io.StringIO()
        setup_logging(LogLevel.INFO, json_output=True, stream=stream)

        with StructuredLogger.context(run_id="r-1"):
            StructuredLogger("beaconscale.setup").info("hello", users=10)

        data = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert data["message"] == "hello"
        assert data["run_id"] == "r-1"
        assert data["users"] == 10
