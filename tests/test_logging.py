"""Tests for structlog configuration."""

import json
import logging

import pytest

from market_report.logging import _resolve_level, configure_logging, get_logger


class TestResolveLevel:
    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            (logging.DEBUG, logging.DEBUG),
            ("warning", logging.WARNING),
            (" ERROR ", logging.ERROR),
            ("chatty", logging.INFO),
        ],
    )
    def test_levels(self, level: int | str, expected: int) -> None:
        assert _resolve_level(level) == expected


class TestConfigureLogging:
    def test_json_events_on_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=True, level="info")
        get_logger("market_report.test").info("report_served", area="jupiter")
        captured = capsys.readouterr()
        assert captured.out == ""
        event = json.loads(captured.err.strip())
        assert event["event"] == "report_served"
        assert event["area"] == "jupiter"
        assert event["level"] == "info"
        assert "timestamp" in event

    def test_level_filters_events(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=True, level="WARNING")
        log = get_logger("market_report.test")
        log.info("quiet")
        log.warning("loud")
        lines = capsys.readouterr().err.strip().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["loud"]

    def test_reconfiguring_applies_to_existing_loggers(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        log = get_logger("market_report.test")
        configure_logging(json_output=True, level="WARNING")
        log.debug("hidden")
        configure_logging(json_output=True, level="DEBUG")
        log.debug("shown")
        lines = capsys.readouterr().err.strip().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["shown"]
