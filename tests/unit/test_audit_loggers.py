"""
Unit Tests for the audit loggers and metrics collector.

Test Aspects Covered:
    ✅ Business Logic: Stage events, correlation id binding, metric summaries
"""

from __future__ import annotations

import logging

import pytest
import structlog

from provider_cohort.adapters.console_logger import ConsoleAuditLogger
from provider_cohort.adapters.metrics_collector import InMemoryMetricsCollector
from provider_cohort.adapters.structlog_logger import (
    StructlogAuditLogger,
    configure_structlog,
)


@pytest.fixture
def structlog_logger():
    configure_structlog(use_json=True, log_level=logging.DEBUG)
    yield StructlogAuditLogger()
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


class TestStructlogAuditLogger:

    def test_records_stage_events(self, structlog_logger, capsys) -> None:
        """
        SCENARIO: Stage start and end logged
        EXPECTED: Events kept in order and emitted as JSON with correlation id
        """
        # Arrange
        structlog_logger.set_correlation_id("abc-123")

        # Act
        structlog_logger.log_stage_start("cohort_candidate_filter", 10)
        structlog_logger.log_stage_end("cohort_candidate_filter", 4, 0.01)

        # Assert
        events = structlog_logger.events
        assert [e["event_type"] for e in events] == ["stage_start", "stage_end"]
        assert events[1]["output_count"] == 4
        out = capsys.readouterr().out
        assert '"correlation_id": "abc-123"' in out
        assert '"stage": "cohort_candidate_filter"' in out

    def test_records_filtered_and_anomalies(self, structlog_logger) -> None:
        structlog_logger.log_record_filtered("123", "cohort_candidate_filter", "state=CA")
        structlog_logger.log_anomaly("2 violators", "WARNING", {"violators": 2})

        record_event, anomaly = structlog_logger.events
        assert record_event["provider_id"] == "123"
        assert anomaly["message"] == "2 violators"
        assert anomaly["violators"] == 2


class TestConsoleAuditLogger:

    def test_prints_stage_summary(self, capsys) -> None:
        logger = ConsoleAuditLogger(verbose=False)
        logger.set_correlation_id("12345678-aaaa")

        logger.log_stage_start("specialty_expansion", 5)
        logger.log_record_filtered("1", "cohort_candidate_filter", "state=CA")
        logger.log_stage_end("specialty_expansion", 9, 0.002)

        out = capsys.readouterr().out
        assert "Starting" not in out
        assert "filtered by" not in out
        assert "[12345678]" in out
        assert "Completed specialty_expansion: 9 rows" in out


class TestInMemoryMetricsCollector:

    def test_summarizes_metrics(self) -> None:
        collector = InMemoryMetricsCollector()

        collector.record_count("records_filtered_total", 3, {"stage": "a"})
        collector.record_count("records_filtered_total", 2, {"stage": "b"})
        collector.record_timing("pipeline_total_seconds", 0.5)

        metrics = collector.get_metrics()
        assert metrics["records_filtered_total"] == {"count": 2, "total": 5, "last": 2}
        assert metrics["pipeline_total_seconds"]["last"] == 0.5
        assert collector.entries("records_filtered_total")[0]["tags"] == {"stage": "a"}

    def test_clear(self) -> None:
        collector = InMemoryMetricsCollector()
        collector.record_count("x", 1)

        collector.clear()

        assert collector.get_metrics() == {}
