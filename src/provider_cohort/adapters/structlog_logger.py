"""
Structlog Audit Logger.

Emits the pipeline audit trail as structured events via structlog, with
the run's correlation ID bound through structlog.contextvars. Events are
also kept in memory so a run can be inspected after the fact.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog


def configure_structlog(use_json: bool = True, log_level: int = logging.INFO) -> None:
    """Configure structlog processors for the audit trail."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


class StructlogAuditLogger:
    """Audit logger writing structured events."""

    def __init__(self, service_name: str = "provider_cohort") -> None:
        self.service_name = service_name
        self._logger = structlog.get_logger(service_name)
        self._events: List[Dict[str, Any]] = []

    @property
    def events(self) -> List[Dict[str, Any]]:
        """Events recorded so far, oldest first."""
        return list(self._events)

    def set_correlation_id(self, correlation_id: str) -> None:
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

    def log_stage_start(
        self,
        stage_name: str,
        input_count: int,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._emit(
            "stage_start",
            {"stage": stage_name, "input_count": input_count, **(metadata or {})},
        )

    def log_stage_end(
        self,
        stage_name: str,
        output_count: int,
        duration_seconds: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._emit(
            "stage_end",
            {
                "stage": stage_name,
                "output_count": output_count,
                "duration_seconds": round(duration_seconds, 6),
                **(metadata or {}),
            },
        )

    def log_record_filtered(
        self,
        provider_id: str,
        stage_name: str,
        reason: str,
    ) -> None:
        self._emit(
            "record_filtered",
            {"stage": stage_name, "provider_id": provider_id, "reason": reason},
            level="debug",
        )

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._emit(
            "anomaly",
            {"message": message, **(context or {})},
            level=severity.lower(),
        )

    def _emit(self, event_type: str, data: Dict[str, Any], level: str = "info") -> None:
        event = {
            "event_type": event_type,
            "timestamp": datetime.now().isoformat(),
            **data,
        }
        self._events.append(event)
        log_method = getattr(self._logger, level, self._logger.info)
        log_method(event_type, **data)
