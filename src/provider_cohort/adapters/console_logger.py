"""
Console Audit Logger.

A simple audit logger that prints pipeline progress to the console.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional


class ConsoleAuditLogger:
    """Simple console-based audit logger."""

    def __init__(self, verbose: bool = True) -> None:
        """
        Initialize console logger.

        Args:
            verbose: If True, log every rejected record. If False, only summaries.
        """
        self._verbose = verbose
        self._correlation_id: Optional[str] = None

    def set_correlation_id(self, correlation_id: str) -> None:
        """Set correlation ID for subsequent log entries."""
        self._correlation_id = correlation_id

    def log_stage_start(
        self,
        stage_name: str,
        input_count: int,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        if self._verbose:
            self._log("INFO", f"Starting {stage_name} with {input_count} rows")

    def log_stage_end(
        self,
        stage_name: str,
        output_count: int,
        duration_seconds: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._log(
            "INFO",
            f"Completed {stage_name}: {output_count} rows "
            f"({duration_seconds:.3f}s)",
        )

    def log_record_filtered(
        self,
        provider_id: str,
        stage_name: str,
        reason: str,
    ) -> None:
        if self._verbose:
            self._log("DEBUG", f"{provider_id} filtered by {stage_name}: {reason}")

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._log(severity, f"ANOMALY: {message}")

    def _log(self, level: str, message: str) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S")
        corr_id = self._correlation_id[:8] if self._correlation_id else "--------"
        print(f"[{timestamp}] [{corr_id}] [{level:5}] {message}")
