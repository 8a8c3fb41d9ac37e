"""
In-Memory Metrics Collector.

Stores stage timings and row counts of a pipeline run in memory.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional


class InMemoryMetricsCollector:
    """Simple in-memory metrics collector."""

    def __init__(self) -> None:
        self._metrics: Dict[str, List[Dict[str, Any]]] = {}

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._record(name, "timing", duration_seconds, tags)

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._record(name, "count", value, tags)

    def entries(self, name: str) -> List[Dict[str, Any]]:
        """Raw entries recorded under ``name``."""
        return list(self._metrics.get(name, []))

    def get_metrics(self) -> Dict[str, Any]:
        """Summary per metric name: number of entries, total and last value."""
        summary = {}
        for name, entries in self._metrics.items():
            values = [e["value"] for e in entries]
            summary[name] = {
                "count": len(values),
                "total": sum(values),
                "last": values[-1],
            }
        return summary

    def clear(self) -> None:
        self._metrics.clear()

    def _record(
        self,
        name: str,
        metric_type: str,
        value: float,
        tags: Optional[Dict[str, str]],
    ) -> None:
        self._metrics.setdefault(name, []).append(
            {
                "type": metric_type,
                "value": value,
                "tags": tags or {},
                "timestamp": datetime.now().isoformat(),
            }
        )
