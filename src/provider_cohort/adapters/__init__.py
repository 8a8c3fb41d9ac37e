"""
Adapters Package - Infrastructure Implementations.

Providers:
    - CsvRegistryProvider: Wide registry CSV -> ProviderRecord
    - write_extract / read_extract: Cohort extract CSV

Loggers:
    - ConsoleAuditLogger: Simple console output
    - StructlogAuditLogger: Structured events via structlog

Metrics:
    - InMemoryMetricsCollector: Simple in-memory collection

Design Principles:
    - Easily swappable via Dependency Injection
    - No business logic in adapters
"""

from provider_cohort.adapters.console_logger import ConsoleAuditLogger
from provider_cohort.adapters.csv_provider import (
    EXTRACT_COLUMNS,
    CsvRegistryProvider,
    read_extract,
    to_extract_row,
    write_extract,
)
from provider_cohort.adapters.metrics_collector import InMemoryMetricsCollector
from provider_cohort.adapters.structlog_logger import (
    StructlogAuditLogger,
    configure_structlog,
)

__all__ = [
    "ConsoleAuditLogger",
    "CsvRegistryProvider",
    "EXTRACT_COLUMNS",
    "read_extract",
    "to_extract_row",
    "write_extract",
    "InMemoryMetricsCollector",
    "StructlogAuditLogger",
    "configure_structlog",
]
