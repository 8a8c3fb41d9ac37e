"""
Cohort Pipeline - Main Orchestrator.

The CohortPipeline runs the stages in order on immutable tuples:

    load -> cohort_candidate_filter -> specialty_expansion
         -> primary_specialty_filter -> provider_uniqueness -> report

Each stage gets an audit entry (StageResult) and timing metrics.
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple, Union

from provider_cohort.adapters.console_logger import ConsoleAuditLogger
from provider_cohort.adapters.csv_provider import CsvRegistryProvider, write_extract
from provider_cohort.adapters.metrics_collector import InMemoryMetricsCollector
from provider_cohort.config.models import CohortConfig
from provider_cohort.domain.entities import (
    CohortRunResult,
    ProviderRecord,
    SpecialtyObservation,
)
from provider_cohort.domain.value_objects import StageResult
from provider_cohort.errors import InvariantViolation
from provider_cohort.filters.record_filter import CohortCandidateFilter
from provider_cohort.filters.specialty_filter import PrimarySpecialtyFilter
from provider_cohort.reporting.cohort_report import build_cohort_report
from provider_cohort.reshape.slot_expander import expand_specialty_slots
from provider_cohort.validation.cohort_validator import CohortValidator

logger = logging.getLogger(__name__)


class RegistryProviderProtocol(Protocol):
    """Protocol for registry loaders."""

    def load(self, path: Union[str, Path]) -> Tuple[ProviderRecord, ...]:
        ...


class AuditLoggerProtocol(Protocol):
    """Protocol for audit loggers."""

    def set_correlation_id(self, correlation_id: str) -> None:
        ...

    def log_stage_start(
        self, stage_name: str, input_count: int, metadata: Optional[Dict] = None
    ) -> None:
        ...

    def log_stage_end(
        self,
        stage_name: str,
        output_count: int,
        duration_seconds: float,
        metadata: Optional[Dict] = None,
    ) -> None:
        ...

    def log_record_filtered(
        self, provider_id: str, stage_name: str, reason: str
    ) -> None:
        ...

    def log_anomaly(
        self, message: str, severity: str, context: Optional[Dict] = None
    ) -> None:
        ...


class MetricsCollectorProtocol(Protocol):
    """Protocol for metrics collectors."""

    def record_timing(
        self, name: str, duration_seconds: float, tags: Optional[Dict] = None
    ) -> None:
        ...

    def record_count(
        self, name: str, value: int, tags: Optional[Dict] = None
    ) -> None:
        ...

    def get_metrics(self) -> Dict[str, Any]:
        ...


class CohortPipeline:
    """Main orchestrator for the cohort workflow."""

    def __init__(
        self,
        provider: RegistryProviderProtocol,
        config: CohortConfig,
        audit_logger: AuditLoggerProtocol,
        metrics_collector: MetricsCollectorProtocol,
        validator: Optional[CohortValidator] = None,
    ) -> None:
        """
        Initialize pipeline with all dependencies.

        Args:
            provider: Registry loader
            config: Cohort configuration
            audit_logger: For audit trail
            metrics_collector: For timing and count metrics
            validator: Provider uniqueness check (built from config if omitted)
        """
        self.provider = provider
        self.config = config
        self.audit_logger = audit_logger
        self.metrics_collector = metrics_collector
        self.validator = validator or CohortValidator(config.invariants)
        self.record_filter = CohortCandidateFilter(config.record_filter)
        self.specialty_filter = PrimarySpecialtyFilter(config.specialty_filter)

    def run(
        self,
        source: Union[str, Path],
        extract_path: Optional[Union[str, Path]] = None,
    ) -> CohortRunResult:
        """
        Load a registry file and run every stage.

        Args:
            source: Registry CSV path
            extract_path: Where to write the cohort extract; falls back to
                ``config.output.extract_path``, nothing written if both unset

        Returns:
            CohortRunResult

        Raises:
            MalformedInput: If the registry cannot be parsed
            InvariantViolation: If a provider has several primary
                observations and the policy is ``fail``
        """
        load_start = time.perf_counter()
        records = self.provider.load(source)
        self.metrics_collector.record_timing(
            "data_load_seconds", time.perf_counter() - load_start
        )

        result = self.run_records(records)

        target = extract_path or self.config.output.extract_path
        if target:
            written = write_extract(result.cohort, target)
            result.metadata["extract_path"] = str(written)
        return result

    def run_records(self, records: Sequence[ProviderRecord]) -> CohortRunResult:
        """Run every stage on already-loaded records."""
        start_time = time.perf_counter()
        correlation_id = str(uuid.uuid4())
        self.audit_logger.set_correlation_id(correlation_id)
        self.metrics_collector.record_count("input_records_total", len(records))
        audit_trail: List[StageResult] = []

        candidates = self._execute_filter_stage(records, audit_trail)

        observations = self._execute_stage(
            "specialty_expansion", candidates, expand_specialty_slots, audit_trail
        )
        selected = self._execute_stage(
            self.specialty_filter.name,
            observations,
            self.specialty_filter.apply,
            audit_trail,
        )

        violations: Dict[str, int] = {}

        def check(cohort: Tuple[SpecialtyObservation, ...]):
            try:
                report = self.validator.check_unique_providers(cohort)
            except InvariantViolation as e:
                self.audit_logger.log_anomaly(
                    str(e),
                    severity="ERROR",
                    context={"violators": len(e.violations)},
                )
                raise
            if not report.is_valid:
                violations.update(report.violations)
                self.audit_logger.log_anomaly(
                    f"{len(report.violations)} provider(s) with several primary "
                    f"observations, kept first ({report.dropped} dropped)",
                    severity="WARNING",
                    context={"violators": len(report.violations)},
                )
            return report.observations

        cohort = self._execute_stage("provider_uniqueness", selected, check, audit_trail)

        report = build_cohort_report(cohort, self.config.aggregation)
        if not report.age_overall.has_std_dev:
            self.audit_logger.log_anomaly(
                f"age standard deviation undefined (n={report.age_overall.n})",
                severity="WARNING",
            )

        total_duration = time.perf_counter() - start_time
        self.metrics_collector.record_timing("pipeline_total_seconds", total_duration)
        self.metrics_collector.record_count("cohort_size", len(cohort))
        logger.info(
            f"Cohort of {len(cohort)} providers from {len(records)} records "
            f"({total_duration:.3f}s)"
        )

        return CohortRunResult(
            correlation_id=correlation_id,
            input_count=len(records),
            cohort=cohort,
            report=report,
            audit_trail=audit_trail,
            invariant_violations=violations,
            metrics=self.metrics_collector.get_metrics(),
            metadata=self._build_metadata(correlation_id, total_duration),
        )

    def _execute_filter_stage(
        self,
        records: Sequence[ProviderRecord],
        audit_trail: List[StageResult],
    ) -> Tuple[ProviderRecord, ...]:
        """Execute the record filter, logging every rejected provider."""
        stage_name = self.record_filter.name
        stage_start = time.perf_counter()
        self.audit_logger.log_stage_start(stage_name, len(records))

        filter_result = self.record_filter.apply(records)
        passed = self.record_filter.select(records)

        stage_duration = time.perf_counter() - stage_start
        for provider_id, reason in filter_result.rejection_reasons.items():
            self.audit_logger.log_record_filtered(provider_id, stage_name, reason)

        self._finish_stage(stage_name, len(records), len(passed), stage_duration)
        self.metrics_collector.record_count(
            "records_filtered_total",
            filter_result.rejected_count,
            {"stage": stage_name},
        )
        audit_trail.append(
            StageResult(
                stage_name=stage_name,
                input_count=len(records),
                output_count=len(passed),
                duration_seconds=stage_duration,
                filter_reasons=filter_result.rejection_reasons,
            )
        )
        return passed

    def _execute_stage(
        self,
        stage_name: str,
        rows: Sequence[Any],
        stage: Callable[[Sequence[Any]], Tuple[Any, ...]],
        audit_trail: List[StageResult],
    ) -> Tuple[Any, ...]:
        """Execute a single tuple-to-tuple stage."""
        stage_start = time.perf_counter()
        self.audit_logger.log_stage_start(stage_name, len(rows))

        output = stage(rows)

        stage_duration = time.perf_counter() - stage_start
        self._finish_stage(stage_name, len(rows), len(output), stage_duration)
        audit_trail.append(
            StageResult(
                stage_name=stage_name,
                input_count=len(rows),
                output_count=len(output),
                duration_seconds=stage_duration,
            )
        )
        return output

    def _finish_stage(
        self, stage_name: str, input_count: int, output_count: int, duration: float
    ) -> None:
        self.audit_logger.log_stage_end(stage_name, output_count, duration)
        self.metrics_collector.record_timing(
            "stage_duration_seconds", duration, {"stage": stage_name}
        )
        logger.debug(f"{stage_name}: {input_count} -> {output_count} rows")

    def _build_metadata(self, correlation_id: str, duration: float) -> dict:
        return {
            "correlation_id": correlation_id,
            "timestamp": datetime.now().isoformat(),
            "duration_seconds": duration,
            "target_codes": sorted(self.config.specialty_filter.target_codes),
            "states": sorted(self.config.record_filter.states),
        }


def create_pipeline(
    config: Optional[CohortConfig] = None,
    audit_logger: Optional[AuditLoggerProtocol] = None,
    verbose: bool = False,
) -> CohortPipeline:
    """Build a pipeline with the CSV provider and default adapters."""
    config = config or CohortConfig()
    return CohortPipeline(
        provider=CsvRegistryProvider(config.loader),
        config=config,
        audit_logger=audit_logger or ConsoleAuditLogger(verbose=verbose),
        metrics_collector=InMemoryMetricsCollector(),
    )
