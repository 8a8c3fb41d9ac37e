"""
Domain Layer - Core Business Entities and Value Objects.

This package contains the core domain model for the provider cohort
pipeline. All entities here are pure Python with no external dependencies
(except Pydantic for validation).

Entities:
    - ProviderRecord: Wide registry row with up to 15 specialty slots
    - SpecialtySlot: One (specialty code, primary flag) pair
    - SpecialtyObservation: Long-form row per populated slot
    - CohortRunResult: Cohort, report and audit trail of a run

Value Objects:
    - FilterResult: Result of a record-level filter stage
    - StageResult: Audit entry for a pipeline stage
    - AgeSummary: Mean / sample SD with explicit "undefined" signalling
    - CohortReport: Numeric content of the report tables

Design Principles:
    - Immutable (frozen models)
    - No infrastructure dependencies
"""

from provider_cohort.domain.entities import (
    CohortRunResult,
    SLOT_COUNT,
    EntityType,
    PrimaryFlag,
    ProviderRecord,
    SpecialtyObservation,
    SpecialtySlot,
)
from provider_cohort.domain.value_objects import (
    AgeSummary,
    CohortReport,
    FilterResult,
    StageResult,
)

__all__ = [
    "CohortRunResult",
    "SLOT_COUNT",
    "EntityType",
    "PrimaryFlag",
    "ProviderRecord",
    "SpecialtyObservation",
    "SpecialtySlot",
    "AgeSummary",
    "CohortReport",
    "FilterResult",
    "StageResult",
]
