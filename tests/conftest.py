"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

import pytest

from provider_cohort.adapters.console_logger import ConsoleAuditLogger
from provider_cohort.adapters.metrics_collector import InMemoryMetricsCollector
from provider_cohort.config.models import (
    AggregationConfig,
    CohortConfig,
    RecordFilterConfig,
    SpecialtyFilterConfig,
)
from provider_cohort.domain.entities import (
    EntityType,
    PrimaryFlag,
    ProviderRecord,
    SpecialtyObservation,
    SpecialtySlot,
)

SlotSpec = Tuple[Optional[str], Optional[str]]


def build_record(
    provider_id: str,
    state: str = "HI",
    entity_type: EntityType = EntityType.INDIVIDUAL,
    last_updated: date = date(2012, 5, 1),
    age: Optional[float] = 45,
    gender: Optional[str] = "female",
    slots: Sequence[SlotSpec] = (("EM", "Y"),),
) -> ProviderRecord:
    """Build a ProviderRecord from (code, flag) tuples."""
    return ProviderRecord(
        provider_id=provider_id,
        state=state,
        entity_type=entity_type,
        last_updated=last_updated,
        age=age,
        gender=gender,
        specialty_slots=tuple(
            SpecialtySlot(
                specialty_code=code,
                is_primary=PrimaryFlag(flag) if flag else None,
            )
            for code, flag in slots
        ),
    )


def build_observation(
    provider_id: str,
    state: str = "HI",
    age: Optional[float] = 45,
    gender: Optional[str] = "female",
    specialty_code: str = "EM",
    is_primary: Optional[PrimaryFlag] = PrimaryFlag.YES,
    slot_index: int = 1,
) -> SpecialtyObservation:
    """Build a cohort observation directly."""
    return SpecialtyObservation(
        provider_id=provider_id,
        state=state,
        entity_type=EntityType.INDIVIDUAL,
        last_updated=date(2012, 5, 1),
        age=age,
        gender=gender,
        slot_index=slot_index,
        specialty_code=specialty_code,
        is_primary=is_primary,
    )


@pytest.fixture
def make_record() -> Callable[..., ProviderRecord]:
    """Factory for ProviderRecord objects."""
    return build_record


@pytest.fixture
def make_observation() -> Callable[..., SpecialtyObservation]:
    """Factory for SpecialtyObservation objects."""
    return build_observation


@pytest.fixture
def sample_config_path() -> Path:
    """Path to the repository's default configuration file."""
    return Path(__file__).parent.parent / "config" / "default.yaml"


@pytest.fixture
def console_logger() -> ConsoleAuditLogger:
    """Create console logger for testing."""
    return ConsoleAuditLogger(verbose=False)


@pytest.fixture
def metrics_collector() -> InMemoryMetricsCollector:
    """Create metrics collector for testing."""
    return InMemoryMetricsCollector()


@pytest.fixture
def default_config() -> CohortConfig:
    """Create default cohort configuration."""
    return CohortConfig()


@pytest.fixture
def record_filter_config() -> RecordFilterConfig:
    """Hawaii and Idaho individuals updated since 2008."""
    return RecordFilterConfig(
        enabled=True,
        states=["HI", "ID"],
        entity_type=EntityType.INDIVIDUAL,
        min_update_year=2008,
    )


@pytest.fixture
def specialty_filter_config() -> SpecialtyFilterConfig:
    """Emergency medicine and obstetrics/gynecology."""
    return SpecialtyFilterConfig(target_codes=["EM", "OBGYN"])


@pytest.fixture
def aggregation_config() -> AggregationConfig:
    return AggregationConfig(max_plausible_age=100, decimal_places=2)


@pytest.fixture
def sample_records() -> List[ProviderRecord]:
    """Mixed registry records around the default filter boundaries."""
    return [
        build_record("1000000001", state="HI", slots=[("EM", "Y")]),
        build_record(
            "1000000002",
            state="ID",
            gender="male",
            slots=[("FM", "N"), (None, None), ("OBGYN", "Y")],
        ),
        # Wrong state
        build_record("1000000003", state="CA"),
        # Organization
        build_record(
            "1000000004",
            entity_type=EntityType.ORGANIZATION,
            age=None,
            gender=None,
        ),
        # Stale update
        build_record("1000000005", state="ID", last_updated=date(2007, 12, 31)),
        # Boundary: first day of the floor year
        build_record("1000000006", state="ID", last_updated=date(2008, 1, 1)),
    ]
