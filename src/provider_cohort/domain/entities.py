"""
Core Domain Entities.

This module defines the fundamental entities of the provider cohort domain:
the wide registry record as loaded, and the long-form specialty observation
derived from it.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from provider_cohort.domain.value_objects import CohortReport, StageResult

# Number of declared (specialty code, primary flag) pairs per registry row
SLOT_COUNT = 15


class EntityType(str, Enum):
    """Classification of a registry record."""

    INDIVIDUAL = "individual"
    ORGANIZATION = "organization"


class PrimaryFlag(str, Enum):
    """Primary-specialty switch of a specialty slot."""

    YES = "Y"
    NO = "N"


class SpecialtySlot(BaseModel):
    """One of the fixed-position specialty declarations of a provider."""

    specialty_code: Optional[str] = Field(default=None, description="Taxonomy code")
    is_primary: Optional[PrimaryFlag] = Field(default=None, description="Y/N flag")

    model_config = {"frozen": True}

    @field_validator("specialty_code")
    @classmethod
    def _blank_is_missing(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @property
    def is_populated(self) -> bool:
        return self.specialty_code is not None


class ProviderRecord(BaseModel):
    """A registry entry in wide form, one row per provider."""

    provider_id: str = Field(..., description="NPI or other unique identifier")
    state: str = Field(..., description="Two-letter jurisdiction code")
    entity_type: EntityType = Field(..., description="Individual or organization")
    last_updated: date = Field(..., description="Date of the last registry update")
    age: Optional[float] = Field(default=None, description="Provider age in years")
    gender: Optional[str] = Field(default=None, description="Normalized gender label")
    specialty_slots: Tuple[SpecialtySlot, ...] = Field(
        default_factory=tuple, description="Declared specialties in slot order"
    )

    model_config = {"frozen": True}

    @field_validator("specialty_slots")
    @classmethod
    def _check_slot_count(
        cls, value: Tuple[SpecialtySlot, ...]
    ) -> Tuple[SpecialtySlot, ...]:
        if len(value) > SLOT_COUNT:
            raise ValueError(
                f"at most {SLOT_COUNT} specialty slots allowed, got {len(value)}"
            )
        return value

    @property
    def populated_slot_count(self) -> int:
        """Number of slots carrying a specialty code."""
        return sum(1 for slot in self.specialty_slots if slot.is_populated)


class SpecialtyObservation(BaseModel):
    """A (provider, populated slot) pair in long form."""

    provider_id: str
    state: str
    entity_type: EntityType
    last_updated: date
    age: Optional[float] = None
    gender: Optional[str] = None
    slot_index: int = Field(
        default=0, ge=0, description="1-based slot position, 0 when unknown"
    )
    specialty_code: str
    is_primary: Optional[PrimaryFlag] = None

    model_config = {"frozen": True}

    @classmethod
    def from_slot(
        cls,
        record: ProviderRecord,
        slot_index: int,
        slot: SpecialtySlot,
    ) -> "SpecialtyObservation":
        """Build an observation carrying the parent's shared fields."""
        return cls(
            provider_id=record.provider_id,
            state=record.state,
            entity_type=record.entity_type,
            last_updated=record.last_updated,
            age=record.age,
            gender=record.gender,
            slot_index=slot_index,
            specialty_code=slot.specialty_code,
            is_primary=slot.is_primary,
        )

    @property
    def is_primary_specialty(self) -> bool:
        return self.is_primary is PrimaryFlag.YES


class CohortRunResult(BaseModel):
    """Complete result of a pipeline run."""

    correlation_id: str
    input_count: int = Field(..., description="Registry records loaded")
    cohort: Tuple[SpecialtyObservation, ...] = Field(default_factory=tuple)
    report: CohortReport
    audit_trail: List[StageResult] = Field(default_factory=list)
    invariant_violations: Dict[str, int] = Field(
        default_factory=dict, description="Provider id -> primary observation count"
    )
    metrics: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def output_count(self) -> int:
        return len(self.cohort)

    def stage(self, name: str) -> Optional[StageResult]:
        """Audit entry of the named stage, if it ran."""
        for entry in self.audit_trail:
            if entry.stage_name == name:
                return entry
        return None
