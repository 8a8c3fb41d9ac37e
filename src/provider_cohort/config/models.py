"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at load time using Pydantic.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from provider_cohort.domain.entities import SLOT_COUNT, EntityType


class PrimaryUniquenessPolicy(str, Enum):
    """What to do when a provider has more than one primary observation."""

    FAIL = "fail"
    WARN_KEEP_FIRST = "warn_keep_first"


class RecordFilterConfig(BaseModel):
    """Configuration for the record-level cohort candidate filter."""

    enabled: bool = True
    states: List[str] = Field(default_factory=lambda: ["HI", "ID"], min_length=1)
    entity_type: EntityType = EntityType.INDIVIDUAL
    min_update_year: int = Field(default=2008, ge=1900, le=2100)

    @field_validator("states")
    @classmethod
    def _upper_states(cls, value: List[str]) -> List[str]:
        return [s.strip().upper() for s in value]


class SpecialtyFilterConfig(BaseModel):
    """Configuration for the primary specialty inclusion predicate."""

    target_codes: List[str] = Field(
        default_factory=lambda: ["EM", "OBGYN"], min_length=1
    )

    @field_validator("target_codes")
    @classmethod
    def _strip_codes(cls, value: List[str]) -> List[str]:
        return [c.strip() for c in value]


class InvariantConfig(BaseModel):
    """Configuration for cohort invariant checks."""

    primary_uniqueness_policy: PrimaryUniquenessPolicy = PrimaryUniquenessPolicy.FAIL


class AggregationConfig(BaseModel):
    """Configuration for the aggregate stage."""

    max_plausible_age: float = Field(default=100, gt=0)
    decimal_places: int = Field(default=2, ge=0, le=6)


class LoaderConfig(BaseModel):
    """Column contract of the registry CSV."""

    id_column: str = "NPI"
    state_column: str = "provider_state"
    entity_type_column: str = "entity_type"
    last_updated_column: str = "last_updated"
    age_column: str = "provider_age"
    gender_column: str = "provider_gender"
    specialty_code_pattern: str = "specialty_code_{n}"
    primary_flag_pattern: str = "specialty_primary_{n}"
    slot_count: int = Field(default=SLOT_COUNT, ge=1, le=SLOT_COUNT)
    date_format: Optional[str] = Field(
        default=None, description="strftime format; None lets pandas infer ISO dates"
    )
    gender_labels: Dict[str, str] = Field(
        default_factory=lambda: {"F": "female", "M": "male"}
    )
    infer_entity_type_from_demographics: bool = False


class OutputConfig(BaseModel):
    """Configuration for the cohort extract."""

    extract_path: Optional[str] = None


class CohortConfig(BaseModel):
    """Root configuration object."""

    version: str = "1.0"
    record_filter: RecordFilterConfig = Field(default_factory=RecordFilterConfig)
    specialty_filter: SpecialtyFilterConfig = Field(
        default_factory=SpecialtyFilterConfig
    )
    invariants: InvariantConfig = Field(default_factory=InvariantConfig)
    aggregation: AggregationConfig = Field(default_factory=AggregationConfig)
    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
