"""
Value Objects for Domain Layer.

Value objects are immutable results produced by the pipeline stages:
filter outcomes, stage audit entries, age summaries and the cohort report.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from provider_cohort.errors import InsufficientData


# =============================================================================
# Type Aliases for improved readability
# =============================================================================

# Tuple of attribute values identifying a group
GroupKey = Tuple[Any, ...]

# Group key -> count
GroupCounts = Dict[GroupKey, int]

# Group key -> fraction in [0, 1], rounded
GroupPercentages = Dict[GroupKey, float]

# Rejection reasons: provider id -> reason string
RejectionReasonsDict = Dict[str, str]


class FilterResult(BaseModel):
    """Result of applying a single record-level filter stage."""

    passed_ids: List[str] = Field(
        default_factory=list, description="Provider ids that passed"
    )
    rejected_ids: List[str] = Field(
        default_factory=list, description="Provider ids that were rejected"
    )
    rejection_reasons: Dict[str, str] = Field(
        default_factory=dict, description="Provider id -> rejection reason"
    )

    model_config = {"frozen": True}

    @property
    def passed_count(self) -> int:
        return len(self.passed_ids)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected_ids)


class StageResult(BaseModel):
    """Result of a single pipeline stage for the audit trail."""

    stage_name: str
    input_count: int
    output_count: int
    duration_seconds: float
    filter_reasons: Dict[str, str] = Field(
        default_factory=dict, description="Provider id -> rejection reason"
    )

    @property
    def reduction_ratio(self) -> float:
        """Calculate reduction ratio (0.0 = no reduction, 1.0 = all filtered)."""
        if self.input_count == 0:
            return 0.0
        return 1.0 - (self.output_count / self.input_count)


class AgeSummary(BaseModel):
    """
    Mean and sample standard deviation of provider age.

    ``std_dev`` is None when fewer than two ages remain after the outlier
    exclusion; ``mean`` is None when none remain.
    """

    n: int = Field(ge=0, description="Ages used in the computation")
    excluded: int = Field(default=0, ge=0, description="Ages above the threshold")
    missing: int = Field(default=0, ge=0, description="Observations without age")
    mean: Optional[float] = None
    std_dev: Optional[float] = None

    model_config = {"frozen": True}

    @property
    def has_std_dev(self) -> bool:
        return self.std_dev is not None

    def require_std_dev(self) -> float:
        """Return the standard deviation or raise InsufficientData."""
        if self.std_dev is None:
            raise InsufficientData("standard deviation", self.n, 2)
        return self.std_dev


class CohortReport(BaseModel):
    """Numeric content of the cohort report tables."""

    total: int
    count_by_state: Dict[str, int] = Field(default_factory=dict)
    gender_counts: Dict[Any, int] = Field(default_factory=dict)
    gender_percentages: Dict[Any, float] = Field(default_factory=dict)
    gender_counts_by_state: Dict[Any, int] = Field(default_factory=dict)
    gender_percentages_by_state: Dict[Any, float] = Field(default_factory=dict)
    age_overall: AgeSummary
    age_by_state: Dict[str, AgeSummary] = Field(default_factory=dict)

    model_config = {"frozen": True}
