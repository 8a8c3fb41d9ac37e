"""
Filters Package - Inclusion Predicates.

Filters:
    - CohortCandidateFilter: Record-level (state, entity type, update year)
    - PrimarySpecialtyFilter: Observation-level (target code, primary flag)

Design Principles:
    - Each filter is independently testable
    - Configuration injected via constructor
    - Stateless, order-preserving selection
    - Clear rejection reasons for audit trail
"""

from provider_cohort.filters.record_filter import (
    CohortCandidateFilter,
    filter_cohort_candidates,
)
from provider_cohort.filters.specialty_filter import (
    PrimarySpecialtyFilter,
    select_primary_specialty,
)

__all__ = [
    "CohortCandidateFilter",
    "filter_cohort_candidates",
    "PrimarySpecialtyFilter",
    "select_primary_specialty",
]
