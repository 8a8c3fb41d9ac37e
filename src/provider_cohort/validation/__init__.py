"""
Validation Package - Cohort Invariant Checks.

Components:
    - CohortValidator: One-row-per-provider check with a configurable policy
    - find_duplicate_providers: Violator lookup used by the validator
"""

from provider_cohort.validation.cohort_validator import (
    CohortValidator,
    UniquenessReport,
    find_duplicate_providers,
)

__all__ = [
    "CohortValidator",
    "UniquenessReport",
    "find_duplicate_providers",
]
