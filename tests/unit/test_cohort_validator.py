"""
Unit Tests for CohortValidator.

Test Aspects Covered:
    ✅ Business Logic: Provider uniqueness check
    ✅ Error Handling: fail policy raises, warn_keep_first keeps first row
"""

from __future__ import annotations

import logging

import pytest

from provider_cohort.config.models import InvariantConfig, PrimaryUniquenessPolicy
from provider_cohort.errors import InvariantViolation
from provider_cohort.validation.cohort_validator import (
    CohortValidator,
    find_duplicate_providers,
)


@pytest.fixture
def duplicated_cohort(make_observation):
    """Provider A has two primary observations."""
    return (
        make_observation("A", specialty_code="EM", slot_index=1),
        make_observation("B", specialty_code="EM", slot_index=2),
        make_observation("A", specialty_code="OBGYN", slot_index=4),
    )


class TestFindDuplicateProviders:

    def test_returns_only_duplicates(self, duplicated_cohort) -> None:
        assert find_duplicate_providers(duplicated_cohort) == {"A": 2}

    def test_unique_cohort(self, make_observation) -> None:
        assert find_duplicate_providers([make_observation("A")]) == {}


class TestCohortValidator:
    """Test cases for CohortValidator."""

    def test_unique_cohort_passes_unchanged(self, make_observation) -> None:
        """
        SCENARIO: One observation per provider
        EXPECTED: Valid report with the same observations
        """
        cohort = (make_observation("A"), make_observation("B"))

        report = CohortValidator().check_unique_providers(cohort)

        assert report.is_valid
        assert report.observations == cohort
        assert report.dropped == 0

    def test_fail_policy_raises(self, duplicated_cohort) -> None:
        """
        SCENARIO: Duplicate provider with default (fail) policy
        EXPECTED: InvariantViolation naming the provider and its count
        """
        validator = CohortValidator()

        with pytest.raises(InvariantViolation) as exc_info:
            validator.check_unique_providers(duplicated_cohort)

        assert exc_info.value.violations == {"A": 2}
        assert "A (2)" in str(exc_info.value)

    def test_warn_policy_keeps_first(self, duplicated_cohort, caplog) -> None:
        """
        SCENARIO: Duplicate provider with warn_keep_first policy
        EXPECTED: Warning logged, first observation per provider kept
        """
        validator = CohortValidator(
            InvariantConfig(
                primary_uniqueness_policy=PrimaryUniquenessPolicy.WARN_KEEP_FIRST
            )
        )

        with caplog.at_level(logging.WARNING):
            report = validator.check_unique_providers(duplicated_cohort)

        assert not report.is_valid
        assert report.violations == {"A": 2}
        assert report.dropped == 1
        assert [(o.provider_id, o.slot_index) for o in report.observations] == [
            ("A", 1),
            ("B", 2),
        ]
        assert "1 provider(s)" in caplog.text
