"""
Cohort Validator - Provider Uniqueness Invariant.

After the primary specialty predicate, each provider should appear at most
once: the registry allows a single primary slot per provider. The
registry does not enforce this, so the cohort is checked here.

Policies:
    - fail: raise InvariantViolation listing the violators
    - warn_keep_first: log the violators and keep the lowest slot per provider
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from provider_cohort.config.models import InvariantConfig, PrimaryUniquenessPolicy
from provider_cohort.domain.entities import SpecialtyObservation
from provider_cohort.errors import InvariantViolation

logger = logging.getLogger(__name__)


@dataclass
class UniquenessReport:
    """Outcome of a provider uniqueness check."""

    observations: Tuple[SpecialtyObservation, ...]
    violations: Dict[str, int] = field(default_factory=dict)
    dropped: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.violations


def find_duplicate_providers(
    observations: Iterable[SpecialtyObservation],
) -> Dict[str, int]:
    """Return provider id -> count for every provider seen more than once."""
    counts = Counter(obs.provider_id for obs in observations)
    return {pid: count for pid, count in counts.items() if count > 1}


class CohortValidator:
    """Checks the one-row-per-provider invariant of a cohort."""

    def __init__(self, config: Optional[InvariantConfig] = None) -> None:
        """
        Initialize cohort validator.

        Args:
            config: Invariant configuration (policy on violation)
        """
        self.config = config or InvariantConfig()

    def check_unique_providers(
        self,
        observations: Tuple[SpecialtyObservation, ...],
    ) -> UniquenessReport:
        """
        Verify that every provider occurs at most once.

        Args:
            observations: Cohort after the primary specialty predicate

        Returns:
            UniquenessReport whose observations are provider-unique

        Raises:
            InvariantViolation: If violated and the policy is ``fail``
        """
        violations = find_duplicate_providers(observations)
        if not violations:
            return UniquenessReport(observations=observations)

        logger.warning(
            f"{len(violations)} provider(s) have more than one primary "
            f"specialty observation "
            f"(policy={self.config.primary_uniqueness_policy.value})"
        )

        if self.config.primary_uniqueness_policy is PrimaryUniquenessPolicy.FAIL:
            raise InvariantViolation(violations)

        kept = self._keep_first(observations)
        return UniquenessReport(
            observations=kept,
            violations=violations,
            dropped=len(observations) - len(kept),
        )

    def _keep_first(
        self,
        observations: Tuple[SpecialtyObservation, ...],
    ) -> Tuple[SpecialtyObservation, ...]:
        """Keep the first observation seen for each provider."""
        seen = set()
        kept: List[SpecialtyObservation] = []
        for obs in observations:
            if obs.provider_id in seen:
                continue
            seen.add(obs.provider_id)
            kept.append(obs)
        return tuple(kept)
