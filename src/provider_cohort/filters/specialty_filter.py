"""
Primary Specialty Filter.

Keeps the long-form observations whose specialty code is one of the
target codes and which are flagged as the provider's primary specialty.
Provider uniqueness of the result is checked separately by
CohortValidator.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable, Tuple

from provider_cohort.config.models import SpecialtyFilterConfig
from provider_cohort.domain.entities import PrimaryFlag, SpecialtyObservation


def select_primary_specialty(
    observations: Iterable[SpecialtyObservation],
    target_codes: AbstractSet[str],
) -> Tuple[SpecialtyObservation, ...]:
    """Keep primary observations whose code is in ``target_codes``."""
    return tuple(
        obs
        for obs in observations
        if obs.specialty_code in target_codes and obs.is_primary is PrimaryFlag.YES
    )


class PrimarySpecialtyFilter:
    """Config-driven wrapper around select_primary_specialty."""

    def __init__(self, config: SpecialtyFilterConfig) -> None:
        self.config = config
        self._target_codes = frozenset(config.target_codes)

    @property
    def name(self) -> str:
        return "primary_specialty_filter"

    def apply(
        self, observations: Iterable[SpecialtyObservation]
    ) -> Tuple[SpecialtyObservation, ...]:
        return select_primary_specialty(observations, self._target_codes)
