"""
Cohort Candidate Filter Implementation.

Filters registry rows before the reshape, where rows are still one per
provider:
    - State in the configured set
    - Entity type (individual practitioners only by default)
    - Last update on or after a year floor

Rejected rows are a selection outcome, not an error.
"""

from __future__ import annotations

from datetime import date
from typing import (
    AbstractSet,
    Dict,
    Iterable,
    List,
    Protocol,
    Sequence,
    Tuple,
    TypeVar,
)

from provider_cohort.config.models import RecordFilterConfig
from provider_cohort.domain.entities import EntityType
from provider_cohort.domain.value_objects import FilterResult


class Registrant(Protocol):
    """Anything carrying the record-level filter attributes."""

    provider_id: str
    state: str
    entity_type: EntityType
    last_updated: date


R = TypeVar("R", bound=Registrant)


def filter_cohort_candidates(
    records: Iterable[R],
    states: AbstractSet[str],
    min_update_year: int,
    entity_type: EntityType = EntityType.INDIVIDUAL,
) -> Tuple[R, ...]:
    """
    Keep records in ``states`` of ``entity_type`` updated in or after
    ``min_update_year``. Input order is preserved.
    """
    return tuple(
        record
        for record in records
        if not _rejection_reason(record, states, min_update_year, entity_type)
    )


def _rejection_reason(
    record: Registrant,
    states: AbstractSet[str],
    min_update_year: int,
    entity_type: EntityType,
) -> str:
    """Return why a record fails the predicate, empty string if it passes."""
    if record.state not in states:
        return f"state={record.state} not in {sorted(states)}"
    if record.entity_type != entity_type:
        return f"entity_type={record.entity_type.value}"
    if record.last_updated.year < min_update_year:
        return f"last_updated={record.last_updated.isoformat()} before {min_update_year}"
    return ""


class CohortCandidateFilter:
    """Filter registry records by state, entity type and update year."""

    def __init__(self, config: RecordFilterConfig) -> None:
        """
        Initialize with configuration.

        Args:
            config: Record filter configuration
        """
        self.config = config
        self._states = frozenset(config.states)

    @property
    def name(self) -> str:
        """Unique name of this filter stage."""
        return "cohort_candidate_filter"

    def apply(self, records: Sequence[Registrant]) -> FilterResult:
        """
        Apply record-level filtering.

        Checks:
            1. State in allowed list
            2. Entity type matches
            3. Update year >= floor

        Args:
            records: Records to filter

        Returns:
            FilterResult with passed/rejected provider ids
        """
        if not self.config.enabled:
            return FilterResult(
                passed_ids=[r.provider_id for r in records],
                rejected_ids=[],
                rejection_reasons={},
            )

        passed: List[str] = []
        rejected: List[str] = []
        reasons: Dict[str, str] = {}

        for record in records:
            reason = _rejection_reason(
                record,
                self._states,
                self.config.min_update_year,
                self.config.entity_type,
            )
            if reason:
                rejected.append(record.provider_id)
                reasons[record.provider_id] = reason
            else:
                passed.append(record.provider_id)

        return FilterResult(
            passed_ids=passed,
            rejected_ids=rejected,
            rejection_reasons=reasons,
        )

    def select(self, records: Sequence[R]) -> Tuple[R, ...]:
        """Return the passing records themselves, in input order."""
        if not self.config.enabled:
            return tuple(records)
        return filter_cohort_candidates(
            records,
            self._states,
            self.config.min_update_year,
            self.config.entity_type,
        )
