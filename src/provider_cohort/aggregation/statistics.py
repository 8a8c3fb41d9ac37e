"""
Cohort Statistics - Grouped Counts, Percentages and Age Summaries.

All functions are pure and read-only over the cohort. Groups are formed by
exact equality on the named attributes and returned sorted by key, with
missing values (None) sorted last.

Rounding follows round-half-away-from-zero (0.125 -> 0.13), which differs
from Python's built-in round().
"""

from __future__ import annotations

import statistics
from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from provider_cohort.domain.entities import SpecialtyObservation
from provider_cohort.domain.value_objects import (
    AgeSummary,
    GroupCounts,
    GroupKey,
    GroupPercentages,
)

DEFAULT_MAX_PLAUSIBLE_AGE = 100.0
DEFAULT_DECIMAL_PLACES = 2


def round_half_away(value: Any, places: int = DEFAULT_DECIMAL_PLACES) -> float:
    """Round ``value`` to ``places`` decimals, ties away from zero."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    quantum = Decimal(1).scaleb(-places)
    return float(value.quantize(quantum, rounding=ROUND_HALF_UP))


def _key_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _group_key(obs: Any, keys: Sequence[str]) -> GroupKey:
    return tuple(_key_value(getattr(obs, k)) for k in keys)


def _sort_key(key: GroupKey) -> Tuple:
    # None sorts after any real value at each position
    return tuple((v is None, "" if v is None else v) for v in key)


def _sorted_dict(items: Dict[GroupKey, Any]) -> Dict[GroupKey, Any]:
    return {k: items[k] for k in sorted(items, key=_sort_key)}


def count_by_group(
    cohort: Iterable[SpecialtyObservation],
    group_keys: Sequence[str],
) -> GroupCounts:
    """
    Count observations per distinct combination of ``group_keys``.

    Args:
        cohort: Observations to count
        group_keys: Attribute names, in key order

    Returns:
        Mapping of key tuple -> count, sorted by key
    """
    if not group_keys:
        raise ValueError("group_keys must name at least one attribute")
    counts = Counter(_group_key(obs, group_keys) for obs in cohort)
    return _sorted_dict(dict(counts))


def percentage_by_group(
    cohort: Iterable[SpecialtyObservation],
    group_keys: Sequence[str],
    within_keys: Sequence[str] = (),
    places: int = DEFAULT_DECIMAL_PLACES,
) -> GroupPercentages:
    """
    Share of each group within its enclosing ``within_keys`` partition.

    With no ``within_keys`` the share is taken over the whole cohort.
    Results are fractions (0.39 for 39%) rounded half away from zero.

    Raises:
        ValueError: If a within key is not one of the group keys
    """
    unknown = [k for k in within_keys if k not in group_keys]
    if unknown:
        raise ValueError(f"within_keys {unknown} are not part of group_keys")

    counts = count_by_group(cohort, group_keys)
    positions = [list(group_keys).index(k) for k in within_keys]

    def partition(key: GroupKey) -> GroupKey:
        return tuple(key[i] for i in positions)

    totals: Counter = Counter()
    for key, count in counts.items():
        totals[partition(key)] += count

    return {
        key: round_half_away(Decimal(count) / Decimal(totals[partition(key)]), places)
        for key, count in counts.items()
    }


def age_summary(
    cohort: Iterable[SpecialtyObservation],
    max_plausible_age: float = DEFAULT_MAX_PLAUSIBLE_AGE,
    places: int = DEFAULT_DECIMAL_PLACES,
) -> AgeSummary:
    """
    Mean and sample standard deviation of age after outlier exclusion.

    Ages above ``max_plausible_age`` are treated as data-entry errors and
    excluded; missing ages are skipped. The standard deviation uses the
    n-1 divisor and is None when fewer than two ages remain.

    Args:
        cohort: Observations to summarize
        max_plausible_age: Largest age kept (inclusive)
        places: Decimal places of mean and standard deviation

    Returns:
        AgeSummary
    """
    ages: List[float] = []
    excluded = 0
    missing = 0
    for obs in cohort:
        if obs.age is None:
            missing += 1
        elif obs.age > max_plausible_age:
            excluded += 1
        else:
            ages.append(float(obs.age))

    mean: Optional[float] = None
    std_dev: Optional[float] = None
    if ages:
        mean = round_half_away(statistics.fmean(ages), places)
    if len(ages) >= 2:
        std_dev = round_half_away(statistics.stdev(ages), places)

    return AgeSummary(
        n=len(ages),
        excluded=excluded,
        missing=missing,
        mean=mean,
        std_dev=std_dev,
    )


def age_summary_by_group(
    cohort: Iterable[SpecialtyObservation],
    group_keys: Sequence[str],
    max_plausible_age: float = DEFAULT_MAX_PLAUSIBLE_AGE,
    places: int = DEFAULT_DECIMAL_PLACES,
) -> Dict[GroupKey, AgeSummary]:
    """One AgeSummary per group, sorted by key."""
    return _summarize_groups(
        cohort,
        group_keys,
        lambda members: age_summary(members, max_plausible_age, places),
    )


def _summarize_groups(
    cohort: Iterable[SpecialtyObservation],
    group_keys: Sequence[str],
    summarize: Callable[[List[SpecialtyObservation]], Any],
) -> Dict[GroupKey, Any]:
    if not group_keys:
        raise ValueError("group_keys must name at least one attribute")
    groups: Dict[GroupKey, List[SpecialtyObservation]] = {}
    for obs in cohort:
        groups.setdefault(_group_key(obs, group_keys), []).append(obs)
    return _sorted_dict({key: summarize(members) for key, members in groups.items()})
