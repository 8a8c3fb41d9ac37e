"""
Aggregation Package - Grouped Descriptive Statistics.

    - count_by_group: exact-equality group counts
    - percentage_by_group: shares within an enclosing partition
    - age_summary / age_summary_by_group: mean and sample SD of age
    - round_half_away: two-decimal rounding used by all of the above
"""

from provider_cohort.aggregation.statistics import (
    age_summary,
    age_summary_by_group,
    count_by_group,
    percentage_by_group,
    round_half_away,
)

__all__ = [
    "age_summary",
    "age_summary_by_group",
    "count_by_group",
    "percentage_by_group",
    "round_half_away",
]
