"""
Cohort Report - Narrative Tables.

Assembles the statistics reported for a cohort:
    - provider count by state
    - gender count and percentage, overall and within state
    - age mean / sample SD, overall and by state

and renders them as rich tables.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from rich.console import Console
from rich.table import Table

from provider_cohort.aggregation.statistics import (
    age_summary,
    age_summary_by_group,
    count_by_group,
    percentage_by_group,
)
from provider_cohort.config.models import AggregationConfig
from provider_cohort.domain.entities import SpecialtyObservation
from provider_cohort.domain.value_objects import AgeSummary, CohortReport


def build_cohort_report(
    cohort: Sequence[SpecialtyObservation],
    config: Optional[AggregationConfig] = None,
) -> CohortReport:
    """
    Compute the report statistics for a provider-unique cohort.

    Args:
        cohort: Observations after selection and validation
        config: Outlier threshold and rounding

    Returns:
        CohortReport
    """
    config = config or AggregationConfig()
    places = config.decimal_places
    max_age = config.max_plausible_age

    by_state = count_by_group(cohort, ["state"])
    gender = count_by_group(cohort, ["gender"])
    gender_pct = percentage_by_group(cohort, ["gender"], places=places)
    age_by_state = age_summary_by_group(cohort, ["state"], max_age, places)

    return CohortReport(
        total=len(cohort),
        count_by_state={key[0]: count for key, count in by_state.items()},
        gender_counts={key[0]: count for key, count in gender.items()},
        gender_percentages={key[0]: pct for key, pct in gender_pct.items()},
        gender_counts_by_state=count_by_group(cohort, ["state", "gender"]),
        gender_percentages_by_state=percentage_by_group(
            cohort, ["state", "gender"], ["state"], places=places
        ),
        age_overall=age_summary(cohort, max_age, places),
        age_by_state={key[0]: summary for key, summary in age_by_state.items()},
    )


def _fmt_pct(value: float) -> str:
    return f"{value * 100:.0f}%"


def _fmt_number(value: Optional[float]) -> str:
    return "undefined" if value is None else f"{value:.2f}"


def _label(value: Any) -> str:
    return "missing" if value is None else str(value)


def render_report(report: CohortReport, console: Optional[Console] = None) -> None:
    """Print the report tables."""
    console = console or Console()

    table = Table(title="Providers by State", border_style="blue")
    table.add_column("State", style="bold")
    table.add_column("Providers", justify="right")
    for state, count in report.count_by_state.items():
        table.add_row(state, str(count))
    table.add_row("Total", str(report.total), style="bold")
    console.print(table)

    table = Table(title="Gender", border_style="blue")
    table.add_column("Gender", style="bold")
    table.add_column("Count", justify="right")
    table.add_column("Percent", justify="right")
    for gender, count in report.gender_counts.items():
        table.add_row(
            _label(gender), str(count), _fmt_pct(report.gender_percentages[gender])
        )
    console.print(table)

    table = Table(title="Gender by State", border_style="blue")
    table.add_column("State", style="bold")
    table.add_column("Gender")
    table.add_column("Count", justify="right")
    table.add_column("Percent", justify="right")
    for key, count in report.gender_counts_by_state.items():
        state, gender = key
        table.add_row(
            state,
            _label(gender),
            str(count),
            _fmt_pct(report.gender_percentages_by_state[key]),
        )
    console.print(table)

    table = Table(title="Age", border_style="blue")
    table.add_column("Group", style="bold")
    table.add_column("N", justify="right")
    table.add_column("Excluded", justify="right")
    table.add_column("Mean", justify="right")
    table.add_column("SD", justify="right")
    rows: Dict[str, AgeSummary] = {"All": report.age_overall, **report.age_by_state}
    for group, summary in rows.items():
        table.add_row(
            group,
            str(summary.n),
            str(summary.excluded),
            _fmt_number(summary.mean),
            _fmt_number(summary.std_dev),
        )
    console.print(table)
