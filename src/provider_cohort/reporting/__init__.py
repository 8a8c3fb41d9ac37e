"""
Reporting Package - Report Assembly and Rendering.

    - build_cohort_report: numeric values of the report tables
    - render_report: rich console tables
"""

from provider_cohort.reporting.cohort_report import build_cohort_report, render_report

__all__ = ["build_cohort_report", "render_report"]
