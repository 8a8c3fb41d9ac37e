"""
Provider Cohort - Registry Extract Filtering and Cohort Statistics.

Turns a wide provider-registry extract (one row per provider with up to
fifteen repeated specialty-code / primary-flag column pairs) into a
cohort of primary-specialty observations and computes the descriptive
statistics reported for it.

Architecture:
    - Staged pipeline: filter -> reshape -> select -> validate -> aggregate
    - Immutable domain models (frozen Pydantic)
    - Dependency Injection for loaders, audit loggers and metrics
    - Configuration-driven behavior via YAML

Main Components:
    - domain: Core entities (ProviderRecord, SpecialtyObservation, ...)
    - filters: Record-level and specialty-level predicates
    - reshape: Wide-to-long specialty slot expansion
    - aggregation: Grouped counts, percentages and age summaries
    - validation: Provider-uniqueness invariant checks
    - pipeline: Orchestration and audit trail
    - adapters: CSV loader/extract writer, audit loggers, metrics
    - reporting: Report assembly and console rendering
    - config: Configuration models and loaders

Example:
    >>> from provider_cohort.config.loader import load_config
    >>> from provider_cohort.pipeline.cohort_pipeline import create_pipeline
    >>> pipeline = create_pipeline(load_config("config/default.yaml"))
    >>> result = pipeline.run("npi_extract.csv")
    >>> print(result.report.count_by_state)

"""

import logging

__version__ = "0.1.0"


def configure_logging(
    level: int = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for Provider Cohort.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level (default: INFO)
        format: Log message format

    Example:
        >>> import provider_cohort
        >>> provider_cohort.configure_logging(logging.DEBUG)
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("provider_cohort").setLevel(level)
