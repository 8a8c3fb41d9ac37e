"""
Configuration Package - Models and Loaders.

    - Pydantic models for type-safe configuration
    - YAML loader with validation
    - Profile overlays (profiles/<name>.yaml beside the config file)
"""

from provider_cohort.config.loader import ConfigLoader, load_config
from provider_cohort.config.models import (
    AggregationConfig,
    CohortConfig,
    InvariantConfig,
    LoaderConfig,
    OutputConfig,
    PrimaryUniquenessPolicy,
    RecordFilterConfig,
    SpecialtyFilterConfig,
)

__all__ = [
    "ConfigLoader",
    "load_config",
    "AggregationConfig",
    "CohortConfig",
    "InvariantConfig",
    "LoaderConfig",
    "OutputConfig",
    "PrimaryUniquenessPolicy",
    "RecordFilterConfig",
    "SpecialtyFilterConfig",
]
