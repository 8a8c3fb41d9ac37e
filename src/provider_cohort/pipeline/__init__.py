"""
Pipeline Package - Orchestration.

Components:
    - CohortPipeline: Runs the stages in order and collects the audit trail
    - create_pipeline: Wires the CSV provider and default adapters

Design Principles:
    - All dependencies injected via constructor
    - Each stage consumes an immutable tuple and returns a new one
"""

from provider_cohort.pipeline.cohort_pipeline import CohortPipeline, create_pipeline

__all__ = ["CohortPipeline", "create_pipeline"]
