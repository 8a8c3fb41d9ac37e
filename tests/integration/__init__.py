"""
Integration Tests - End-to-End Pipeline Tests.

These tests verify that all components work together correctly, from a
wide registry CSV through the report and the cohort extract.

Test Files:
    - test_cohort_pipeline.py: Stage wiring, audit trail, invariant policies
    - test_end_to_end_sample.py: The HI / ID sample, extract round trip, CLI
"""
