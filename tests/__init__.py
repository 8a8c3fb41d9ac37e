"""
Test Suite for Provider Cohort.

Test organization:
    - unit/: Unit tests for individual components
    - integration/: End-to-end integration tests
    - fixtures/: Shared synthetic registry data

Running Tests:
    pytest tests/                           # All tests
    pytest tests/unit/                      # Unit tests only
    pytest tests/integration/               # Integration tests only
    pytest --cov=src/provider_cohort        # With coverage
"""
