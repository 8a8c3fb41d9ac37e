"""
Test Fixtures - Shared Test Data.

This package contains reusable test data:
    - registry_data: synthetic wide registry rows matching the default
      column contract (the HI / ID emergency medicine and OB/GYN sample)

Usage:
    from tests.fixtures.registry_data import build_registry_rows
"""
