"""
Unit Tests - Testing Individual Components in Isolation.

Each component is tested in isolation with in-memory records.
Unit tests should be fast, deterministic, and focused.

Test Files:
    - test_record_filter.py: State / entity type / update year predicates
    - test_slot_expander.py: Wide-to-long specialty expansion
    - test_specialty_filter.py: Primary specialty predicate
    - test_cohort_validator.py: Provider uniqueness invariant
    - test_statistics.py: Counts, percentages, age summaries
    - test_csv_provider.py: CSV loading and the cohort extract
    - test_config_loader.py: Configuration loading/validation
    - test_cohort_report.py: Report assembly and rendering
    - test_audit_loggers.py: Audit loggers and metrics
"""
