"""
Error Taxonomy.

All pipeline errors derive from CohortError so callers can catch the
whole family at the CLI boundary.

    - MalformedInput: unparseable loader input (fatal, never repaired)
    - InvariantViolation: more than one primary specialty per provider
    - InsufficientData: statistic undefined for the available sample
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CohortError(Exception):
    """Base class for provider cohort errors."""
    pass


class MalformedInput(CohortError):
    """Raised when an input row cannot be parsed into a record."""

    def __init__(
        self,
        message: str,
        row: Optional[int] = None,
        column: Optional[str] = None,
        value: Any = None,
    ) -> None:
        self.row = row
        self.column = column
        self.value = value
        location = []
        if row is not None:
            location.append(f"row {row}")
        if column is not None:
            location.append(f"column '{column}'")
        prefix = f"{', '.join(location)}: " if location else ""
        super().__init__(f"{prefix}{message}")


class InvariantViolation(CohortError):
    """Raised when the cohort holds more than one row for a provider."""

    def __init__(self, violations: Dict[str, int]) -> None:
        self.violations = dict(violations)
        sample = ", ".join(
            f"{pid} ({count})" for pid, count in list(self.violations.items())[:5]
        )
        super().__init__(
            f"{len(self.violations)} provider(s) with more than one primary "
            f"specialty observation: {sample}"
        )


class InsufficientData(CohortError):
    """Raised when a statistic is requested for too small a sample."""

    def __init__(self, statistic: str, n: int, required: int) -> None:
        self.statistic = statistic
        self.n = n
        self.required = required
        super().__init__(
            f"{statistic} is undefined for n={n} (requires at least {required})"
        )
