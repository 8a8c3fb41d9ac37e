"""
Reshape Package - Wide-to-Long Specialty Expansion.

    - expand_specialty_slots: records -> observations, one per populated slot
"""

from provider_cohort.reshape.slot_expander import (
    expand_specialty_slots,
    iter_specialty_observations,
)

__all__ = ["expand_specialty_slots", "iter_specialty_observations"]
