"""
Specialty Slot Expander - Wide to Long Reshape.

Each registry record declares up to SLOT_COUNT (specialty code, primary
flag) pairs at fixed positions. The expander emits one observation per
populated slot:

    record(slots=[(A, N), (None, None), (B, Y)])
        -> obs(slot 1, A, N), obs(slot 3, B, Y)

Providers keep their input order; slots are emitted in increasing
position. Empty slots produce nothing.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Tuple

from provider_cohort.domain.entities import ProviderRecord, SpecialtyObservation

logger = logging.getLogger(__name__)


def iter_specialty_observations(
    record: ProviderRecord,
) -> Iterator[SpecialtyObservation]:
    """Yield the observations of a single record in slot order."""
    for index, slot in enumerate(record.specialty_slots, start=1):
        if slot.is_populated:
            yield SpecialtyObservation.from_slot(record, index, slot)


def expand_specialty_slots(
    records: Iterable[ProviderRecord],
) -> Tuple[SpecialtyObservation, ...]:
    """
    Unpivot the specialty slots of every record.

    Args:
        records: Wide records in the order they should be emitted

    Returns:
        Observations, one per populated slot, in stable order
    """
    observations: List[SpecialtyObservation] = []
    record_count = 0
    empty_records = 0

    for record in records:
        record_count += 1
        before = len(observations)
        observations.extend(iter_specialty_observations(record))
        if len(observations) == before:
            empty_records += 1

    if empty_records:
        logger.debug(
            f"{empty_records} of {record_count} records declare no specialty"
        )
    logger.debug(
        f"Expanded {record_count} records into {len(observations)} observations"
    )
    return tuple(observations)
