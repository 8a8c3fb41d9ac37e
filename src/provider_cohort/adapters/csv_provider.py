"""
CSV Registry Provider.

Reads a wide provider-registry CSV into ProviderRecord objects and writes
or re-reads the long-form cohort extract. Parsing is strict: anything that
cannot be turned into a date, an age or a known code raises MalformedInput
with the offending data row (1-based, header excluded) and column.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

from provider_cohort.config.models import LoaderConfig
from provider_cohort.domain.entities import (
    EntityType,
    PrimaryFlag,
    ProviderRecord,
    SpecialtyObservation,
    SpecialtySlot,
)
from provider_cohort.errors import MalformedInput

logger = logging.getLogger(__name__)

EXTRACT_COLUMNS = [
    "provider_id",
    "state",
    "entity_type",
    "last_updated",
    "age",
    "gender",
    "specialty_code",
    "is_primary",
]

ENTITY_TYPE_CODES = {
    "1": EntityType.INDIVIDUAL,
    "2": EntityType.ORGANIZATION,
    "individual": EntityType.INDIVIDUAL,
    "organization": EntityType.ORGANIZATION,
}


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return bool(pd.isna(value))


def _text(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    return str(value).strip()


def required_text(value: Any, row: int, column: str) -> str:
    """Text of a cell that must be present."""
    text = _text(value)
    if text is None:
        raise MalformedInput(f"missing {column}", row=row, column=column, value=value)
    return text


def parse_date(
    value: Any,
    row: int,
    column: str,
    date_format: Optional[str] = None,
) -> date:
    """Parse a date cell, raising MalformedInput when it is absent or invalid."""
    if _is_missing(value):
        raise MalformedInput("missing date", row=row, column=column, value=value)
    try:
        parsed = pd.to_datetime(str(value).strip(), format=date_format)
    except (ValueError, TypeError) as e:
        raise MalformedInput(
            f"unparseable date {value!r}", row=row, column=column, value=value
        ) from e
    if pd.isna(parsed):
        raise MalformedInput("missing date", row=row, column=column, value=value)
    return parsed.date()


def parse_age(value: Any, row: int, column: str) -> Optional[float]:
    """Parse an optional numeric age cell."""
    if _is_missing(value):
        return None
    try:
        return float(str(value).strip())
    except ValueError as e:
        raise MalformedInput(
            f"non-numeric age {value!r}", row=row, column=column, value=value
        ) from e


def parse_primary_flag(value: Any, row: int, column: str) -> Optional[PrimaryFlag]:
    """Parse an optional Y/N primary flag cell."""
    text = _text(value)
    if text is None:
        return None
    try:
        return PrimaryFlag(text.upper())
    except ValueError as e:
        raise MalformedInput(
            f"unknown primary flag {value!r}", row=row, column=column, value=value
        ) from e


class CsvRegistryProvider:
    """Loads registry records from a CSV file or a DataFrame."""

    def __init__(self, config: Optional[LoaderConfig] = None) -> None:
        """
        Initialize provider.

        Args:
            config: Column contract and parsing options
        """
        self.config = config or LoaderConfig()

    def load(self, path: Union[str, Path]) -> Tuple[ProviderRecord, ...]:
        """
        Load all records from a CSV file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            MalformedInput: If a required column or cell cannot be parsed
        """
        frame = pd.read_csv(path, dtype=str, keep_default_na=True)
        records = self.records_from_frame(frame)
        logger.info(f"Loaded {len(records)} registry records from {path}")
        return records

    def records_from_frame(self, frame: pd.DataFrame) -> Tuple[ProviderRecord, ...]:
        """Convert a wide DataFrame into ProviderRecord objects."""
        self._check_columns(frame)
        slot_columns = self._slot_columns()
        absent = [code for code, _ in slot_columns if code not in frame.columns]
        if absent:
            logger.debug(
                f"{len(absent)} slot column pairs absent from input, treated as empty"
            )

        records: List[ProviderRecord] = []
        for position, row in enumerate(frame.to_dict(orient="records"), start=1):
            records.append(self._parse_row(row, position, slot_columns))
        return tuple(records)

    def _check_columns(self, frame: pd.DataFrame) -> None:
        cfg = self.config
        required = [cfg.id_column, cfg.state_column, cfg.last_updated_column]
        if not cfg.infer_entity_type_from_demographics:
            required.append(cfg.entity_type_column)
        for column in required:
            if column not in frame.columns:
                raise MalformedInput("required column missing", column=column)

    def _slot_columns(self) -> List[Tuple[str, str]]:
        """Column name pairs for every slot position; absent columns read as blank."""
        return [
            (
                self.config.specialty_code_pattern.format(n=n),
                self.config.primary_flag_pattern.format(n=n),
            )
            for n in range(1, self.config.slot_count + 1)
        ]

    def _parse_row(
        self,
        row: Dict[str, Any],
        position: int,
        slot_columns: List[Tuple[str, str]],
    ) -> ProviderRecord:
        cfg = self.config
        provider_id = required_text(row.get(cfg.id_column), position, cfg.id_column)
        state = required_text(row.get(cfg.state_column), position, cfg.state_column)

        age = parse_age(row.get(cfg.age_column), position, cfg.age_column)
        gender = self._parse_gender(row.get(cfg.gender_column))
        entity_type = self._parse_entity_type(
            row.get(cfg.entity_type_column), position, age, gender
        )
        last_updated = parse_date(
            row.get(cfg.last_updated_column),
            position,
            cfg.last_updated_column,
            cfg.date_format,
        )

        slots = [
            SpecialtySlot(
                specialty_code=_text(row.get(code_col)),
                is_primary=parse_primary_flag(row.get(flag_col), position, flag_col),
            )
            for code_col, flag_col in slot_columns
        ]

        return ProviderRecord(
            provider_id=provider_id,
            state=state.upper(),
            entity_type=entity_type,
            last_updated=last_updated,
            age=age,
            gender=gender,
            specialty_slots=tuple(slots),
        )

    def _parse_gender(self, value: Any) -> Optional[str]:
        text = _text(value)
        if text is None:
            return None
        return self.config.gender_labels.get(text.upper(), text.lower())

    def _parse_entity_type(
        self,
        value: Any,
        position: int,
        age: Optional[float],
        gender: Optional[str],
    ) -> EntityType:
        text = _text(value)
        if text is None:
            if self.config.infer_entity_type_from_demographics:
                # Organizations carry neither age nor gender
                if age is None and gender is None:
                    return EntityType.ORGANIZATION
                return EntityType.INDIVIDUAL
            raise MalformedInput(
                "missing entity type",
                row=position,
                column=self.config.entity_type_column,
            )
        entity_type = ENTITY_TYPE_CODES.get(text.lower())
        if entity_type is None:
            raise MalformedInput(
                f"unknown entity type {text!r}",
                row=position,
                column=self.config.entity_type_column,
                value=value,
            )
        return entity_type


def to_extract_row(obs: SpecialtyObservation) -> Dict[str, Any]:
    """Extract columns of an observation; the slot index is not exported."""
    return {
        "provider_id": obs.provider_id,
        "state": obs.state,
        "entity_type": obs.entity_type.value,
        "last_updated": obs.last_updated.isoformat(),
        "age": obs.age,
        "gender": obs.gender,
        "specialty_code": obs.specialty_code,
        "is_primary": obs.is_primary.value if obs.is_primary else None,
    }


def write_extract(
    observations: Iterable[SpecialtyObservation],
    path: Union[str, Path],
) -> Path:
    """Write the cohort extract as CSV, one row per observation."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    frame = pd.DataFrame(
        [to_extract_row(obs) for obs in observations],
        columns=EXTRACT_COLUMNS,
    )
    frame.to_csv(path, index=False)
    logger.info(f"Wrote {len(frame)} cohort rows to {path}")
    return path


def read_extract(path: Union[str, Path]) -> Tuple[SpecialtyObservation, ...]:
    """Read a cohort extract written by write_extract."""
    frame = pd.read_csv(path, dtype=str, keep_default_na=True)
    missing = [c for c in EXTRACT_COLUMNS if c not in frame.columns]
    if missing:
        raise MalformedInput(f"extract columns missing: {missing}")

    observations: List[SpecialtyObservation] = []
    for position, row in enumerate(frame.to_dict(orient="records"), start=1):
        entity_text = _text(row["entity_type"]) or ""
        entity_type = ENTITY_TYPE_CODES.get(entity_text.lower())
        if entity_type is None:
            raise MalformedInput(
                f"unknown entity type {entity_text!r}",
                row=position,
                column="entity_type",
            )
        observations.append(
            SpecialtyObservation(
                provider_id=required_text(row["provider_id"], position, "provider_id"),
                state=required_text(row["state"], position, "state"),
                entity_type=entity_type,
                last_updated=parse_date(row["last_updated"], position, "last_updated"),
                age=parse_age(row["age"], position, "age"),
                gender=_text(row["gender"]),
                specialty_code=required_text(
                    row["specialty_code"], position, "specialty_code"
                ),
                is_primary=parse_primary_flag(row["is_primary"], position, "is_primary"),
            )
        )
    return tuple(observations)
