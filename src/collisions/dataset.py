"""
Data loading and tabular hand-off.
CSV rows -> RawCollision (validated), CollisionRecord collection -> DataFrame.
"""

import os
from dataclasses import dataclass, fields
from enum import Enum
from typing import Sequence, Tuple

import pandas as pd
from loguru import logger
from pydantic import ValidationError
from tqdm import tqdm

from src.collisions.core import SEVERITY_ORDER, CollisionRecord, RawCollision, SkippedRow
from src.collisions.schemas import REQUIRED_COLUMNS, CollisionRow


@dataclass(frozen=True)
class LoadResult:
    records: Tuple[RawCollision, ...]
    skipped: Tuple[SkippedRow, ...]


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(part) for part in err["loc"])
    return f"{loc}: {err['msg']}"


def load_raw_collisions(path: str, progress: bool = False) -> LoadResult:
    """
    Reads the collision CSV and validates every row.

    Invalid rows (bad counts, missing slot-1 vehicle type or factor) are
    skipped and returned in LoadResult.skipped; they never abort the load.

    :param progress: show a tqdm progress bar while validating rows
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Collision file not found: '{path}'")

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise KeyError(f"Missing columns in {path}: {missing}")

    records = []
    skipped = []
    rows = df.to_dict("records")
    for row_number, row in enumerate(tqdm(rows, desc="Validating rows", disable=not progress), start=1):
        try:
            parsed = CollisionRow.model_validate(row)
        except ValidationError as e:
            skipped.append(
                SkippedRow(
                    stage="load",
                    reason=_first_error(e),
                    row_number=row_number,
                    collision_id=row.get("COLLISION_ID") or None,
                )
            )
            continue
        records.append(parsed.to_raw(fallback_id=f"row-{row_number}"))

    logger.info(f"Loaded {len(records)} reports from {path} ({len(skipped)} rows skipped)")
    return LoadResult(records=tuple(records), skipped=tuple(skipped))


def records_to_frame(records: Sequence[CollisionRecord]) -> pd.DataFrame:
    """One row per collision; enums become their string values, severity an ordered categorical."""
    columns = [f.name for f in fields(CollisionRecord)]
    rows = [
        {
            name: value.value if isinstance(value, Enum) else value
            for name, value in ((c, getattr(r, c)) for c in columns)
        }
        for r in records
    ]
    frame = pd.DataFrame(rows, columns=columns)
    frame["severity"] = pd.Categorical(
        frame["severity"], categories=[s.value for s in SEVERITY_ORDER], ordered=True
    )
    return frame
