"""
Derivation stage: parses date/time and computes outcome fields per record.
"""

from typing import List, Sequence, Tuple

from loguru import logger

from src.collisions.core import ParseError, RawCollision, SkippedRow
from src.collisions.derivation import RecordDeriver
from .base import Stage


class DerivationStage(Stage):
    name = "derive"

    def apply(self, records: Sequence[RawCollision]) -> Tuple[tuple, List[SkippedRow]]:
        derived = []
        skipped = []
        for raw in records:
            try:
                derived.append(RecordDeriver.derive(raw))
            except ParseError as e:
                logger.warning(f"Skipping collision {raw.collision_id}: {e}")
                skipped.append(
                    SkippedRow(stage=self.name, reason=str(e), collision_id=raw.collision_id)
                )
        return tuple(derived), skipped
