"""
Two-vehicle filter: collisions with a third vehicle or factor are out of scope.
"""

from typing import List, Sequence, Tuple

from loguru import logger

from src.collisions.core import RawCollision, SkippedRow
from .base import Stage


class TwoVehicleFilter(Stage):
    """Drops reports with any vehicle-type or contributing-factor slot beyond the second."""

    name = "filter"

    @staticmethod
    def keeps(raw: RawCollision) -> bool:
        return not raw.extra_vehicle_types and not raw.extra_factors

    def apply(self, records: Sequence[RawCollision]) -> Tuple[tuple, List[SkippedRow]]:
        kept = tuple(r for r in records if self.keeps(r))
        # excluded reports are not skipped rows; only the count is logged
        logger.info(
            f"Filter: kept {len(kept)} of {len(records)} reports "
            f"({len(records) - len(kept)} with more than two vehicles)"
        )
        return kept, []
