"""
Category consolidation: raw vehicle-type and factor strings -> fixed taxonomies.
Slots 1 and 2 are classified independently with the same tables.
"""

from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from src.collisions.core import CollisionRecord, SkippedRow, VehicleCategory
from src.collisions.taxonomy import UNKNOWN_VEHICLE, classify_factor, classify_vehicle
from .base import Stage


def backfill_vehicle_type_2(
    vehicle_type_2: Optional[str], contributing_factor_2: Optional[str]
) -> Optional[str]:
    """
    A factor in slot 2 means a second vehicle existed even if its type was not
    recorded; give it the unknown-vehicle sentinel instead of leaving it absent.
    """
    if vehicle_type_2 is None and contributing_factor_2 is not None:
        return UNKNOWN_VEHICLE
    return vehicle_type_2


class ConsolidationStage(Stage):
    name = "consolidate"

    @staticmethod
    def consolidate(record: CollisionRecord) -> CollisionRecord:
        vehicle_type_2 = backfill_vehicle_type_2(
            record.vehicle_type_2, record.contributing_factor_2
        )
        if vehicle_type_2 is None:
            vehicle_category_2 = VehicleCategory.NONE
        else:
            vehicle_category_2 = classify_vehicle(vehicle_type_2)

        return replace(
            record,
            vehicle_type_2=vehicle_type_2,
            vehicle_category_1=classify_vehicle(record.vehicle_type_1),
            vehicle_category_2=vehicle_category_2,
            factor_category_1=classify_factor(record.contributing_factor_1),
            factor_category_2=classify_factor(record.contributing_factor_2),
        )

    def apply(self, records: Sequence[CollisionRecord]) -> Tuple[tuple, List[SkippedRow]]:
        return tuple(self.consolidate(r) for r in records), []
