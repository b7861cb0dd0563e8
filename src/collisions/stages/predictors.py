"""
Predictor synthesis: OR-reduce the two consolidated slots into collision-level flags.
"""

from dataclasses import replace
from typing import List, Sequence, Tuple

from src.collisions.core import CollisionRecord, FactorCategory, SkippedRow, VehicleCategory
from .base import Stage

# predictor -> category it flags in either slot
VEHICLE_PREDICTORS = {
    "involved_motorcycle": VehicleCategory.MOTORCYCLE,
    "involved_non_motor": VehicleCategory.NON_MOTOR,
}

FACTOR_PREDICTORS = {
    "was_impaired": FactorCategory.IMPAIRMENT_DISTRACTION,
    "was_aggressive": FactorCategory.AGGRESSIVE_RECKLESS,
    "failed_to_obey": FactorCategory.FAILURE_TO_OBEY,
    "mech_failures": FactorCategory.MECHANICAL_TECHNICAL,
    "misc_cause": FactorCategory.OTHER_UNKNOWN,
}


class PredictorSynthesisStage(Stage):
    name = "predictors"

    @staticmethod
    def synthesize(record: CollisionRecord) -> CollisionRecord:
        if record.vehicle_category_1 is None or record.factor_category_1 is None:
            raise ValueError(
                f"collision {record.collision_id} has not been through consolidation"
            )

        vehicles = (record.vehicle_category_1, record.vehicle_category_2)
        factors = (record.factor_category_1, record.factor_category_2)

        flags = {name: cat in vehicles for name, cat in VEHICLE_PREDICTORS.items()}
        flags.update({name: cat in factors for name, cat in FACTOR_PREDICTORS.items()})
        return replace(record, **flags)

    def apply(self, records: Sequence[CollisionRecord]) -> Tuple[tuple, List[SkippedRow]]:
        return tuple(self.synthesize(r) for r in records), []
