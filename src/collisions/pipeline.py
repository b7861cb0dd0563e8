"""
Collision Cleaning Pipeline Manager.
Runs the registered stages in order; each stage sees only the previous stage's output.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from loguru import logger

from src.collisions.core import CollisionRecord, RawCollision, SkippedRow
from src.collisions.stages.base import Stage
from src.collisions.stages.consolidation import ConsolidationStage
from src.collisions.stages.derivation import DerivationStage
from src.collisions.stages.filtering import TwoVehicleFilter
from src.collisions.stages.predictors import PredictorSynthesisStage


@dataclass(frozen=True)
class PipelineResult:
    records: Tuple[CollisionRecord, ...]
    skipped: Tuple[SkippedRow, ...] = field(default_factory=tuple)


class CollisionPipeline:
    def __init__(self):
        self.stages: List[Stage] = []

    def add_stage(self, stage: Stage):
        self.stages.append(stage)
        return self

    @classmethod
    def default(cls) -> "CollisionPipeline":
        """Filter -> Derivation -> Consolidation -> Predictor Synthesis"""
        return (
            cls()
            .add_stage(TwoVehicleFilter())
            .add_stage(DerivationStage())
            .add_stage(ConsolidationStage())
            .add_stage(PredictorSynthesisStage())
        )

    def run(
        self, raw_records: Sequence[RawCollision], skipped: Sequence[SkippedRow] = ()
    ) -> PipelineResult:
        """
        Feeds raw reports through every stage.

        :param skipped: rows already dropped upstream (e.g. by the loader), carried into the result
        """
        records = tuple(raw_records)
        all_skipped = list(skipped)

        for stage in self.stages:
            records, stage_skipped = stage.apply(records)
            all_skipped.extend(stage_skipped)
            logger.debug(f"Stage '{stage.name}': {len(records)} records out")

        if all_skipped:
            logger.warning(f"{len(all_skipped)} rows skipped during cleaning")
        logger.info(f"Pipeline produced {len(records)} model-ready collisions")

        return PipelineResult(records=records, skipped=tuple(all_skipped))
