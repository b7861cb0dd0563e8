"""
Base interface for all pipeline stages.
Strategy Pattern implementation.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

from src.collisions.core import SkippedRow


class Stage(ABC):
    """Parent class of every pipeline stage"""

    name = "stage"

    # stages may take tuning parameters
    def __init__(self, **kwargs):
        self.params = kwargs

    @abstractmethod
    def apply(self, records: Sequence) -> Tuple[tuple, List[SkippedRow]]:
        """
        Takes the previous stage's full output and returns a new tuple of
        records plus any rows skipped along the way. Input is never mutated.
        """
        pass
