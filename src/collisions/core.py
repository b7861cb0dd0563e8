"""
Core data structures for collision analysis.
"""

from dataclasses import dataclass
from datetime import date, time
from enum import Enum
from typing import Optional, Tuple


class ParseError(ValueError):
    """A single record could not be parsed; the record is skipped, the run continues."""


class VehicleCategory(str, Enum):
    PASSENGER = "Passenger"
    COMMERCIAL = "Commercial"
    MOTORCYCLE = "Motorcycle"
    NON_MOTOR = "NonMotor"
    OTHER_UNKNOWN = "OtherUnknown"
    NONE = "None"  # slot 2 only: no second vehicle


class FactorCategory(str, Enum):
    IMPAIRMENT_DISTRACTION = "ImpairmentDistraction"
    AGGRESSIVE_RECKLESS = "AggressiveReckless"
    FAILURE_TO_OBEY = "FailureToObey"
    MECHANICAL_TECHNICAL = "MechanicalTechnical"
    OTHER_UNKNOWN = "OtherUnknown"


class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class Severity(str, Enum):
    NONE = "no casualties"
    INJURY = "injury"
    FATAL = "fatal"

    @property
    def rank(self) -> int:
        return SEVERITY_ORDER.index(self)


SEVERITY_ORDER = (Severity.NONE, Severity.INJURY, Severity.FATAL)

WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


@dataclass(frozen=True)
class RawCollision:
    """
    One police report as read from the source file.
    Date and time stay as raw strings; parsing happens in the derivation stage.
    """

    collision_id: str
    crash_date: str  # MM/DD/YYYY
    crash_time: str  # HH:MM, 24-hour
    num_injured: int
    num_killed: int
    vehicle_type_1: str
    contributing_factor_1: str
    vehicle_type_2: Optional[str] = None
    contributing_factor_2: Optional[str] = None
    zip_code: Optional[str] = None
    extra_vehicle_types: Tuple[str, ...] = ()  # non-missing values of slots 3..5
    extra_factors: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CollisionRecord:
    """
    Collision after derivation. Categorical and predictor fields stay None
    until the consolidation / predictor stages fill them via dataclasses.replace.
    """

    collision_id: str
    zip_code: Optional[str]

    # temporal
    crash_date: date
    crash_time: time
    day_of_year: int
    weekday: str
    is_weekend: bool
    time_of_day: TimeOfDay

    # outcome
    num_injured: int
    num_killed: int
    num_casualties: int
    has_injury: bool
    has_fatality: bool
    has_casualty: bool
    severity: Severity

    # raw slots
    vehicle_type_1: str
    vehicle_type_2: Optional[str]
    contributing_factor_1: str
    contributing_factor_2: Optional[str]

    # consolidation
    vehicle_category_1: Optional[VehicleCategory] = None
    vehicle_category_2: Optional[VehicleCategory] = None
    factor_category_1: Optional[FactorCategory] = None
    factor_category_2: Optional[FactorCategory] = None

    # predictor synthesis
    involved_motorcycle: Optional[bool] = None
    involved_non_motor: Optional[bool] = None
    was_impaired: Optional[bool] = None
    was_aggressive: Optional[bool] = None
    failed_to_obey: Optional[bool] = None
    mech_failures: Optional[bool] = None
    misc_cause: Optional[bool] = None


@dataclass(frozen=True)
class SkippedRow:
    """Diagnostic entry for a row dropped by the loader or a pipeline stage."""

    stage: str
    reason: str
    row_number: Optional[int] = None
    collision_id: Optional[str] = None
