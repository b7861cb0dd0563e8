"""
Row schema for the NYC Open Data collision extract.
Compliant with Pydantic v2 validation; aliases are the source CSV headers.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.collisions.core import RawCollision

REQUIRED_COLUMNS = (
    "CRASH DATE",
    "CRASH TIME",
    "NUMBER OF PERSONS INJURED",
    "NUMBER OF PERSONS KILLED",
    "VEHICLE TYPE CODE 1",
    "CONTRIBUTING FACTOR VEHICLE 1",
)


class CollisionRow(BaseModel):
    """
    One CSV row. Slot-1 vehicle type and factor are required; rows without
    them fail validation and are skipped by the loader.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    collision_id: Optional[str] = Field(None, alias="COLLISION_ID")
    crash_date: str = Field(..., alias="CRASH DATE")
    crash_time: str = Field(..., alias="CRASH TIME")
    zip_code: Optional[str] = Field(None, alias="ZIP CODE")
    num_injured: int = Field(0, ge=0, alias="NUMBER OF PERSONS INJURED")
    num_killed: int = Field(0, ge=0, alias="NUMBER OF PERSONS KILLED")

    vehicle_type_1: str = Field(..., min_length=1, alias="VEHICLE TYPE CODE 1")
    vehicle_type_2: Optional[str] = Field(None, alias="VEHICLE TYPE CODE 2")
    vehicle_type_3: Optional[str] = Field(None, alias="VEHICLE TYPE CODE 3")
    vehicle_type_4: Optional[str] = Field(None, alias="VEHICLE TYPE CODE 4")
    vehicle_type_5: Optional[str] = Field(None, alias="VEHICLE TYPE CODE 5")

    contributing_factor_1: str = Field(..., min_length=1, alias="CONTRIBUTING FACTOR VEHICLE 1")
    contributing_factor_2: Optional[str] = Field(None, alias="CONTRIBUTING FACTOR VEHICLE 2")
    contributing_factor_3: Optional[str] = Field(None, alias="CONTRIBUTING FACTOR VEHICLE 3")
    contributing_factor_4: Optional[str] = Field(None, alias="CONTRIBUTING FACTOR VEHICLE 4")
    contributing_factor_5: Optional[str] = Field(None, alias="CONTRIBUTING FACTOR VEHICLE 5")

    @field_validator("num_injured", "num_killed", mode="before")
    @classmethod
    def blank_count_is_zero(cls, v):
        if v is None or v == "":
            return 0
        return v

    @field_validator(
        "collision_id",
        "zip_code",
        "vehicle_type_2",
        "vehicle_type_3",
        "vehicle_type_4",
        "vehicle_type_5",
        "contributing_factor_2",
        "contributing_factor_3",
        "contributing_factor_4",
        "contributing_factor_5",
        mode="before",
    )
    @classmethod
    def empty_is_missing(cls, v):
        # only the empty string counts as missing; other text is kept verbatim
        if v == "":
            return None
        return v

    def to_raw(self, fallback_id: str) -> RawCollision:
        extra_vehicles = (self.vehicle_type_3, self.vehicle_type_4, self.vehicle_type_5)
        extra_factors = (
            self.contributing_factor_3,
            self.contributing_factor_4,
            self.contributing_factor_5,
        )
        return RawCollision(
            collision_id=self.collision_id or fallback_id,
            crash_date=self.crash_date,
            crash_time=self.crash_time,
            num_injured=self.num_injured,
            num_killed=self.num_killed,
            vehicle_type_1=self.vehicle_type_1,
            contributing_factor_1=self.contributing_factor_1,
            vehicle_type_2=self.vehicle_type_2,
            contributing_factor_2=self.contributing_factor_2,
            zip_code=self.zip_code,
            extra_vehicle_types=tuple(v for v in extra_vehicles if v is not None),
            extra_factors=tuple(v for v in extra_factors if v is not None),
        )
