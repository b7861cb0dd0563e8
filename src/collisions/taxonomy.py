"""
Fixed category tables for vehicle types and contributing factors.

Lookup is exact string matching: no case folding, no stripping, no substring
matching. The source data mixes casings across reporting years, so every
variant that occurs is listed literally. Anything not listed falls to the
OtherUnknown bucket of the respective taxonomy.
"""

from enum import Enum
from typing import Dict, FrozenSet, Mapping, Optional

from src.collisions.core import FactorCategory, VehicleCategory

# back-filled into vehicle slot 2 when only its contributing factor was recorded
UNKNOWN_VEHICLE = "UNKNOWN"

VEHICLE_TAXONOMY: Mapping[VehicleCategory, FrozenSet[str]] = {
    VehicleCategory.PASSENGER: frozenset(
        {
            "Sedan",
            "SEDAN",
            "4 dr sedan",
            "2 dr sedan",
            "PASSENGER VEHICLE",
            "Passenger Vehicle",
            "Station Wagon/Sport Utility Vehicle",
            "SPORT UTILITY / STATION WAGON",
            "Sport Utility / Station Wagon",
            "Convertible",
            "CONVERTIBLE",
            "Taxi",
            "TAXI",
            "LIVERY VEHICLE",
            "Livery Vehicle",
            "Pick-up Truck",
            "PICK-UP TRUCK",
            "PK",
            "Van",
            "VAN",
            "Minivan",
            "MINIVAN",
        }
    ),
    VehicleCategory.COMMERCIAL: frozenset(
        {
            "Box Truck",
            "BOX TRUCK",
            "Bus",
            "BUS",
            "School Bus",
            "SCHOOL BUS",
            "Tractor Truck Diesel",
            "Tractor Truck Gasoline",
            "TRACTOR TRUCK DIESEL",
            "Dump",
            "DUMP",
            "Garbage or Refuse",
            "GARBAGE OR REFUSE",
            "Flat Bed",
            "FLAT BED",
            "Tow Truck / Wrecker",
            "TOW TRUCK / WRECKER",
            "Tow Truck",
            "Carry All",
            "Chassis Cab",
            "Concrete Mixer",
            "Refrigerated Van",
            "Beverage Truck",
            "Tanker",
            "Armored Truck",
            "Ambulance",
            "AMBULANCE",
            "Fire Truck",
            "FIRE TRUCK",
            "FDNY Ambul",
            "LARGE COM VEH(6 OR MORE TIRES)",
            "SMALL COM VEH(4 TIRES)",
            "Large Com Veh(6 or more tires)",
            "Small Com Veh(4 tires)",
        }
    ),
    VehicleCategory.MOTORCYCLE: frozenset(
        {
            "Motorcycle",
            "MOTORCYCLE",
            "Motorbike",
            "MOTORBIKE",
            "Motorscooter",
            "MOTORSCOOTER",
            "Moped",
            "MOPED",
            "Minibike",
            "Dirt Bike",
        }
    ),
    VehicleCategory.NON_MOTOR: frozenset(
        {
            "Bike",
            "BIKE",
            "Bicycle",
            "BICYCLE",
            "E-Bike",
            "E-BIKE",
            "E-Scooter",
            "E-SCOOTER",
            "Scooter",
            "SCOOTER",
            "Pedicab",
            "PEDICAB",
            "Horse",
        }
    ),
    VehicleCategory.OTHER_UNKNOWN: frozenset(
        {
            "UNKNOWN",
            "Unknown",
            "OTHER",
            "Other",
        }
    ),
}

FACTOR_TAXONOMY: Mapping[FactorCategory, FrozenSet[str]] = {
    FactorCategory.IMPAIRMENT_DISTRACTION: frozenset(
        {
            "Driver Inattention/Distraction",
            "Alcohol Involvement",
            "Drugs (illegal)",
            "Drugs (Illegal)",
            "Prescription Medication",
            "Fatigued/Drowsy",
            "Fell Asleep",
            "Illness",
            "Illnes",
            "Lost Consciousness",
            "Physical Disability",
            "Cell Phone (hand-held)",
            "Cell Phone (hand-Held)",
            "Cell Phone (hands-free)",
            "Texting",
            "Using On Board Navigation Device",
            "Other Electronic Device",
            "Listening/Using Headphones",
            "Eating or Drinking",
            "Outside Car Distraction",
            "Passenger Distraction",
        }
    ),
    FactorCategory.AGGRESSIVE_RECKLESS: frozenset(
        {
            "Unsafe Speed",
            "Aggressive Driving/Road Rage",
            "Following Too Closely",
            "Unsafe Lane Changing",
            "Passing Too Closely",
            "Passing or Lane Usage Improper",
            "Backing Unsafely",
            "Turning Improperly",
            "Driver Inexperience",
        }
    ),
    FactorCategory.FAILURE_TO_OBEY: frozenset(
        {
            "Failure to Yield Right-of-Way",
            "Traffic Control Disregarded",
            "Failure to Keep Right",
        }
    ),
    FactorCategory.MECHANICAL_TECHNICAL: frozenset(
        {
            "Brakes Defective",
            "Steering Failure",
            "Tire Failure/Inadequate",
            "Accelerator Defective",
            "Headlights Defective",
            "Other Lighting Defects",
            "Tow Hitch Defective",
            "Windshield Inadequate",
            "Tinted Windows",
            "Vehicle Vandalism",
            "Traffic Control Device Improper/Non-Working",
        }
    ),
    FactorCategory.OTHER_UNKNOWN: frozenset(
        {
            "Unspecified",
            "Other Vehicular",
            "Pavement Slippery",
            "Pavement Defective",
            "View Obstructed/Limited",
            "Glare",
            "Obstruction/Debris",
            "Reaction to Uninvolved Vehicle",
            "Oversized Vehicle",
            "Lane Marking Improper/Inadequate",
            "Shoulders Defective/Improper",
            "Animals Action",
            "Driverless/Runaway Vehicle",
            "Pedestrian/Bicyclist/Other Pedestrian Error/Confusion",
        }
    ),
}


def _invert(table: Mapping) -> Dict[str, Enum]:
    lookup = {}
    for category, raw_values in table.items():
        for raw in raw_values:
            if raw in lookup:
                raise ValueError(
                    f"{raw!r} listed under both {lookup[raw].value} and {category.value}"
                )
            lookup[raw] = category
    return lookup


_VEHICLE_LOOKUP = _invert(VEHICLE_TAXONOMY)
_FACTOR_LOOKUP = _invert(FACTOR_TAXONOMY)


def classify_vehicle(raw: Optional[str]) -> VehicleCategory:
    """Exact lookup; unlisted or missing strings -> OtherUnknown."""
    return _VEHICLE_LOOKUP.get(raw, VehicleCategory.OTHER_UNKNOWN)


def classify_factor(raw: Optional[str]) -> FactorCategory:
    """Exact lookup; unlisted or missing strings -> OtherUnknown."""
    return _FACTOR_LOOKUP.get(raw, FactorCategory.OTHER_UNKNOWN)
