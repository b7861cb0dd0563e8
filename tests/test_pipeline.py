from src.collisions.core import (
    FactorCategory,
    Severity,
    SkippedRow,
    TimeOfDay,
    VehicleCategory,
)
from src.collisions.pipeline import CollisionPipeline
from src.collisions.stages.derivation import DerivationStage


def test_motorcycle_night_injury_scenario(make_raw):
    raw = make_raw(
        collision_id="moto",
        crash_time="22:15",
        num_injured=1,
        num_killed=0,
        vehicle_type_1="MOTORCYCLE",
        vehicle_type_2=None,
        contributing_factor_1="Unsafe Speed",
    )
    result = CollisionPipeline.default().run([raw])

    assert len(result.records) == 1
    record = result.records[0]
    assert record.time_of_day is TimeOfDay.NIGHT
    assert record.severity is Severity.INJURY
    assert record.has_casualty is True
    assert record.vehicle_category_1 is VehicleCategory.MOTORCYCLE
    assert record.vehicle_category_2 is VehicleCategory.NONE
    assert record.factor_category_1 is FactorCategory.AGGRESSIVE_RECKLESS
    assert record.involved_motorcycle is True
    assert record.failed_to_obey is False
    assert record.was_aggressive is True


def test_three_vehicle_collision_is_excluded_everywhere(make_raw):
    three = make_raw(
        collision_id="three",
        vehicle_type_2="Taxi",
        extra_vehicle_types=("Bus",),
        extra_factors=("Unspecified",),
    )
    two = make_raw(collision_id="two", vehicle_type_2="Taxi", contributing_factor_2="Unspecified")

    result = CollisionPipeline.default().run([three, two])

    assert [r.collision_id for r in result.records] == ["two"]
    assert all(s.collision_id != "three" for s in result.skipped)


def test_parse_errors_are_skipped_and_accumulated(make_raw):
    upstream = SkippedRow(stage="load", reason="missing vehicle type", row_number=7)
    records = [
        make_raw(collision_id="ok"),
        make_raw(collision_id="bad-date", crash_date="13/45/2021"),
    ]
    result = CollisionPipeline.default().run(records, skipped=[upstream])

    assert [r.collision_id for r in result.records] == ["ok"]
    assert [s.stage for s in result.skipped] == ["load", "derive"]
    assert result.skipped[1].collision_id == "bad-date"


def test_every_output_record_is_fully_populated(make_raw):
    records = [
        make_raw(collision_id="a", vehicle_type_2="Bike", contributing_factor_2="Unspecified"),
        make_raw(collision_id="b", contributing_factor_2="Brakes Defective"),
    ]
    for record in CollisionPipeline.default().run(records).records:
        for name in (
            "vehicle_category_1",
            "vehicle_category_2",
            "factor_category_1",
            "factor_category_2",
            "involved_motorcycle",
            "involved_non_motor",
            "was_impaired",
            "failed_to_obey",
            "mech_failures",
            "misc_cause",
        ):
            assert getattr(record, name) is not None


def test_custom_stage_order(make_raw):
    result = CollisionPipeline().add_stage(DerivationStage()).run([make_raw()])
    assert result.records[0].vehicle_category_1 is None
