from src.collisions.stages.filtering import TwoVehicleFilter


def test_two_vehicle_records_pass_unchanged(make_raw):
    records = (
        make_raw(collision_id="a"),
        make_raw(collision_id="b", vehicle_type_2="Taxi", contributing_factor_2="Unspecified"),
    )
    kept, skipped = TwoVehicleFilter().apply(records)

    assert kept == records
    assert skipped == []


def test_third_vehicle_or_factor_is_excluded(make_raw):
    third_vehicle = make_raw(collision_id="v3", extra_vehicle_types=("Bus",))
    third_factor = make_raw(collision_id="f3", extra_factors=("Unspecified",))
    fifth_only = make_raw(collision_id="v5", extra_vehicle_types=("Bike",))
    ok = make_raw(collision_id="ok")

    kept, skipped = TwoVehicleFilter().apply((third_vehicle, ok, third_factor, fifth_only))

    assert [r.collision_id for r in kept] == ["ok"]
    # exclusion is not reported as a skipped row
    assert skipped == []


def test_filter_returns_new_tuple(make_raw):
    records = [make_raw()]
    kept, _ = TwoVehicleFilter().apply(records)
    assert isinstance(kept, tuple)
    assert len(records) == 1
