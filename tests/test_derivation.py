from datetime import date, time

import pytest

from src.collisions.core import ParseError, Severity, TimeOfDay
from src.collisions.derivation import RecordDeriver
from src.collisions.stages.derivation import DerivationStage


def test_time_of_day_is_a_partition_of_every_minute():
    counts = {bucket: 0 for bucket in TimeOfDay}
    for minute in range(24 * 60):
        bucket = RecordDeriver.time_of_day(time(minute // 60, minute % 60))
        assert isinstance(bucket, TimeOfDay)
        counts[bucket] += 1

    assert counts[TimeOfDay.MORNING] == 7 * 60
    assert counts[TimeOfDay.AFTERNOON] == 5 * 60
    assert counts[TimeOfDay.EVENING] == 4 * 60
    assert counts[TimeOfDay.NIGHT] == 8 * 60


@pytest.mark.parametrize(
    "hh, mm, expected",
    [
        (4, 59, TimeOfDay.NIGHT),
        (5, 0, TimeOfDay.MORNING),
        (11, 59, TimeOfDay.MORNING),
        (12, 0, TimeOfDay.AFTERNOON),
        (16, 59, TimeOfDay.AFTERNOON),
        (17, 0, TimeOfDay.EVENING),
        (20, 59, TimeOfDay.EVENING),
        (21, 0, TimeOfDay.NIGHT),
        (23, 59, TimeOfDay.NIGHT),
        (0, 0, TimeOfDay.NIGHT),
    ],
)
def test_time_of_day_boundaries(hh, mm, expected):
    assert RecordDeriver.time_of_day(time(hh, mm)) is expected


@pytest.mark.parametrize(
    "injured, killed, expected",
    [
        (0, 0, Severity.NONE),
        (1, 0, Severity.INJURY),
        (5, 0, Severity.INJURY),
        (0, 1, Severity.FATAL),
        (3, 2, Severity.FATAL),
    ],
)
def test_severity_favours_most_severe_outcome(injured, killed, expected):
    assert RecordDeriver.severity(injured, killed) is expected


def test_severity_is_ordinal():
    assert Severity.NONE.rank < Severity.INJURY.rank < Severity.FATAL.rank


def test_derive_outcome_and_calendar_fields(make_raw):
    record = RecordDeriver.derive(
        make_raw(crash_date="06/15/2021", crash_time="9:05", num_injured=2, num_killed=1)
    )

    assert record.crash_date == date(2021, 6, 15)
    assert record.crash_time == time(9, 5)
    assert record.day_of_year == 166
    assert record.weekday == "Tuesday"
    assert record.is_weekend is False
    assert record.time_of_day is TimeOfDay.MORNING
    assert record.num_casualties == 3
    assert record.has_injury and record.has_fatality and record.has_casualty
    assert record.severity is Severity.FATAL


def test_no_casualties(make_raw):
    record = RecordDeriver.derive(make_raw())
    assert record.num_casualties == 0
    assert not record.has_casualty
    assert record.severity is Severity.NONE


@pytest.mark.parametrize(
    "crash_date, weekday, weekend",
    [
        ("06/18/2021", "Friday", False),
        ("06/19/2021", "Saturday", True),
        ("06/20/2021", "Sunday", True),
        ("06/21/2021", "Monday", False),
    ],
)
def test_weekend_flag(make_raw, crash_date, weekday, weekend):
    record = RecordDeriver.derive(make_raw(crash_date=crash_date))
    assert record.weekday == weekday
    assert record.is_weekend is weekend


def test_day_of_year_in_leap_year(make_raw):
    assert RecordDeriver.derive(make_raw(crash_date="12/31/2020")).day_of_year == 366


@pytest.mark.parametrize(
    "overrides",
    [
        {"crash_date": "2021-06-15"},
        {"crash_date": "02/30/2021"},
        {"crash_date": ""},
        {"crash_time": "25:00"},
        {"crash_time": "24:00"},
        {"crash_time": "noon"},
    ],
)
def test_unparsable_date_or_time_raises_parse_error(make_raw, overrides):
    with pytest.raises(ParseError):
        RecordDeriver.derive(make_raw(**overrides))


def test_stage_skips_unparsable_records_and_continues(make_raw):
    records = (
        make_raw(collision_id="good-1"),
        make_raw(collision_id="bad", crash_time="99:99"),
        make_raw(collision_id="good-2"),
    )
    derived, skipped = DerivationStage().apply(records)

    assert [r.collision_id for r in derived] == ["good-1", "good-2"]
    assert len(skipped) == 1
    assert skipped[0].collision_id == "bad"
    assert skipped[0].stage == "derive"
    assert "crash_time" in skipped[0].reason
