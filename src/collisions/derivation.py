"""
Temporal and outcome derivation for a single collision report.
Raw date/time strings are parsed here; failures surface as ParseError.
"""

from datetime import date, datetime, time

from src.collisions.core import (
    WEEKDAYS,
    CollisionRecord,
    ParseError,
    RawCollision,
    Severity,
    TimeOfDay,
)

DATE_FORMAT = "%m/%d/%Y"
TIME_FORMAT = "%H:%M"

# (start, end, bucket), half-open [start, end), checked in order.
# Night is whatever remains: [21:00, 24:00) and [00:00, 05:00).
TIME_OF_DAY_BUCKETS = (
    (time(5, 0), time(12, 0), TimeOfDay.MORNING),
    (time(12, 0), time(17, 0), TimeOfDay.AFTERNOON),
    (time(17, 0), time(21, 0), TimeOfDay.EVENING),
)


class RecordDeriver:
    """Pure derivation helpers, RawCollision -> CollisionRecord"""

    @staticmethod
    def parse_date(raw: str) -> date:
        try:
            return datetime.strptime(raw.strip(), DATE_FORMAT).date()
        except (AttributeError, ValueError) as e:
            raise ParseError(f"unparsable crash_date {raw!r}") from e

    @staticmethod
    def parse_time(raw: str) -> time:
        try:
            return datetime.strptime(raw.strip(), TIME_FORMAT).time()
        except (AttributeError, ValueError) as e:
            raise ParseError(f"unparsable crash_time {raw!r}") from e

    @staticmethod
    def time_of_day(t: time) -> TimeOfDay:
        for start, end, bucket in TIME_OF_DAY_BUCKETS:
            if start <= t < end:
                return bucket
        return TimeOfDay.NIGHT

    @staticmethod
    def severity(num_injured: int, num_killed: int) -> Severity:
        # fatal wins over injury when both counts are positive
        if num_killed > 0:
            return Severity.FATAL
        if num_injured > 0:
            return Severity.INJURY
        return Severity.NONE

    @staticmethod
    def derive(raw: RawCollision) -> CollisionRecord:
        """
        Raw report -> derived record (temporal + outcome fields).

        :raises ParseError: crash_date or crash_time cannot be parsed.
        """
        crash_date = RecordDeriver.parse_date(raw.crash_date)
        crash_time = RecordDeriver.parse_time(raw.crash_time)

        weekday = WEEKDAYS[crash_date.weekday()]
        has_injury = raw.num_injured > 0
        has_fatality = raw.num_killed > 0

        return CollisionRecord(
            collision_id=raw.collision_id,
            zip_code=raw.zip_code,
            crash_date=crash_date,
            crash_time=crash_time,
            day_of_year=crash_date.timetuple().tm_yday,
            weekday=weekday,
            is_weekend=weekday in ("Saturday", "Sunday"),
            time_of_day=RecordDeriver.time_of_day(crash_time),
            num_injured=raw.num_injured,
            num_killed=raw.num_killed,
            num_casualties=raw.num_injured + raw.num_killed,
            has_injury=has_injury,
            has_fatality=has_fatality,
            has_casualty=has_injury or has_fatality,
            severity=RecordDeriver.severity(raw.num_injured, raw.num_killed),
            vehicle_type_1=raw.vehicle_type_1,
            vehicle_type_2=raw.vehicle_type_2,
            contributing_factor_1=raw.contributing_factor_1,
            contributing_factor_2=raw.contributing_factor_2,
        )
