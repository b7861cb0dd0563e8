import numpy as np
import pandas as pd
import pytest

from src.collisions.core import RawCollision


@pytest.fixture
def make_raw():
    """Factory for RawCollision with sensible single-vehicle defaults."""

    def _make(**overrides):
        fields = dict(
            collision_id="1",
            crash_date="06/15/2021",
            crash_time="08:30",
            num_injured=0,
            num_killed=0,
            vehicle_type_1="Sedan",
            contributing_factor_1="Driver Inattention/Distraction",
        )
        fields.update(overrides)
        return RawCollision(**fields)

    return _make


@pytest.fixture(scope="session")
def synthetic_frame():
    """
    Cleaned-collision frame where the four factor predictors carry strong
    effects on casualty odds and the weekend x time-of-day interaction has none.
    """
    rng = np.random.default_rng(20240101)
    n = 4000

    frame = pd.DataFrame(
        {
            "involved_motorcycle": rng.random(n) < 0.10,
            "involved_non_motor": rng.random(n) < 0.15,
            "time_of_day": rng.choice(["morning", "afternoon", "evening", "night"], n),
            "is_weekend": rng.random(n) < 2 / 7,
            "day_of_year": rng.integers(1, 366, n),
            "failed_to_obey": rng.random(n) < 0.25,
            "was_impaired": rng.random(n) < 0.30,
            "mech_failures": rng.random(n) < 0.10,
            "misc_cause": rng.random(n) < 0.50,
        }
    )

    linear = (
        -1.5
        + 1.2 * frame["involved_motorcycle"]
        + 1.0 * frame["involved_non_motor"]
        + 0.3 * (frame["time_of_day"] == "night")
        + 1.0 * frame["failed_to_obey"]
        + 0.8 * frame["was_impaired"]
        + 0.7 * frame["mech_failures"]
        - 0.4 * frame["misc_cause"]
    )
    p = 1.0 / (1.0 + np.exp(-linear.astype(float)))
    frame["has_casualty"] = rng.random(n) < p
    return frame
