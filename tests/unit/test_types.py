"""Unit tests for data models."""

import pytest

from trailrank.exceptions import InputIntegrityError, TrailRankError
from trailrank.types import (
    CriterionValue,
    Difficulty,
    ExperienceLevel,
    Mountain,
    Route,
    UserPreferences,
    trip_days_for,
)


def test_ordinals():
    assert [d.ordinal for d in Difficulty] == [1, 2, 3, 4]
    assert [e.ordinal for e in ExperienceLevel] == [1, 2, 3, 4]


@pytest.mark.parametrize("hours,days", [(0, 1), (6, 1), (24, 1), (25, 2), (60, 3)])
def test_route_trip_days(hours, days):
    route = Route(
        id="r", mountain_id="m", name="R", difficulty=Difficulty.EASY,
        distance_km=1.0, duration_hours=hours,
    )
    assert route.trip_days == days


def test_mountain_location_key():
    mountain = Mountain(id="m", name="M", location="Lombok, West Nusa Tenggara")
    assert mountain.location_key == "lombok"


def test_preferences_defaults_and_preferred_days():
    prefs = UserPreferences()

    assert prefs.experience_level == ExperienceLevel.INTERMEDIATE
    assert prefs.preferred_days == 2
    assert UserPreferences(time_commitment="half_day").preferred_days == 0.5
    assert UserPreferences(time_commitment="someday").preferred_days == 2


def test_preferences_are_immutable():
    prefs = UserPreferences()
    with pytest.raises(ValueError):
        prefs.group_size = 3


def test_preferences_validation():
    with pytest.raises(ValueError):
        UserPreferences(fitness_level=11)
    with pytest.raises(ValueError):
        UserPreferences(group_size=0)


def test_criterion_value_must_be_finite():
    with pytest.raises(ValueError, match="finite"):
        CriterionValue(route_id="r", criterion_id="c", value=float("inf"))


def test_error_formatting():
    error = InputIntegrityError("Routes are missing criterion values", details={"route": "x"})

    assert isinstance(error, TrailRankError)
    assert str(error) == "Routes are missing criterion values (route=x)"
    assert str(TrailRankError("plain")) == "plain"


@pytest.mark.parametrize("hours,days", [(0, 1), (24, 1), (24.5, 2), (72, 3)])
def test_trip_days_for(hours, days):
    assert trip_days_for(hours) == days


def test_preferences_location_defaults_to_configured():
    assert UserPreferences().location == ""
