import pytest

from herdcast.core.thresholds import (
    ThresholdProfileResolver,
    county_from_point,
    season_from_day,
)
from herdcast.utils.config import RiskThresholdConfig


@pytest.mark.parametrize("day,season", [
    (0, "dry"), (69, "dry"), (70, "transition"), (99, "transition"), (100, "wet"),
    (285, "wet"), (286, "transition"), (320, "transition"), (321, "dry"), (365 + 150, "wet"), (-10, "dry"),
])
def test_season_from_day(day, season):
    assert season_from_day(day) == season


@pytest.mark.parametrize("lat,lng,county", [
    (6.2, 31.5, "bor"),
    (7.0, 31.3, "duk"),
    (7.7, 31.5, "ayod"),
    (6.8, 33.0, "pibor"),
    (7.8, 33.0, "akobo"),
    (5.6, 30.1, "other"),
    (6.6, 31.5, "bor"),  # shared edge: first match wins
])
def test_county_from_point(lat, lng, county):
    assert county_from_point(lat, lng) == county


def test_bor_dry_season_profile():
    profile = ThresholdProfileResolver().resolve(6.2, 31.5, 0)
    assert profile.region == "bor"
    assert profile.season == "dry"
    assert profile.convergence_km == pytest.approx(35 * 0.9 * 1.05)
    assert profile.village_proximity_km == pytest.approx(30 * 1.1 * 1.1)
    assert profile.farm_proximity_km == pytest.approx(20 * 1.15 * 1.1)
    assert profile.resource_scarcity_threshold == pytest.approx(0.35 * 1.15)
    assert profile.history_threshold == pytest.approx(0.3 * 0.95)


def test_other_transition_is_base():
    profile = ThresholdProfileResolver().resolve(5.6, 30.1, 80)
    assert profile.region == "other"
    assert profile.convergence_km == pytest.approx(35)
    assert profile.history_threshold == pytest.approx(0.3)


def test_thresholds_are_capped():
    base = RiskThresholdConfig(resource_scarcity=0.9, history=0.95)
    profile = ThresholdProfileResolver(base).resolve(5.6, 30.1, 0)
    assert profile.resource_scarcity_threshold == 0.7
    assert profile.history_threshold == 0.8
