import pytest

from herdcast.data_sources.environment import EnvironmentLayers, day_of_year, wet_season_phase
from herdcast.data_sources.synthetic import SyntheticSignalProvider
from herdcast.geo.models import DayScenario
from herdcast.utils.prng import HashRandom, SequenceRandom

POINTS = [(6.25, 31.55), (7.5, 30.5), (6.8, 33.1), (5.8, 30.3), (8.0, 33.3)]


@pytest.mark.parametrize("lat,lng", POINTS)
@pytest.mark.parametrize("day", [0, 150, 300])
def test_measurements_within_physical_ranges(rng, lat, lng, day):
    m = SyntheticSignalProvider(rng=rng).measure(lat, lng, DayScenario(day=day))
    assert 0 <= m.rainfall_mm_day <= 28
    assert 0.12 <= m.ndvi <= 0.72
    assert 0 <= m.soil_moisture_pct <= 100
    assert 0 <= m.water_extent_pct <= 100
    assert 1 <= m.evapotranspiration_mm_day <= 7
    assert 22 <= m.land_surface_temp_c <= 38
    assert 0 <= m.flood_extent_pct <= 100
    assert -80 <= m.elevation_above_local_m <= 80
    assert m.conflict_incidents_per_month >= 0


def test_measurement_is_deterministic(scenario):
    a = SyntheticSignalProvider(rng=HashRandom(3)).measure(6.9, 31.4, scenario)
    b = SyntheticSignalProvider(rng=HashRandom(3)).measure(6.9, 31.4, scenario)
    assert a == b


def test_drought_dries_and_heats(rng):
    provider = SyntheticSignalProvider(rng=rng)
    calm = provider.measure(6.9, 31.4, DayScenario(day=200))
    drought = provider.measure(6.9, 31.4, DayScenario(day=200, drought_severity=1.0))
    assert drought.rainfall_mm_day < calm.rainfall_mm_day
    assert drought.ndvi <= calm.ndvi
    assert drought.land_surface_temp_c > calm.land_surface_temp_c


def test_flood_scenario_raises_flood_extent(rng):
    provider = SyntheticSignalProvider(rng=rng)
    calm = provider.measure(6.9, 31.4, DayScenario(day=40))
    flooded = provider.measure(6.9, 31.4, DayScenario(day=40, flood_extent=1.0))
    assert flooded.flood_extent_pct == pytest.approx(min(100, calm.flood_extent_pct + 28))


def test_conflict_incidents_follow_zone_history(rng):
    provider = SyntheticSignalProvider(rng=rng)
    # Greater Pibor zone center: history score 1.0
    assert provider.conflict_incidents_per_month(6.80, 33.10) == 9
    assert provider.conflict_incidents_per_month(5.8, 30.3) == 0


def test_wet_season_phase():
    assert wet_season_phase(day_of_year(0)) == 0.0
    assert wet_season_phase(day_of_year(211)) == pytest.approx(1.0, abs=0.01)
    assert day_of_year(360, seasonal_shift=10) == 5


def test_seasonal_water_dries_out():
    layers = EnvironmentLayers(rng=SequenceRandom([0.5]))
    # Next to the Twic East seasonal toic
    wet = layers.water_at(6.6, 31.9, DayScenario(day=200))
    dry = layers.water_at(6.6, 31.9, DayScenario(day=20))
    assert wet.nearest_type == "seasonal"
    assert wet.score > dry.score
    assert wet.dist_km == pytest.approx(0.0)


def test_vegetation_drought_penalty():
    layers = EnvironmentLayers(rng=SequenceRandom([0.5]))
    calm = layers.vegetation_at(7.0, 31.0, DayScenario(day=150))
    drought = layers.vegetation_at(7.0, 31.0, DayScenario(day=150, drought_severity=1.0))
    assert drought == pytest.approx(calm * 0.5)


def test_nearest_village_and_farm():
    layers = EnvironmentLayers()
    dist, village = layers.nearest_village(6.21, 31.56)
    assert village.name == "Bor"
    assert dist == pytest.approx(0.0)
    assert layers.farm_distance(6.35, 31.45) < 2


def test_sequence_random_cycles_and_clamps():
    r = SequenceRandom([0.2, 1.5])
    assert [r(0), r(0), r(0)] == [0.2, 0.999999, 0.2]
    with pytest.raises(ValueError):
        SequenceRandom([])


def test_hash_random_range_and_sign_of_zero():
    r = HashRandom()
    values = [r(x * 0.37) for x in range(200)]
    assert all(0 <= v < 1 for v in values)
    assert r(0.0) == r(-0.0)
    assert len(set(values)) > 190
