import pytest

from herdcast.core.csi import PRESETS
from herdcast.data_sources.environment import EnvironmentLayers, WaterReading
from herdcast.geo.models import DayScenario, ForecastPoint, Herd
from herdcast.utils.prng import HashRandom, SequenceRandom


class FixedLayers(EnvironmentLayers):
    """Corridor POIs with vegetation and water pinned to fixed scores."""

    def __init__(self, vegetation: float = 0.8, water: float = 0.8, **kwargs):
        super().__init__(**kwargs)
        self.vegetation = vegetation
        self.water = water

    def vegetation_at(self, lat, lng, scenario):
        return self.vegetation

    def water_at(self, lat, lng, scenario):
        return WaterReading(score=self.water, dist_km=10.0)


def make_herd(herd_id: str, positions: list, confidence: float = 0.8) -> Herd:
    """Herd whose current position is the first entry and forecast the rest."""
    lat, lng = positions[0]
    predicted = [
        ForecastPoint(lat=p[0], lng=p[1], day=i + 1, csi=0.5, band="moderate", confidence=confidence)
        for i, p in enumerate(positions[1:])
    ]
    return Herd(id=herd_id, lat=lat, lng=lng, size=0.7, speed_km_day=20, confidence=confidence, predicted=predicted)


@pytest.fixture
def balanced_measurement():
    return PRESETS["balanced"]


@pytest.fixture
def scenario():
    return DayScenario(day=0)


@pytest.fixture
def rng():
    return HashRandom(salt=7)


@pytest.fixture
def midpoint_rng():
    return SequenceRandom([0.5])


@pytest.fixture
def scarce_layers():
    return FixedLayers(vegetation=0.1, water=0.1)


@pytest.fixture
def lush_layers():
    return FixedLayers(vegetation=0.9, water=0.9)
