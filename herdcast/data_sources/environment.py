"""Synthetic environment layers for the corridor.

Vegetation, water and conflict-history surfaces seeded from the static
geography (water bodies, conflict zones). In production these come from
MODIS/Sentinel-2 NDVI, JRC Global Surface Water and ACLED; here they are
plausible deterministic proxies so the simulator runs offline.
"""

import math
from dataclasses import dataclass
from typing import Optional

from herdcast.geo.pois import PointsOfInterest, corridor_pois
from herdcast.geo.spatial import (
    conflict_history_score, nearest_farm_distance, nearest_village, nearest_water_body,
)
from herdcast.utils.prng import RandomSource, default_random


@dataclass(frozen=True)
class WaterReading:
    score: float  # 0-1, 1 = abundant
    dist_km: float
    nearest_type: str = "river"


def day_of_year(day: float, seasonal_shift: float = 0.0) -> float:
    return (day + seasonal_shift) % 365


def wet_season_phase(doy: float) -> float:
    """0 in the dry season up to 1 at the wet-season peak (~Jul)."""
    return max(0.0, math.sin((doy - 120) / 365 * math.pi * 2))


class EnvironmentLayers:
    """Vegetation, water and conflict surfaces over the corridor POIs."""

    def __init__(self, pois: Optional[PointsOfInterest] = None, rng: Optional[RandomSource] = None):
        self.pois = pois or corridor_pois
        self.rng = rng or default_random

    def vegetation_at(self, lat: float, lng: float, scenario) -> float:
        """0-1 grazing quality: water proximity, season, rain, drought, noise."""
        dist, _ = nearest_water_body(lat, lng, self.pois.water_bodies)
        water_prox = max(0.0, 1 - dist / 200)

        doy = day_of_year(scenario.day, scenario.seasonal_shift)
        seasonal = 0.5 + 0.5 * math.sin((doy - 90) / 365 * math.pi * 2)
        rain_boost = (scenario.rainfall_anomaly + 1) / 2
        drought_pen = 1 - scenario.drought_severity * 0.5
        noise = self.rng(round(lat * 100) * 1000 + round(lng * 100)) * 0.3

        veg = max(0.0, min(1.0, water_prox * 0.4 + seasonal * 0.25 + rain_boost * 0.2 + noise * 0.15))
        return max(0.0, min(1.0, veg * drought_pen))

    def water_at(self, lat: float, lng: float, scenario) -> WaterReading:
        dist, wb = nearest_water_body(lat, lng, self.pois.water_bodies)
        nearest_type = wb.type if wb else "river"

        # Seasonal points dry up outside the wet months
        seasonal_mult = 1.0
        if nearest_type == "seasonal":
            doy = day_of_year(scenario.day, scenario.seasonal_shift)
            seasonal_mult = 1.0 if 120 < doy < 300 else 0.2

        flood_boost = scenario.flood_extent * 0.3
        score = max(0.0, min(1.0, (1 - dist / 150) * seasonal_mult + flood_boost))
        return WaterReading(score=score, dist_km=dist, nearest_type=nearest_type)

    def conflict_history_at(self, lat: float, lng: float) -> float:
        return conflict_history_score(lat, lng, self.pois.conflict_zones)

    def nearest_village(self, lat: float, lng: float) -> tuple:
        return nearest_village(lat, lng, self.pois.villages)

    def farm_distance(self, lat: float, lng: float) -> float:
        return nearest_farm_distance(lat, lng, self.pois.farms)
