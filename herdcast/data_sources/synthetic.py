"""Synthetic factor generator with South Sudan climatology.

All ten measurements follow CHIRPS, MODIS, SMAP and WaPOR-style ranges for
the Jonglei-Bor-Sudd corridor, so the index bands (low/moderate/high) are
exercised the same way real rasters would exercise them.
"""

import math
from typing import Optional

from herdcast.data_sources.environment import EnvironmentLayers, day_of_year, wet_season_phase
from herdcast.geo.models import DayScenario, FactorMeasurement
from herdcast.utils.prng import RandomSource


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


class SyntheticSignalProvider:
    """Total, offline signal provider driven by scenario modifiers."""

    name = "synthetic"

    def __init__(self, layers: Optional[EnvironmentLayers] = None, rng: Optional[RandomSource] = None):
        self.layers = layers or EnvironmentLayers(rng=rng)
        self.rng = rng or self.layers.rng

    def elevation_above_local_m(self, lat: float, lng: float) -> float:
        """Relief on a 0.5 degree lattice, +/-80 m."""
        cell_lat = math.floor(lat * 2) / 2
        cell_lng = math.floor(lng * 2) / 2
        return (self.rng(cell_lat * 100 + cell_lng) - 0.5) * 160

    def conflict_incidents_per_month(self, lat: float, lng: float) -> float:
        h = self.layers.conflict_history_at(lat, lng)
        if h < 0.2:
            return 0
        if h < 0.5:
            return min(5, round(1 + h * 6))
        return min(10, round(5 + h * 4))

    def measure(self, lat: float, lng: float, scenario: DayScenario) -> FactorMeasurement:
        rng = self.rng
        day = scenario.day
        wet = wet_season_phase(day_of_year(day, scenario.seasonal_shift))
        water = self.layers.water_at(lat, lng, scenario)
        veg = self.layers.vegetation_at(lat, lng, scenario)

        # Rainfall (mm/day): dry 0.5-4, wet 5-25
        rain_dry = 1.5 + rng(lat * 50 + lng * 30 + day) * 2.5
        rain_wet = 8 + wet * 12 + rng(lat * 37 + lng * 41 + day) * 6
        rainfall = (1 - wet) * rain_dry + wet * rain_wet
        rainfall *= 1 + scenario.rainfall_anomaly * 0.4
        rainfall *= max(0.3, 1 - scenario.drought_severity * 0.7)
        rainfall = _clamp(rainfall, 0, 28)

        ndvi = _clamp(veg, 0.12, 0.72)

        # Soil moisture (%): dry 12-22, wet 22-42
        soil_dry = 14 + rng(lat * 77 + lng * 41) * 8
        soil_wet = 24 + wet * 14 + rng(lat * 19 + lng * 53) * 6
        soil = (1 - wet) * soil_dry + wet * soil_wet
        soil += (5 if water.dist_km < 15 else 0) + (rainfall / 20) * 8
        soil = _clamp(soil, 0, 100)

        # Water extent (% within 10 km), expands near the Sudd in the wet season
        seasonal_water = wet * 12
        if water.dist_km < 5:
            water_extent = 18 + seasonal_water + rng(lat * 11 + lng * 7) * 12
        elif water.dist_km < 15:
            water_extent = 8 + seasonal_water * 0.5 + rng(lat * 13 + lng * 17) * 8
        elif water.dist_km < 25:
            water_extent = 3 + rng(lat * 23 + lng * 19) * 6
        else:
            water_extent = rng(lat * 31 + lng * 29) * 5
        water_extent = _clamp(water_extent, 0, 100)

        et_dry = 4 + rng(lat * 11 + lng * 7 + day) * 1.5
        et_wet = 2 + wet * 1.2 + rng(lat * 17 + lng * 13) * 0.8
        et = (1 - wet) * et_dry + wet * et_wet + scenario.drought_severity * 1.2
        et = _clamp(et, 1, 7)

        lst_base = 28 + (1 - wet) * 3 - wet * 2
        lst_noise = (rng(lat * 31 + lng * 23 + day) - 0.5) * 2
        lst = _clamp(lst_base + lst_noise + scenario.drought_severity * 2.5, 22, 38)

        near_water = water.dist_km < 8
        flood_seasonal = wet * (18 if near_water else 6) + rng(lat * 19 + lng * 23) * 4
        flood = _clamp(flood_seasonal + scenario.flood_extent * 28, 0, 100)

        return FactorMeasurement(
            rainfall_mm_day=rainfall,
            ndvi=ndvi,
            soil_moisture_pct=soil,
            water_extent_pct=water_extent,
            evapotranspiration_mm_day=et,
            land_surface_temp_c=lst,
            flood_extent_pct=flood,
            dist_to_water_km=water.dist_km,
            elevation_above_local_m=self.elevation_above_local_m(lat, lng),
            conflict_incidents_per_month=self.conflict_incidents_per_month(lat, lng),
        )
