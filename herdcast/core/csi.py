"""Composite Suitability Index (CSI) for cattle movement.

Eight environmental factors are mapped to 0-1 indices by fixed three-band
step functions, then combined into one weighted CSI (weight = rank / 10).
High CSI means a herd is likely to stay; low CSI means strong pressure to
move. The same module provides movement bands and the least-cost path cost
used by the simulator.
"""

from dataclasses import dataclass
from typing import Mapping, Union

from herdcast.geo.models import FactorIndexSet, FactorMeasurement, MovementLikelihood
from herdcast.utils.constants import (
    CONFLICT_PENALTY_PER_INCIDENT,
    CONFLICT_PENALTY_SATURATION,
    FACTOR_WEIGHTS,
    FLOOD_PENALTY_DIVISOR,
    FLOOD_PENALTY_SATURATION_PCT,
    GEOSPATIAL_SUB_WEIGHTS,
    MIN_CSI_FOR_COST,
    SATURATED_PENALTY,
)


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


# ============ FACTOR INDICES ============

def index_rainfall(mm_per_day: float) -> float:
    """Low <5 -> 0.2, moderate 5-20 -> 0.8, high >20 -> 0.3 (waterlogging)."""
    if mm_per_day < 5:
        return 0.2
    if mm_per_day <= 20:
        return 0.8
    return 0.3


def index_ndvi(ndvi: float) -> float:
    if ndvi < 0.2:
        return 0.1
    if ndvi <= 0.5:
        return 0.6
    return 1.0


def index_soil_moisture(pct: float) -> float:
    if pct < 20:
        return 0.2
    if pct <= 40:
        return 0.7
    return 0.4


def index_water_extent(pct: float) -> float:
    if pct < 10:
        return 0.1
    if pct <= 30:
        return 0.8
    return 0.9


def index_evapotranspiration(mm_per_day: float) -> float:
    if mm_per_day < 2:
        return 0.9
    if mm_per_day <= 5:
        return 0.6
    return 0.3


def index_land_surface_temp(celsius: float) -> float:
    if celsius < 25:
        return 1.0
    if celsius <= 30:
        return 0.7
    return 0.4


def index_flood_extent(pct: float) -> float:
    if pct < 5:
        return 1.0
    if pct <= 10:
        return 0.5
    return 0.1


def index_water_proximity(dist_km: float) -> float:
    if dist_km < 5:
        return 1.0
    if dist_km <= 20:
        return 0.6
    return 0.2


def index_elevation(above_local_m: float) -> float:
    return 0.8 if above_local_m >= 50 else 0.4


def index_conflict(incidents_per_month: float) -> float:
    if incidents_per_month == 0:
        return 1.0
    if incidents_per_month <= 5:
        return 0.5
    return 0.1


def index_geospatial(dist_to_water_km: float, elevation_above_local_m: float, conflict_per_month: float) -> float:
    """Weighted blend of water proximity, elevation and conflict sub-indices."""
    blended = (
        index_water_proximity(dist_to_water_km) * GEOSPATIAL_SUB_WEIGHTS["water"]
        + index_elevation(elevation_above_local_m) * GEOSPATIAL_SUB_WEIGHTS["elevation"]
        + index_conflict(conflict_per_month) * GEOSPATIAL_SUB_WEIGHTS["conflict"]
    )
    return clamp01(blended)


def compute_factor_indices(m: FactorMeasurement) -> FactorIndexSet:
    return FactorIndexSet(
        ndvi=index_ndvi(m.ndvi),
        geospatial=index_geospatial(
            m.dist_to_water_km, m.elevation_above_local_m, m.conflict_incidents_per_month
        ),
        rainfall=index_rainfall(m.rainfall_mm_day),
        water_bodies=index_water_extent(m.water_extent_pct),
        flood_extent=index_flood_extent(m.flood_extent_pct),
        soil_moisture=index_soil_moisture(m.soil_moisture_pct),
        evapotranspiration=index_evapotranspiration(m.evapotranspiration_mm_day),
        land_surface_temp=index_land_surface_temp(m.land_surface_temp_c),
    )


# ============ COMPOSITE INDEX ============

def compute_csi(indices: Union[FactorIndexSet, Mapping[str, float]]) -> float:
    """CSI = sum(index * weight) / sum(weight) over the factors present.

    Missing factors (absent keys or None) are skipped, so the weighted mean
    stays comparable when a source is unavailable.
    """
    total = 0.0
    total_weight = 0.0
    for name, weight in FACTOR_WEIGHTS:
        if isinstance(indices, Mapping):
            idx = indices.get(name)
        else:
            idx = getattr(indices, name, None)
        if idx is None:
            continue
        total += idx * weight
        total_weight += weight
    if total_weight <= 0:
        return 0.0
    return clamp01(total / total_weight)


def dominant_factor(indices: FactorIndexSet) -> str:
    """Factor with the lowest index (most unfavorable); first wins on ties."""
    key = FACTOR_WEIGHTS[0][0]
    lowest = 1.0
    for name, _ in FACTOR_WEIGHTS:
        value = getattr(indices, name)
        if value < lowest:
            lowest = value
            key = name
    return key


# ============ MOVEMENT BANDS ============

def get_movement_likelihood(csi: float) -> MovementLikelihood:
    if csi > 0.7:
        return MovementLikelihood(
            band="high",
            likelihood_pct=0.3,
            move_km_min=0,
            move_km_max=5,
            description="Stay put; high suitability (CSI >0.7).",
        )
    if csi >= 0.4:
        return MovementLikelihood(
            band="moderate",
            likelihood_pct=0.6,
            move_km_min=5,
            move_km_max=20,
            description="Short moves <20 km; moderate suitability (CSI 0.4-0.7).",
        )
    return MovementLikelihood(
        band="low",
        likelihood_pct=0.9,
        move_km_min=50,
        move_km_max=400,
        description="Long moves 50-400 km to better CSI areas; low suitability (CSI <0.4).",
    )


def likelihood_message(csi: float, dominant: str, direction: str, distance_km: float) -> str:
    band = get_movement_likelihood(csi)
    pct = round(band.likelihood_pct * 100)
    return (
        f"{pct}% likelihood of moving {distance_km} km {direction} due to {dominant}. "
        f"CSI={csi:.2f} ({band.band} suitability)."
    )


# ============ PATH COST ============

def conflict_penalty(incidents_per_month: float) -> float:
    if incidents_per_month > CONFLICT_PENALTY_SATURATION:
        return SATURATED_PENALTY
    return incidents_per_month * CONFLICT_PENALTY_PER_INCIDENT


def flood_penalty(flood_pct: float) -> float:
    if flood_pct > FLOOD_PENALTY_SATURATION_PCT:
        return SATURATED_PENALTY
    return flood_pct / FLOOD_PENALTY_DIVISOR


def get_path_cost(csi: float, conflict: float = 0.0, flood: float = 0.0) -> float:
    """cost = 1 / clamp(CSI, 0.01, 1) + conflict penalty + flood penalty."""
    safe_csi = max(MIN_CSI_FOR_COST, min(1.0, csi))
    return 1 / safe_csi + conflict + flood


@dataclass(frozen=True)
class SuitabilityAssessment:
    """Everything the simulator needs to rank one location."""
    measurement: FactorMeasurement
    indices: FactorIndexSet
    csi: float
    cost: float

    @property
    def likelihood(self) -> MovementLikelihood:
        return get_movement_likelihood(self.csi)


def assess(measurement: FactorMeasurement) -> SuitabilityAssessment:
    indices = compute_factor_indices(measurement)
    csi = compute_csi(indices)
    cost = get_path_cost(
        csi,
        conflict=conflict_penalty(measurement.conflict_incidents_per_month),
        flood=flood_penalty(measurement.flood_extent_pct),
    )
    return SuitabilityAssessment(measurement=measurement, indices=indices, csi=csi, cost=cost)


# ============ REFERENCE PRESETS ============

PRESETS = {
    "dry": FactorMeasurement(
        rainfall_mm_day=3,
        ndvi=0.15,
        soil_moisture_pct=15,
        water_extent_pct=5,
        evapotranspiration_mm_day=6,
        land_surface_temp_c=32,
        flood_extent_pct=2,
        dist_to_water_km=22,
        elevation_above_local_m=30,
        conflict_incidents_per_month=6,
    ),
    "balanced": FactorMeasurement(
        rainfall_mm_day=12,
        ndvi=0.35,
        soil_moisture_pct=30,
        water_extent_pct=20,
        evapotranspiration_mm_day=3.5,
        land_surface_temp_c=27,
        flood_extent_pct=3,
        dist_to_water_km=10,
        elevation_above_local_m=60,
        conflict_incidents_per_month=0,
    ),
    "wet": FactorMeasurement(
        rainfall_mm_day=22,
        ndvi=0.55,
        soil_moisture_pct=45,
        water_extent_pct=35,
        evapotranspiration_mm_day=2,
        land_surface_temp_c=26,
        flood_extent_pct=15,
        dist_to_water_km=3,
        elevation_above_local_m=20,
        conflict_incidents_per_month=2,
    ),
}
