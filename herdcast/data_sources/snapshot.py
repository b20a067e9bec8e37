"""Read-only environment snapshot from pre-fetched satellite and conflict data.

A snapshot is built once (from JSON or CSV exports of the GEE/ACLED
fetchers) and handed to ``SnapshotSignalProvider``. Lookups snap to a 0.1
degree grid and search the eight neighbours before giving up; on a miss the
provider falls back to the synthetic generator, so ``measure`` stays total.
"""

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

import pandas as pd
from loguru import logger

from herdcast.data_sources.environment import day_of_year
from herdcast.data_sources.synthetic import SyntheticSignalProvider
from herdcast.geo.models import DayScenario, FactorMeasurement
from herdcast.utils.constants import CONFLICT_INCIDENTS_FULL_SCORE, GRID_SNAP

MEASUREMENT_FIELDS = list(FactorMeasurement.__dataclass_fields__)

NEIGHBOUR_OFFSETS = [(di, dj) for di in (-1, 0, 1) for dj in (-1, 0, 1) if (di, dj) != (0, 0)]


def grid_key(lat: float, lng: float) -> tuple:
    return round(lat * GRID_SNAP), round(lng * GRID_SNAP)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _lookup(table: Mapping, lat: float, lng: float):
    i, j = grid_key(lat, lng)
    if (i, j) in table:
        return table[(i, j)]
    for di, dj in NEIGHBOUR_OFFSETS:
        hit = table.get((i + di, j + dj))
        if hit is not None:
            return hit
    return None


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """Immutable grid of base measurements plus optional conflict aggregates."""
    cells: Mapping = field(default_factory=lambda: MappingProxyType({}))
    conflicts: Optional[Mapping] = None
    metadata: Mapping = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_records(
        cls,
        cells: Iterable[dict],
        conflict_cells: Optional[Iterable[dict]] = None,
        metadata: Optional[dict] = None,
    ) -> "EnvironmentSnapshot":
        """Build from ``{"lat", "lng", "values": {...}}`` cell records."""
        table = {}
        for cell in cells:
            values = cell["values"]
            table[grid_key(cell["lat"], cell["lng"])] = FactorMeasurement(
                **{name: float(values[name]) for name in MEASUREMENT_FIELDS}
            )

        conflicts = None
        if conflict_cells is not None:
            conflicts = MappingProxyType({
                grid_key(c["lat"], c["lng"]): float(c["incidents_per_month"])
                for c in conflict_cells
            })

        return cls(
            cells=MappingProxyType(table),
            conflicts=conflicts,
            metadata=MappingProxyType(dict(metadata or {})),
        )

    @classmethod
    def from_json(cls, path: Path) -> "EnvironmentSnapshot":
        """Load ``{"metadata", "cells", "conflicts": {"cell_aggregates"}}``."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Snapshot not found: {path}")
        with open(path) as f:
            data = json.load(f)

        conflict_cells = None
        if data.get("conflicts") is not None:
            conflict_cells = data["conflicts"].get("cell_aggregates", [])

        snapshot = cls.from_records(
            data.get("cells", []),
            conflict_cells=conflict_cells,
            metadata=data.get("metadata", {}),
        )
        logger.info(f"Snapshot loaded from {path.name}: {len(snapshot.cells)} cells ({snapshot.mode})")
        return snapshot

    @classmethod
    def from_csv(cls, path: Path, conflicts_path: Optional[Path] = None) -> "EnvironmentSnapshot":
        """Load a flat CSV with ``lat``, ``lng`` and one column per measurement."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Snapshot not found: {path}")
        df = pd.read_csv(path)
        missing = [c for c in ["lat", "lng", *MEASUREMENT_FIELDS] if c not in df.columns]
        if missing:
            raise ValueError(f"Snapshot CSV missing columns: {missing}")

        cells = [
            {"lat": row["lat"], "lng": row["lng"], "values": row}
            for row in df.to_dict(orient="records")
        ]
        conflict_cells = None
        if conflicts_path is not None:
            conflict_cells = pd.read_csv(conflicts_path).to_dict(orient="records")

        return cls.from_records(cells, conflict_cells=conflict_cells, metadata={"source": str(path)})

    @property
    def mode(self) -> str:
        if self.cells and self.conflicts is not None:
            return "real"
        if self.cells or self.conflicts is not None:
            return "mixed"
        return "mock"

    def base_values_at(self, lat: float, lng: float) -> Optional[FactorMeasurement]:
        return _lookup(self.cells, lat, lng)

    def conflict_incidents_at(self, lat: float, lng: float) -> Optional[float]:
        """Incidents/month; None without conflict data, 0 for an empty cell."""
        if self.conflicts is None:
            return None
        hit = _lookup(self.conflicts, lat, lng)
        return 0.0 if hit is None else hit

    def conflict_risk_score(self, lat: float, lng: float) -> Optional[float]:
        incidents = self.conflict_incidents_at(lat, lng)
        if incidents is None:
            return None
        return min(1.0, incidents / CONFLICT_INCIDENTS_FULL_SCORE)


class SnapshotSignalProvider:
    """Real base values with scenario modifiers; synthetic on a miss."""

    name = "snapshot"

    def __init__(self, snapshot: EnvironmentSnapshot, fallback: Optional[SyntheticSignalProvider] = None):
        self.snapshot = snapshot
        self.fallback = fallback or SyntheticSignalProvider()

    def measure(self, lat: float, lng: float, scenario: DayScenario) -> FactorMeasurement:
        base = self.snapshot.base_values_at(lat, lng)
        if base is None:
            return self.fallback.measure(lat, lng, scenario)

        rainfall_mod = 1 + scenario.rainfall_anomaly * 0.4
        drought_mod = max(0.3, 1 - scenario.drought_severity * 0.7)
        flood_add = scenario.flood_extent * 28

        # Real data is a point-in-time snapshot; modulate it by the season phase
        doy = day_of_year(scenario.day, scenario.seasonal_shift)
        wet_phase = max(0.0, math.sin((doy - 120) / 365 * math.pi * 2))
        seasonal_factor = 0.7 + wet_phase * 0.3

        rainfall = _clamp(base.rainfall_mm_day * rainfall_mod * drought_mod * seasonal_factor, 0, 50)
        ndvi = _clamp(base.ndvi * drought_mod * seasonal_factor, 0.05, 0.95)
        soil = _clamp(
            base.soil_moisture_pct * drought_mod * seasonal_factor + (rainfall / 20) * 8, 0, 100
        )
        rain_water_boost = scenario.rainfall_anomaly * 5 if scenario.rainfall_anomaly > 0 else 0
        water_extent = _clamp(
            base.water_extent_pct * seasonal_factor + flood_add + rain_water_boost, 0, 100
        )
        et = _clamp(base.evapotranspiration_mm_day + scenario.drought_severity * 1.2, 0.5, 10)
        lst = _clamp(base.land_surface_temp_c + scenario.drought_severity * 2.5, 15, 50)
        rain_flood_boost = (rainfall - 20) * 2 if rainfall > 20 else 0
        flood = _clamp(base.flood_extent_pct + flood_add + rain_flood_boost, 0, 100)

        conflicts = self.snapshot.conflict_incidents_at(lat, lng)

        return FactorMeasurement(
            rainfall_mm_day=rainfall,
            ndvi=ndvi,
            soil_moisture_pct=soil,
            water_extent_pct=water_extent,
            evapotranspiration_mm_day=et,
            land_surface_temp_c=lst,
            flood_extent_pct=flood,
            dist_to_water_km=base.dist_to_water_km,
            elevation_above_local_m=base.elevation_above_local_m,
            conflict_incidents_per_month=(
                conflicts if conflicts is not None else base.conflict_incidents_per_month
            ),
        )
