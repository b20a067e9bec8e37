"""Static points of interest loaded from YAML."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from loguru import logger

from herdcast.geo.models import (
    ConflictZone, Farm, HerdSeed, PeacekeepingSite, Village, WaterBody,
)
from herdcast.utils.config import settings

DEFAULT_POIS_PATH = Path(__file__).parent.parent / "data" / "corridor.yaml"
FARM_SIZE_DEG = 0.08


@dataclass(frozen=True)
class PointsOfInterest:
    """Read-only reference data used for proximity lookups."""
    water_bodies: tuple = ()
    villages: tuple = ()
    conflict_zones: tuple = ()
    farms: tuple = ()
    peacekeeping_sites: tuple = ()
    herd_seeds: tuple = ()


def load_yaml(path: Path) -> dict:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def farm_polygon(center_lat: float, center_lng: float, size_deg: float = FARM_SIZE_DEG) -> tuple:
    """Closed square ring of (lat, lng) around a center."""
    h = size_deg / 2
    return (
        (center_lat - h, center_lng - h),
        (center_lat - h, center_lng + h),
        (center_lat + h, center_lng + h),
        (center_lat + h, center_lng - h),
        (center_lat - h, center_lng - h),
    )


def parse_points_of_interest(config: dict) -> PointsOfInterest:
    farms = []
    for f in config.get("farms", []):
        if "bounds" in f:
            bounds = tuple(tuple(p) for p in f["bounds"])
        else:
            bounds = farm_polygon(f["lat"], f["lng"], f.get("size_deg", FARM_SIZE_DEG))
        farms.append(Farm(id=f["id"], name=f["name"], bounds=bounds))

    return PointsOfInterest(
        water_bodies=tuple(WaterBody(**w) for w in config.get("water_bodies", [])),
        villages=tuple(Village(**v) for v in config.get("villages", [])),
        conflict_zones=tuple(ConflictZone(**c) for c in config.get("conflict_zones", [])),
        farms=tuple(farms),
        peacekeeping_sites=tuple(PeacekeepingSite(**p) for p in config.get("peacekeeping_sites", [])),
        herd_seeds=tuple(HerdSeed(**h) for h in config.get("herd_seeds", [])),
    )


def load_points_of_interest(path: Optional[Path] = None) -> PointsOfInterest:
    """Load POIs from YAML; defaults to the bundled corridor file."""
    path = Path(path or settings.data.pois_path or DEFAULT_POIS_PATH)
    if not path.exists():
        raise FileNotFoundError(f"POI file not found: {path}")

    pois = parse_points_of_interest(load_yaml(path))
    logger.debug(
        f"Loaded POIs from {path.name}: {len(pois.villages)} villages, "
        f"{len(pois.farms)} farms, {len(pois.water_bodies)} water bodies, "
        f"{len(pois.herd_seeds)} herd seeds"
    )
    return pois


corridor_pois = load_points_of_interest()
