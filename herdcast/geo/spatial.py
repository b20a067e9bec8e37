"""Distance and proximity lookups over the static POIs."""

import math
from typing import Optional

from herdcast.geo.models import Village
from herdcast.utils.constants import KM_PER_DEGREE

SEVERITY_WEIGHTS = {"high": 1.0, "medium": 0.6, "low": 0.3}


def distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Equirectangular distance; accurate enough at corridor scale."""
    dlat = (lat2 - lat1) * KM_PER_DEGREE
    dlng = (lng2 - lng1) * KM_PER_DEGREE * math.cos(math.radians((lat1 + lat2) / 2))
    return math.sqrt(dlat * dlat + dlng * dlng)


def midpoint(lat1: float, lng1: float, lat2: float, lng2: float) -> tuple:
    return (lat1 + lat2) / 2, (lng1 + lng2) / 2


def nearest_village(lat: float, lng: float, villages) -> tuple:
    """Return (distance_km, village); (inf, None) without villages."""
    best: Optional[Village] = None
    best_dist = math.inf
    for v in villages:
        d = distance_km(lat, lng, v.lat, v.lng)
        if d < best_dist:
            best_dist = d
            best = v
    return best_dist, best


def nearest_farm_distance(lat: float, lng: float, farms) -> float:
    """Distance to the nearest farm polygon centroid."""
    best = math.inf
    for f in farms:
        c_lat, c_lng = f.centroid
        best = min(best, distance_km(lat, lng, c_lat, c_lng))
    return best


def nearest_water_body(lat: float, lng: float, water_bodies) -> tuple:
    """Return (distance_km, water_body); (inf, None) without water bodies."""
    best = None
    best_dist = math.inf
    for wb in water_bodies:
        d = distance_km(lat, lng, wb.lat, wb.lng)
        if d < best_dist:
            best_dist = d
            best = wb
    return best_dist, best


def conflict_history_score(lat: float, lng: float, conflict_zones) -> float:
    """0-1 score, strongest near the center of severe zones."""
    score = 0.0
    for cz in conflict_zones:
        d = distance_km(lat, lng, cz.lat, cz.lng)
        if d < cz.radius_km:
            proximity = 1 - d / cz.radius_km
            score = max(score, proximity * SEVERITY_WEIGHTS.get(cz.severity, 0.3))
    return score
