"""County- and season-aware risk thresholds."""

from typing import Optional

from herdcast.geo.models import RiskThresholdProfile
from herdcast.utils.config import RiskThresholdConfig, settings

NEUTRAL = {"convergence": 1.0, "village": 1.0, "farm": 1.0, "scarcity": 1.0, "history": 1.0}

# First matching box wins; order matters where edges touch.
COUNTY_RULES = [
    {
        "county": "bor",
        "bbox": {"south": 5.9, "north": 6.6, "west": 31.2, "east": 31.9},
        "multipliers": {"convergence": 0.9, "village": 1.1, "farm": 1.15, "scarcity": 1.0, "history": 0.95},
    },
    {
        "county": "duk",
        "bbox": {"south": 6.6, "north": 7.4, "west": 31.0, "east": 31.7},
        "multipliers": {"convergence": 0.95, "village": 1.0, "farm": 1.0, "scarcity": 0.95, "history": 0.9},
    },
    {
        "county": "ayod",
        "bbox": {"south": 7.3, "north": 8.2, "west": 31.1, "east": 32.2},
        "multipliers": {"convergence": 1.0, "village": 0.95, "farm": 0.9, "scarcity": 0.9, "history": 0.9},
    },
    {
        "county": "pibor",
        "bbox": {"south": 6.0, "north": 7.5, "west": 32.3, "east": 33.5},
        "multipliers": {"convergence": 1.1, "village": 1.2, "farm": 1.0, "scarcity": 1.0, "history": 0.8},
    },
    {
        "county": "akobo",
        "bbox": {"south": 7.4, "north": 8.2, "west": 32.4, "east": 33.5},
        "multipliers": {"convergence": 1.05, "village": 1.1, "farm": 0.9, "scarcity": 0.95, "history": 0.85},
    },
]

SEASON_MULTIPLIERS = {
    "wet": {"convergence": 0.95, "village": 1.0, "farm": 1.0, "scarcity": 0.85, "history": 1.0},
    "transition": dict(NEUTRAL),
    "dry": {"convergence": 1.05, "village": 1.1, "farm": 1.1, "scarcity": 1.15, "history": 1.0},
}


def season_from_day(day: int) -> str:
    """Wet ~Apr-Oct, transition shoulders around it, dry otherwise."""
    doy = day % 365
    if 100 <= doy <= 285:
        return "wet"
    if 70 <= doy < 100 or 285 < doy <= 320:
        return "transition"
    return "dry"


def county_from_point(lat: float, lng: float) -> str:
    for rule in COUNTY_RULES:
        b = rule["bbox"]
        if b["south"] <= lat <= b["north"] and b["west"] <= lng <= b["east"]:
            return rule["county"]
    return "other"


def multipliers_for_county(county: str) -> dict:
    for rule in COUNTY_RULES:
        if rule["county"] == county:
            return rule["multipliers"]
    return NEUTRAL


class ThresholdProfileResolver:
    """Pure (lat, lng, day) -> RiskThresholdProfile."""

    def __init__(self, base: Optional[RiskThresholdConfig] = None):
        self.base = base or settings.risk.base

    def resolve(self, lat: float, lng: float, day: int) -> RiskThresholdProfile:
        season = season_from_day(day)
        county = county_from_point(lat, lng)
        cm = multipliers_for_county(county)
        sm = SEASON_MULTIPLIERS[season]
        base = self.base

        return RiskThresholdProfile(
            region=county,
            season=season,
            convergence_km=base.convergence_km * cm["convergence"] * sm["convergence"],
            village_proximity_km=base.village_proximity_km * cm["village"] * sm["village"],
            farm_proximity_km=base.farm_proximity_km * cm["farm"] * sm["farm"],
            resource_scarcity_threshold=min(
                base.max_resource_scarcity,
                base.resource_scarcity * cm["scarcity"] * sm["scarcity"],
            ),
            history_threshold=min(
                base.max_history,
                base.history * cm["history"] * sm["history"],
            ),
        )


threshold_resolver = ThresholdProfileResolver()
