"""Data models for the corridor, herds and risk alerts."""

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from typing import Optional


# ============ STATIC POINTS OF INTEREST ============

@dataclass(frozen=True)
class WaterBody:
    id: str
    name: str
    lat: float
    lng: float
    type: str = "river"  # river, lake, wetland, seasonal


@dataclass(frozen=True)
class Village:
    id: str
    name: str
    lat: float
    lng: float
    population: Optional[int] = None


@dataclass(frozen=True)
class ConflictZone:
    """Historical conflict circle (ACLED patterns)."""
    id: str
    name: str
    lat: float
    lng: float
    radius_km: float
    severity: str = "medium"  # low, medium, high


@dataclass(frozen=True)
class Farm:
    id: str
    name: str
    # Closed ring of (lat, lng)
    bounds: tuple

    @property
    def centroid(self) -> tuple:
        lat = sum(p[0] for p in self.bounds) / len(self.bounds)
        lng = sum(p[1] for p in self.bounds) / len(self.bounds)
        return lat, lng


@dataclass(frozen=True)
class PeacekeepingSite:
    id: str
    name: str
    lat: float
    lng: float
    type: str = "base"  # base, patrol, outpost


@dataclass(frozen=True)
class HerdSeed:
    """Base camp a simulated herd starts from."""
    id: str
    base_lat: float
    base_lng: float
    speed_km_day: float
    size: float


# ============ SIGNALS AND INDICES ============

@dataclass(frozen=True)
class DayScenario:
    """Scenario modifiers for one simulated day."""
    day: int = 0
    rainfall_anomaly: float = 0.0   # -1 drought .. +1 wet
    drought_severity: float = 0.0   # 0..1
    flood_extent: float = 0.0       # 0..1
    seasonal_shift: float = 0.0     # days

    def on_day(self, day: int) -> "DayScenario":
        return replace(self, day=day)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class FactorMeasurement:
    """Raw environmental measurements at one coordinate-day."""
    rainfall_mm_day: float
    ndvi: float
    soil_moisture_pct: float
    water_extent_pct: float
    evapotranspiration_mm_day: float
    land_surface_temp_c: float
    flood_extent_pct: float
    dist_to_water_km: float
    elevation_above_local_m: float
    conflict_incidents_per_month: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class FactorIndexSet:
    """Normalized 0-1 index per weighted factor."""
    ndvi: float
    geospatial: float
    rainfall: float
    water_bodies: float
    flood_extent: float
    soil_moisture: float
    evapotranspiration: float
    land_surface_temp: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class MovementLikelihood:
    band: str  # high, moderate, low
    likelihood_pct: float
    move_km_min: float
    move_km_max: float
    description: str


# ============ HERDS ============

@dataclass(frozen=True)
class TrailPoint:
    lat: float
    lng: float
    day: int


@dataclass(frozen=True)
class ForecastPoint:
    lat: float
    lng: float
    day: int
    csi: float
    band: str
    confidence: float
    reason: str = ""


@dataclass
class Herd:
    """Simulated herd with its trail and forecast."""
    id: str
    lat: float
    lng: float
    size: float
    speed_km_day: float
    confidence: float
    trail: list = field(default_factory=list)
    predicted: list = field(default_factory=list)
    decision_reason: str = ""
    csi: Optional[float] = None
    movement_band: Optional[str] = None

    def position_at(self, day_offset: int) -> tuple:
        """Predicted (lat, lng) at a forecast offset; current position if none."""
        if 1 <= day_offset <= len(self.predicted):
            p = self.predicted[day_offset - 1]
            return p.lat, p.lng
        return self.lat, self.lng

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "lat": self.lat,
            "lng": self.lng,
            "size": self.size,
            "speed_km_day": self.speed_km_day,
            "confidence": self.confidence,
            "trail": [asdict(p) for p in self.trail],
            "predicted": [asdict(p) for p in self.predicted],
            "decision_reason": self.decision_reason,
            "csi": self.csi,
            "movement_band": self.movement_band,
        }


# ============ RISK ============

@dataclass(frozen=True)
class RiskThresholdProfile:
    region: str
    season: str
    convergence_km: float
    village_proximity_km: float
    farm_proximity_km: float
    resource_scarcity_threshold: float
    history_threshold: float


@dataclass(frozen=True)
class AlertTriggers:
    herd_convergence: bool
    resource_scarcity: bool
    near_village: bool
    near_farmland: bool
    historical_conflict: bool
    event_backed_conflict: bool

    @property
    def count(self) -> int:
        """Contextual triggers fired (convergence excluded)."""
        return sum([
            self.resource_scarcity,
            self.near_village,
            self.near_farmland,
            self.historical_conflict,
        ])


@dataclass(frozen=True)
class SuggestedAction:
    herd_id: str
    type: str  # redirect, delay, both
    risk_category: str
    description: str
    impact_estimate: str
    direction: Optional[str] = None
    delay_days: Optional[int] = None
    target_lat: Optional[float] = None
    target_lng: Optional[float] = None
    alert_id: str = ""

    @property
    def key(self) -> tuple:
        return (self.herd_id, self.type)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Alert:
    """Predicted herd-convergence conflict risk."""
    id: str
    herd_ids: tuple
    lat: float
    lng: float
    days_away: int
    risk_level: str
    risk_category: str
    reason: str
    location: str
    distance_km: float
    triggers: AlertTriggers
    threshold_profile: dict
    suggested_actions: tuple = ()

    @property
    def pair_key(self) -> tuple:
        return tuple(sorted(self.herd_ids))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "herd_ids": list(self.herd_ids),
            "lat": self.lat,
            "lng": self.lng,
            "days_away": self.days_away,
            "risk_level": self.risk_level,
            "risk_category": self.risk_category,
            "reason": self.reason,
            "location": self.location,
            "distance_km": self.distance_km,
            "triggers": asdict(self.triggers),
            "threshold_profile": dict(self.threshold_profile),
            "suggested_actions": [a.to_dict() for a in self.suggested_actions],
        }


@dataclass(frozen=True)
class RiskZone:
    lat: float
    lng: float
    radius_km: float
    risk_level: str
    alert_id: str


@dataclass(frozen=True)
class AlternativeRoute:
    herd_id: str
    from_lat: float
    from_lng: float
    to_lat: float
    to_lng: float
    label: str
    type: str  # redirect, delay
    alert_id: str = ""

    @property
    def key(self) -> tuple:
        return (self.herd_id, self.type)


@dataclass
class RiskAssessment:
    """Complete risk-detection output."""
    alerts: list = field(default_factory=list)
    risk_zones: list = field(default_factory=list)
    alternative_routes: list = field(default_factory=list)
    suggested_actions: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "alerts": [a.to_dict() for a in self.alerts],
            "risk_zones": [asdict(z) for z in self.risk_zones],
            "alternative_routes": [asdict(r) for r in self.alternative_routes],
            "suggested_actions": [a.to_dict() for a in self.suggested_actions],
        }


@dataclass
class ScanResult:
    """One simulate-then-detect run over the corridor."""
    run_id: str
    timestamp: datetime
    day: int
    forecast_days: int
    scenario: DayScenario
    herds: list
    assessment: RiskAssessment
    summary: str
    duration_seconds: float
    metadata: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "timestamp": self.timestamp.isoformat(),
            "day": self.day,
            "forecast_days": self.forecast_days,
            "scenario": self.scenario.to_dict(),
            "herds": [h.to_dict() for h in self.herds],
            **self.assessment.to_dict(),
            "summary": self.summary,
            "duration_seconds": self.duration_seconds,
            "metadata": dict(self.metadata),
        }
