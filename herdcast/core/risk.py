"""Conflict risk detection engine.

A pairwise alert fires when two predicted herd positions converge within the
local convergence distance and enough contextual triggers agree:

    1. Low resource availability at the meeting point
    2. A settlement within reach
    3. Farmland within reach
    4. Conflict history (event-backed when a snapshot carries conflict data)

Every alert carries rerouting guidance: redirect one herd toward the best
nearby grazing and delay the other by a day or two. Guidance only.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from herdcast.core.thresholds import ThresholdProfileResolver, threshold_resolver
from herdcast.data_sources.environment import EnvironmentLayers
from herdcast.geo.models import (
    Alert, AlertTriggers, AlternativeRoute, DayScenario, RiskAssessment, RiskZone, SuggestedAction,
)
from herdcast.geo.spatial import distance_km, midpoint
from herdcast.utils.config import RiskConfig, settings
from herdcast.utils.constants import DELAY_IMPACT, DIRECTIONS, REDIRECT_IMPACT, RISK_LEVELS


@dataclass(frozen=True)
class GrazingTarget:
    lat: float
    lng: float
    direction: str


def severity_rank(level: str) -> int:
    return RISK_LEVELS[level]["rank"]


def classify_severity(dist_km: float, convergence_km: float, trigger_count: int) -> str:
    if dist_km < convergence_km * 0.3 and trigger_count >= 3:
        return "high"
    if dist_km < convergence_km * 0.5 and trigger_count >= 2:
        return "medium"
    return "low"


def classify_category(triggers: AlertTriggers) -> str:
    if triggers.near_village or triggers.near_farmland or triggers.historical_conflict:
        return "community_protection"
    return "resource_tension"


def dedupe_alerts(alerts: list, limit: int) -> list:
    """One alert per herd pair (highest severity, then soonest), sorted and capped."""
    by_pair = {}
    for alert in alerts:
        existing = by_pair.get(alert.pair_key)
        if existing is None:
            by_pair[alert.pair_key] = alert
            continue
        if (severity_rank(alert.risk_level), alert.days_away) < (
            severity_rank(existing.risk_level), existing.days_away
        ):
            by_pair[alert.pair_key] = alert

    ordered = sorted(by_pair.values(), key=lambda a: (severity_rank(a.risk_level), a.days_away))
    return ordered[:limit]


def dedupe_by_key(items: list) -> list:
    """Keep the first item per ``key`` (herd, kind)."""
    seen = set()
    out = []
    for item in items:
        if item.key in seen:
            continue
        seen.add(item.key)
        out.append(item)
    return out


class RiskDetectionEngine:
    """Scan forecast herd pairs for convergence conflict risk."""

    def __init__(
        self,
        layers: Optional[EnvironmentLayers] = None,
        resolver: Optional[ThresholdProfileResolver] = None,
        snapshot=None,
        config: Optional[RiskConfig] = None,
    ):
        self.layers = layers or EnvironmentLayers()
        self.resolver = resolver or threshold_resolver
        self.snapshot = snapshot
        self.config = config or settings.risk

    # ============ TRIGGERS ============

    def conflict_history(self, lat: float, lng: float) -> tuple:
        """Return ``(score, event_backed)``."""
        if self.snapshot is not None:
            score = self.snapshot.conflict_risk_score(lat, lng)
            if score is not None:
                return score, True
        return self.layers.conflict_history_at(lat, lng), False

    def evaluate_triggers(self, lat: float, lng: float, profile, scenario: DayScenario) -> tuple:
        """Return ``(triggers, village_dist, village)`` at a meeting point."""
        veg = self.layers.vegetation_at(lat, lng, scenario)
        water = self.layers.water_at(lat, lng, scenario)
        village_dist, village = self.layers.nearest_village(lat, lng)
        farm_dist = self.layers.farm_distance(lat, lng)
        history, event_backed = self.conflict_history(lat, lng)

        cutoff = profile.resource_scarcity_threshold
        triggers = AlertTriggers(
            herd_convergence=True,
            resource_scarcity=veg < cutoff or water.score < cutoff,
            near_village=village_dist < profile.village_proximity_km,
            near_farmland=farm_dist < profile.farm_proximity_km,
            historical_conflict=history > profile.history_threshold,
            event_backed_conflict=event_backed,
        )
        return triggers, village_dist, village

    # ============ REROUTING ============

    def find_alternative_grazing(
        self, from_lat: float, from_lng: float, avoid_lat: float, avoid_lng: float, scenario: DayScenario,
    ) -> GrazingTarget:
        """Best of eight candidates one redirect step away, scored on forage, water and distance from the hotspot."""
        step = self.config.redirect_step_deg
        best = GrazingTarget(lat=from_lat, lng=from_lng + step, direction="east")
        best_score = None

        for name, dlat, dlng in DIRECTIONS:
            c_lat = from_lat + dlat * step
            c_lng = from_lng + dlng * step
            veg = self.layers.vegetation_at(c_lat, c_lng, scenario)
            water = self.layers.water_at(c_lat, c_lng, scenario)
            away = distance_km(c_lat, c_lng, avoid_lat, avoid_lng)
            score = veg * 0.4 + water.score * 0.3 + (away / 100) * 0.3
            if best_score is None or score > best_score:
                best_score = score
                best = GrazingTarget(lat=c_lat, lng=c_lng, direction=name)

        return best

    @staticmethod
    def build_reason(a_id: str, b_id: str, dist: float, triggers: AlertTriggers, village, village_dist: float) -> str:
        parts = [f"{a_id} & {b_id} converging ({dist:.0f}km apart)"]
        if triggers.resource_scarcity:
            parts.append("low resource availability")
        if triggers.near_village:
            name = village.name if village else "settlement"
            parts.append(f"near {name} ({village_dist:.0f}km)")
        if triggers.near_farmland:
            parts.append("near farmland")
        if triggers.historical_conflict:
            if triggers.event_backed_conflict:
                parts.append("recent recorded conflict activity")
            else:
                parts.append("historically conflict-prone area")
        return "; ".join(parts)

    # ============ DETECTION ============

    def detect_risks(self, herds: list, day: int, scenario: Optional[DayScenario] = None) -> RiskAssessment:
        """Scan every forecast day and herd pair; return deduplicated alerts and guidance."""
        if not herds:
            return RiskAssessment()

        scenario = scenario or DayScenario()
        forecast_days = len(herds[0].predicted)

        alerts = []
        zones = []
        routes = []
        actions = []

        for offset in range(1, forecast_days + 1):
            day_scenario = scenario.on_day(day + offset)
            positions = [(h, h.position_at(offset)) for h in herds]

            for i in range(len(positions)):
                for j in range(i + 1, len(positions)):
                    herd_a, (a_lat, a_lng) = positions[i]
                    herd_b, (b_lat, b_lng) = positions[j]
                    dist = distance_km(a_lat, a_lng, b_lat, b_lng)
                    mid_lat, mid_lng = midpoint(a_lat, a_lng, b_lat, b_lng)
                    profile = self.resolver.resolve(mid_lat, mid_lng, day + offset)

                    if dist >= profile.convergence_km:
                        continue

                    triggers, village_dist, village = self.evaluate_triggers(
                        mid_lat, mid_lng, profile, day_scenario
                    )
                    if triggers.count < self.config.min_triggers:
                        continue

                    risk_level = classify_severity(dist, profile.convergence_km, triggers.count)
                    category = classify_category(triggers)
                    alert_id = f"alert-{herd_a.id}-{herd_b.id}-d{offset}"
                    delay_days = min(offset, 2)

                    alt_a = self.find_alternative_grazing(a_lat, a_lng, mid_lat, mid_lng, day_scenario)
                    alt_b = self.find_alternative_grazing(b_lat, b_lng, mid_lat, mid_lng, day_scenario)

                    suggested = (
                        SuggestedAction(
                            herd_id=herd_a.id,
                            type="redirect",
                            risk_category=category,
                            description=f"Redirect {herd_a.id} {alt_a.direction} toward open pasture",
                            impact_estimate=REDIRECT_IMPACT,
                            direction=alt_a.direction,
                            target_lat=alt_a.lat,
                            target_lng=alt_a.lng,
                            alert_id=alert_id,
                        ),
                        SuggestedAction(
                            herd_id=herd_b.id,
                            type="delay",
                            risk_category=category,
                            description=(
                                f"Delay {herd_b.id} movement by {delay_days} "
                                f"day{'s' if delay_days > 1 else ''}, water available south"
                            ),
                            impact_estimate=DELAY_IMPACT,
                            delay_days=delay_days,
                            alert_id=alert_id,
                        ),
                    )

                    if village is not None:
                        location = f"Near {village.name}"
                    else:
                        location = f"{mid_lat:.1f}°N, {mid_lng:.1f}°E"

                    alerts.append(Alert(
                        id=alert_id,
                        herd_ids=(herd_a.id, herd_b.id),
                        lat=mid_lat,
                        lng=mid_lng,
                        days_away=offset,
                        risk_level=risk_level,
                        risk_category=category,
                        reason=self.build_reason(herd_a.id, herd_b.id, dist, triggers, village, village_dist),
                        location=location,
                        distance_km=dist,
                        triggers=triggers,
                        threshold_profile={"region": profile.region, "season": profile.season},
                        suggested_actions=suggested,
                    ))
                    zones.append(RiskZone(
                        lat=mid_lat,
                        lng=mid_lng,
                        radius_km=self.config.risk_zone_radius_km,
                        risk_level=risk_level,
                        alert_id=alert_id,
                    ))
                    routes.append(AlternativeRoute(
                        herd_id=herd_a.id,
                        from_lat=herd_a.lat,
                        from_lng=herd_a.lng,
                        to_lat=alt_a.lat,
                        to_lng=alt_a.lng,
                        label=f"Redirect {alt_a.direction} → open pasture",
                        type="redirect",
                        alert_id=alert_id,
                    ))
                    routes.append(AlternativeRoute(
                        herd_id=herd_b.id,
                        from_lat=herd_b.lat,
                        from_lng=herd_b.lng,
                        to_lat=alt_b.lat,
                        to_lng=alt_b.lng,
                        label=f"Delay {delay_days}d → water south",
                        type="delay",
                        alert_id=alert_id,
                    ))
                    actions.extend(suggested)

        kept = dedupe_alerts(alerts, self.config.max_alerts)
        kept_ids = {a.id for a in kept}

        assessment = RiskAssessment(
            alerts=kept,
            risk_zones=[z for z in zones if z.alert_id in kept_ids],
            alternative_routes=dedupe_by_key([r for r in routes if r.alert_id in kept_ids]),
            suggested_actions=dedupe_by_key([a for a in actions if a.alert_id in kept_ids]),
        )

        high = sum(1 for a in kept if a.risk_level == "high")
        logger.info(
            f"Risk scan day {day}: {len(alerts)} candidate alerts, {len(kept)} kept ({high} high) "
            f"across {len(herds)} herds x {forecast_days} days"
        )
        return assessment


risk_engine = RiskDetectionEngine()


def detect_risks(herds: list, day: int, scenario: Optional[DayScenario] = None) -> RiskAssessment:
    return risk_engine.detect_risks(herds, day, scenario)
