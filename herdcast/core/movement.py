"""Greedy least-cost movement simulator.

Each simulated day a herd looks at eight compass candidates one travel
budget away, drops those outside the corridor (minus a margin) and moves to
the cheapest one by CSI path cost. The travel budget follows the CSI band at
the current position. All jitter comes from the injected random source keyed
by day, direction and coordinates, so a run is fully reproducible.
"""

from dataclasses import dataclass, replace
from typing import Optional

from loguru import logger

from herdcast.core.csi import SuitabilityAssessment, assess, dominant_factor, likelihood_message
from herdcast.data_sources.environment import EnvironmentLayers
from herdcast.data_sources.synthetic import SyntheticSignalProvider
from herdcast.geo.models import DayScenario, ForecastPoint, Herd, TrailPoint
from herdcast.geo.pois import PointsOfInterest, corridor_pois
from herdcast.utils.config import CorridorConfig, SimulationConfig, settings
from herdcast.utils.constants import DIRECTIONS, FACTOR_LABELS, KM_PER_DEGREE
from herdcast.utils.prng import RandomSource, default_random

NO_VIABLE_MOVE = "no viable move (bounds)"
JITTER_FRACTION = 0.2


@dataclass(frozen=True)
class StepResult:
    lat: float
    lng: float
    reason: str
    csi: float
    band: str
    moved: bool
    direction: Optional[str] = None
    distance_km: float = 0.0


class MovementSimulator:
    """Advance herds day by day over a signal provider."""

    def __init__(
        self,
        provider=None,
        rng: Optional[RandomSource] = None,
        pois: Optional[PointsOfInterest] = None,
        config: Optional[SimulationConfig] = None,
        corridor: Optional[CorridorConfig] = None,
    ):
        self.rng = rng or default_random
        self.pois = pois or corridor_pois
        self.provider = provider or SyntheticSignalProvider(EnvironmentLayers(pois=self.pois, rng=self.rng))
        self.config = config or settings.simulation
        self.corridor = corridor or settings.corridor

    def evaluate(self, lat: float, lng: float, scenario: DayScenario) -> SuitabilityAssessment:
        return assess(self.provider.measure(lat, lng, scenario))

    def in_bounds(self, lat: float, lng: float) -> bool:
        b = self.corridor.bbox
        m = self.corridor.margin_deg
        return b.south + m <= lat <= b.north - m and b.west + m <= lng <= b.east - m

    def travel_budget_km(self, band: str, lat: float, lng: float, speed_km_day: float, day: int) -> float:
        """high: 2-5 km; moderate: up to 15-20 km; low: up to 80 km."""
        if band == "high":
            return 2 + self.rng(lat * 100 + lng * 50 + day) * 3
        if band == "moderate":
            return min(speed_km_day, 15 + self.rng(lat * 77 + lng * 33) * 5)
        return min(speed_km_day * 1.2, 80)

    def candidates(self, lat: float, lng: float, step_deg: float, day: int) -> list:
        """Jittered compass candidates as (index, direction, lat, lng)."""
        out = []
        for i, (name, dlat, dlng) in enumerate(DIRECTIONS):
            jitter = (self.rng(day * 13 + i * 7 + lat * 100 + lng * 100) - 0.5) * step_deg * JITTER_FRACTION
            out.append((i, name, lat + dlat * step_deg + jitter, lng + dlng * step_deg + jitter))
        return out

    def step(self, lat: float, lng: float, speed_km_day: float, scenario: DayScenario) -> StepResult:
        """Move one day from (lat, lng)."""
        current = self.evaluate(lat, lng, scenario)
        band = current.likelihood.band
        km = self.travel_budget_km(band, lat, lng, speed_km_day, scenario.day)
        step_deg = km / KM_PER_DEGREE

        best = None
        best_pos = None
        best_dir = None
        for _, name, c_lat, c_lng in self.candidates(lat, lng, step_deg, scenario.day):
            if not self.in_bounds(c_lat, c_lng):
                continue
            candidate = self.evaluate(c_lat, c_lng, scenario)
            if best is None or candidate.cost < best.cost:
                best = candidate
                best_pos = (c_lat, c_lng)
                best_dir = name

        if best is None:
            logger.debug(f"No viable move from ({lat:.3f}, {lng:.3f}) on day {scenario.day}")
            return StepResult(
                lat=lat,
                lng=lng,
                reason=likelihood_message(current.csi, NO_VIABLE_MOVE, "in place", 0),
                csi=current.csi,
                band=band,
                moved=False,
            )

        dominant = FACTOR_LABELS[dominant_factor(best.indices)]
        return StepResult(
            lat=best_pos[0],
            lng=best_pos[1],
            reason=likelihood_message(best.csi, dominant, best_dir, round(km)),
            csi=best.csi,
            band=best.likelihood.band,
            moved=True,
            direction=best_dir,
            distance_km=km,
        )

    def clamp_forecast_days(self, forecast_days: int) -> int:
        lo, hi = self.config.min_forecast_days, self.config.max_forecast_days
        clamped = max(lo, min(hi, int(forecast_days)))
        if clamped != forecast_days:
            logger.debug(f"Forecast horizon {forecast_days} clamped to {clamped}")
        return clamped

    def forecast_confidence(self, confidence: float, day_offset: int) -> float:
        return max(0.0, min(1.0, confidence * (1 - day_offset * self.config.confidence_decay_per_day)))

    def simulate_herd(self, seed, day: int, forecast_days: int, scenario: DayScenario) -> Herd:
        lat, lng = seed.base_lat, seed.base_lng

        trail = []
        past_days = min(max(day, 0), self.config.history_days)
        for d in range(day - past_days, day + 1):
            result = self.step(lat, lng, seed.speed_km_day, scenario.on_day(d))
            lat, lng = result.lat, result.lng
            trail.append(TrailPoint(lat=lat, lng=lng, day=d))

        confidence = 0.7 + self.rng(seed.base_lat * 100 + seed.base_lng * 50 + day) * 0.25

        predicted = []
        f_lat, f_lng = lat, lng
        last = None
        for offset in range(1, forecast_days + 1):
            last = self.step(f_lat, f_lng, seed.speed_km_day, scenario.on_day(day + offset))
            f_lat, f_lng = last.lat, last.lng
            predicted.append(ForecastPoint(
                lat=f_lat,
                lng=f_lng,
                day=day + offset,
                csi=last.csi,
                band=last.band,
                confidence=self.forecast_confidence(confidence, offset),
                reason=last.reason,
            ))

        return Herd(
            id=seed.id,
            lat=lat,
            lng=lng,
            size=seed.size,
            speed_km_day=seed.speed_km_day,
            confidence=confidence,
            trail=trail,
            predicted=predicted,
            decision_reason=last.reason if last else "",
            csi=last.csi if last else None,
            movement_band=last.band if last else None,
        )

    def simulate(self, day: int, forecast_days: int, scenario: Optional[DayScenario] = None, seeds=None) -> list:
        """Replay history to ``day`` and forecast ``forecast_days`` ahead for every herd."""
        scenario = scenario or DayScenario()
        forecast_days = self.clamp_forecast_days(forecast_days)
        seeds = self.pois.herd_seeds if seeds is None else seeds

        herds = [self.simulate_herd(s, day, forecast_days, scenario) for s in seeds]

        bands = {"high": 0, "moderate": 0, "low": 0}
        for h in herds:
            if h.movement_band:
                bands[h.movement_band] += 1
        logger.info(
            f"Simulated {len(herds)} herds: day {day}, {forecast_days}-day forecast "
            f"(high={bands['high']}, moderate={bands['moderate']}, low={bands['low']})"
        )
        return herds

    def herds_at_day(self, base_day: int, day_offset: int, forecast_days: int, scenario: Optional[DayScenario] = None) -> list:
        """Herds moved to their predicted position ``day_offset`` days ahead."""
        herds = self.simulate(base_day, forecast_days, scenario)
        if day_offset == 0:
            return herds

        shifted = []
        for h in herds:
            if 1 <= day_offset <= len(h.predicted):
                p = h.predicted[day_offset - 1]
                shifted.append(replace(
                    h,
                    lat=p.lat,
                    lng=p.lng,
                    confidence=self.forecast_confidence(h.confidence, day_offset),
                ))
            else:
                shifted.append(h)
        return shifted


simulator = MovementSimulator()


def simulate(day: int, forecast_days: int, scenario: Optional[DayScenario] = None) -> list:
    return simulator.simulate(day, forecast_days, scenario)
