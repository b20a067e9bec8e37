"""Two-stage corridor scan: simulate herd movement, then detect conflict risk."""

from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from herdcast.core.movement import MovementSimulator
from herdcast.core.risk import RiskDetectionEngine
from herdcast.core.thresholds import ThresholdProfileResolver
from herdcast.data_sources.environment import EnvironmentLayers
from herdcast.data_sources.provider import build_provider
from herdcast.geo.models import DayScenario, RiskAssessment, ScanResult
from herdcast.geo.pois import corridor_pois, load_points_of_interest
from herdcast.utils.config import Settings, settings as default_settings
from herdcast.utils.prng import RandomSource, default_random


class CorridorScanner:
    """Wire provider, simulator and risk engine from settings."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        rng: Optional[RandomSource] = None,
        snapshot_path: Optional[str] = None,
    ):
        self.settings = settings or default_settings
        self.rng = rng or default_random

        pois_path = self.settings.data.pois_path
        self.pois = load_points_of_interest(pois_path) if pois_path else corridor_pois
        self.layers = EnvironmentLayers(pois=self.pois, rng=self.rng)
        self.provider, self.snapshot = build_provider(
            snapshot_path or self.settings.data.snapshot_path, layers=self.layers
        )

        self.simulator = MovementSimulator(
            provider=self.provider,
            rng=self.rng,
            pois=self.pois,
            config=self.settings.simulation,
            corridor=self.settings.corridor,
        )
        self.engine = RiskDetectionEngine(
            layers=self.layers,
            resolver=ThresholdProfileResolver(self.settings.risk.base),
            snapshot=self.snapshot,
            config=self.settings.risk,
        )

    @property
    def mode(self) -> str:
        return self.snapshot.mode if self.snapshot is not None else "mock"

    def execute_scan(
        self,
        day: int = 0,
        forecast_days: Optional[int] = None,
        scenario: Optional[DayScenario] = None,
    ) -> ScanResult:
        """Simulate every herd from ``day`` and scan the forecast for conflict risk."""
        start = datetime.now(timezone.utc)
        run_id = f"HC-d{day}-{start.strftime('%Y%m%d-%H%M%S')}"
        scenario = (scenario or DayScenario()).on_day(day)
        if forecast_days is None:
            forecast_days = self.settings.simulation.default_forecast_days

        logger.info(f"Scan {run_id}: day {day}, {forecast_days}-day horizon, {self.mode} data")

        logger.info("Stage 1: simulating herd movement...")
        herds = self.simulator.simulate(day, forecast_days, scenario)

        logger.info("Stage 2: detecting conflict risk...")
        assessment = self.engine.detect_risks(herds, day, scenario)

        duration = (datetime.now(timezone.utc) - start).total_seconds()
        summary = self._summary(herds, assessment)

        logger.info(f"Scan done: {len(assessment.alerts)} alerts, {duration:.2f}s")

        return ScanResult(
            run_id=run_id,
            timestamp=start,
            day=day,
            forecast_days=len(herds[0].predicted) if herds else forecast_days,
            scenario=scenario,
            herds=herds,
            assessment=assessment,
            summary=summary,
            duration_seconds=duration,
            metadata={"data_mode": self.mode, "herd_count": len(herds)},
        )

    def _summary(self, herds: list, assessment: RiskAssessment) -> str:
        alerts = assessment.alerts
        if not alerts:
            return f"No convergence risks across {len(herds)} herds."

        high = sum(1 for a in alerts if a.risk_level == "high")
        medium = sum(1 for a in alerts if a.risk_level == "medium")
        parts = []
        if high:
            parts.append(f"{high} HIGH")
        if medium:
            parts.append(f"{medium} MEDIUM")
        detail = f" ({', '.join(parts)})" if parts else ""
        return f"{len(alerts)} convergence risks{detail}. Review suggested actions."
