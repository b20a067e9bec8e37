"""Signal provider contract and factory."""

from pathlib import Path
from typing import Optional, Protocol

from loguru import logger

from herdcast.data_sources.environment import EnvironmentLayers
from herdcast.data_sources.snapshot import EnvironmentSnapshot, SnapshotSignalProvider
from herdcast.data_sources.synthetic import SyntheticSignalProvider
from herdcast.geo.models import DayScenario, FactorMeasurement
from herdcast.utils.config import settings


class SignalProvider(Protocol):
    """Total source of raw measurements; never raises for valid coordinates."""

    def measure(self, lat: float, lng: float, scenario: DayScenario) -> FactorMeasurement:
        ...


def load_snapshot(path: Path) -> EnvironmentSnapshot:
    path = Path(path)
    if path.suffix.lower() == ".csv":
        return EnvironmentSnapshot.from_csv(path)
    return EnvironmentSnapshot.from_json(path)


def build_provider(
    snapshot_path: Optional[str] = None,
    layers: Optional[EnvironmentLayers] = None,
) -> tuple:
    """Return ``(provider, snapshot)``; snapshot is None in synthetic mode."""
    synthetic = SyntheticSignalProvider(layers=layers)
    snapshot_path = snapshot_path or settings.data.snapshot_path
    if not snapshot_path:
        return synthetic, None

    snapshot = load_snapshot(Path(snapshot_path))
    logger.info(f"Using snapshot provider ({snapshot.mode})")
    return SnapshotSignalProvider(snapshot, fallback=synthetic), snapshot
