"""Data sources module."""

from herdcast.data_sources.environment import EnvironmentLayers, WaterReading
from herdcast.data_sources.provider import SignalProvider, build_provider, load_snapshot
from herdcast.data_sources.snapshot import EnvironmentSnapshot, SnapshotSignalProvider
from herdcast.data_sources.synthetic import SyntheticSignalProvider

__all__ = [
    "EnvironmentLayers",
    "WaterReading",
    "SignalProvider",
    "build_provider",
    "load_snapshot",
    "EnvironmentSnapshot",
    "SnapshotSignalProvider",
    "SyntheticSignalProvider",
]
