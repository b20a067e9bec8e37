import json

import pandas as pd
import pytest

from herdcast.core.csi import PRESETS
from herdcast.data_sources.provider import build_provider, load_snapshot
from herdcast.data_sources.snapshot import EnvironmentSnapshot, SnapshotSignalProvider, grid_key
from herdcast.data_sources.synthetic import SyntheticSignalProvider
from herdcast.geo.models import DayScenario

BASE = PRESETS["balanced"].to_dict()


def cell(lat, lng, **overrides):
    return {"lat": lat, "lng": lng, "values": {**BASE, **overrides}}


@pytest.fixture
def snapshot():
    return EnvironmentSnapshot.from_records(
        [cell(6.2, 31.5), cell(7.0, 31.3, ndvi=0.6)],
        conflict_cells=[{"lat": 6.2, "lng": 31.5, "incidents_per_month": 4}],
    )


def test_grid_key_snaps_to_tenth_degree():
    assert grid_key(6.24, 31.56) == (62, 316)
    assert grid_key(6.26, 31.54) == (63, 315)


def test_exact_and_neighbour_lookup(snapshot):
    assert snapshot.base_values_at(6.2, 31.5).ndvi == pytest.approx(0.35)
    # (6.31, 31.5) snaps to (63, 315); the populated neighbour is (62, 315)
    assert snapshot.base_values_at(6.31, 31.5) is not None
    assert snapshot.base_values_at(6.9, 31.3).ndvi == pytest.approx(0.6)
    assert snapshot.base_values_at(5.6, 30.1) is None


def test_conflict_lookup(snapshot):
    assert snapshot.conflict_incidents_at(6.2, 31.5) == 4
    assert snapshot.conflict_incidents_at(7.9, 33.2) == 0
    assert snapshot.conflict_risk_score(6.2, 31.5) == pytest.approx(0.5)


def test_no_conflict_data_means_unknown():
    snap = EnvironmentSnapshot.from_records([cell(6.2, 31.5)])
    assert snap.conflict_incidents_at(6.2, 31.5) is None
    assert snap.conflict_risk_score(6.2, 31.5) is None


def test_modes(snapshot):
    assert snapshot.mode == "real"
    assert EnvironmentSnapshot.from_records([cell(6.2, 31.5)]).mode == "mixed"
    assert EnvironmentSnapshot.from_records([], conflict_cells=[]).mode == "mixed"
    assert EnvironmentSnapshot().mode == "mock"


def test_snapshot_is_read_only(snapshot):
    with pytest.raises(TypeError):
        snapshot.cells[(0, 0)] = None


def test_provider_applies_seasonal_factor(snapshot):
    # Day 0 sits in the dry season: seasonal factor 0.7
    m = SnapshotSignalProvider(snapshot).measure(6.2, 31.5, DayScenario(day=0))
    assert m.rainfall_mm_day == pytest.approx(12 * 0.7)
    assert m.ndvi == pytest.approx(0.35 * 0.7)
    assert m.water_extent_pct == pytest.approx(20 * 0.7)
    assert m.evapotranspiration_mm_day == pytest.approx(3.5)
    assert m.conflict_incidents_per_month == 4
    assert m.dist_to_water_km == 10


def test_provider_scenario_modifiers(snapshot):
    provider = SnapshotSignalProvider(snapshot)
    calm = provider.measure(6.2, 31.5, DayScenario(day=0))
    stressed = provider.measure(6.2, 31.5, DayScenario(day=0, drought_severity=1.0, flood_extent=0.5))
    assert stressed.rainfall_mm_day < calm.rainfall_mm_day
    assert stressed.land_surface_temp_c == pytest.approx(calm.land_surface_temp_c + 2.5)
    assert stressed.flood_extent_pct == pytest.approx(calm.flood_extent_pct + 14)


def test_provider_falls_back_to_synthetic(snapshot, scenario):
    fallback = SyntheticSignalProvider()
    provider = SnapshotSignalProvider(snapshot, fallback=fallback)
    assert provider.measure(5.6, 30.1, scenario) == fallback.measure(5.6, 30.1, scenario)


def test_load_json(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({
        "metadata": {"fetched_at": "2025-01-01"},
        "cells": [cell(6.2, 31.5)],
        "conflicts": {"cell_aggregates": [{"lat": 6.2, "lng": 31.5, "incidents_per_month": 10}]},
    }))
    snap = load_snapshot(path)
    assert snap.mode == "real"
    assert snap.metadata["fetched_at"] == "2025-01-01"
    assert snap.conflict_risk_score(6.2, 31.5) == 1.0


def test_load_csv(tmp_path):
    path = tmp_path / "snapshot.csv"
    pd.DataFrame([{"lat": 6.2, "lng": 31.5, **BASE}, {"lat": 6.5, "lng": 31.8, **BASE}]).to_csv(path, index=False)
    snap = load_snapshot(path)
    assert len(snap.cells) == 2
    assert snap.mode == "mixed"
    assert snap.base_values_at(6.5, 31.8).soil_moisture_pct == pytest.approx(30)


def test_csv_missing_columns(tmp_path):
    path = tmp_path / "broken.csv"
    pd.DataFrame([{"lat": 6.2, "lng": 31.5, "ndvi": 0.4}]).to_csv(path, index=False)
    with pytest.raises(ValueError, match="missing columns"):
        EnvironmentSnapshot.from_csv(path)


def test_missing_snapshot_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_snapshot(tmp_path / "nope.json")


def test_build_provider(tmp_path, monkeypatch):
    from herdcast.utils.config import settings
    monkeypatch.setattr(settings.data, "snapshot_path", None)

    provider, snap = build_provider(None)
    assert isinstance(provider, SyntheticSignalProvider)
    assert snap is None

    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"cells": [cell(6.2, 31.5)]}))
    provider, snap = build_provider(str(path))
    assert isinstance(provider, SnapshotSignalProvider)
    assert snap.mode == "mixed"
