"""Corridor-wide CSI grid for heatmaps and summaries."""

from typing import Optional

import numpy as np
import pandas as pd
from loguru import logger

from herdcast.core.csi import compute_csi, compute_factor_indices
from herdcast.data_sources.synthetic import SyntheticSignalProvider
from herdcast.geo.models import DayScenario
from herdcast.utils.config import BoundingBox, settings
from herdcast.utils.constants import CONFLICT_INCIDENTS_FULL_SCORE

GRID_COLUMNS = [
    "lat", "lng", "vegetation", "vegetation_label", "water", "dist_to_water_km",
    "rainfall", "conflict_history", "csi",
]


def vegetation_label(ndvi: float) -> str:
    if ndvi < 0.33:
        return "low"
    if ndvi < 0.66:
        return "medium"
    return "high"


def generate_environment_grid(
    scenario: Optional[DayScenario] = None,
    step: float = 0.3,
    provider=None,
    bbox: Optional[BoundingBox] = None,
) -> pd.DataFrame:
    """
    Sample the provider on a regular lat/lng lattice over the corridor.

    Columns are normalized for display (water = extent/30, rainfall = mm/20,
    conflict = incidents/8, each capped at 1); ``csi`` is the full weighted index.
    """
    if step <= 0:
        raise ValueError(f"Grid step must be positive, got {step}")

    scenario = scenario or DayScenario()
    provider = provider or SyntheticSignalProvider()
    bbox = bbox or settings.corridor.bbox

    lats = np.arange(bbox.south, bbox.north + 1e-9, step)
    lngs = np.arange(bbox.west, bbox.east + 1e-9, step)

    rows = []
    for lat in lats:
        for lng in lngs:
            m = provider.measure(float(lat), float(lng), scenario)
            rows.append({
                "lat": float(lat),
                "lng": float(lng),
                "vegetation": m.ndvi,
                "vegetation_label": vegetation_label(m.ndvi),
                "water": min(1.0, m.water_extent_pct / 30),
                "dist_to_water_km": m.dist_to_water_km,
                "rainfall": min(1.0, m.rainfall_mm_day / 20),
                "conflict_history": min(1.0, m.conflict_incidents_per_month / CONFLICT_INCIDENTS_FULL_SCORE),
                "csi": compute_csi(compute_factor_indices(m)),
            })

    df = pd.DataFrame(rows, columns=GRID_COLUMNS)
    logger.debug(f"Environment grid: {len(lats)}x{len(lngs)} cells at {step} deg, mean CSI {df['csi'].mean():.2f}")
    return df


def summarize_grid(df: pd.DataFrame) -> dict:
    """Cell counts per movement band and CSI spread."""
    if df.empty:
        return {"cells": 0, "high": 0, "moderate": 0, "low": 0, "csi_mean": None, "csi_min": None, "csi_max": None}

    csi = df["csi"]
    return {
        "cells": int(len(df)),
        "high": int((csi > 0.7).sum()),
        "moderate": int(((csi >= 0.4) & (csi <= 0.7)).sum()),
        "low": int((csi < 0.4).sum()),
        "csi_mean": round(float(csi.mean()), 3),
        "csi_min": round(float(csi.min()), 3),
        "csi_max": round(float(csi.max()), 3),
    }
