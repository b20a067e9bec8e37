"""Project-wide constants."""

# Factor ranks (1-10); weight = rank / 10. Order fixes aggregation order.
FACTOR_RANKS = [
    ("ndvi", 10),
    ("geospatial", 9),
    ("rainfall", 9),
    ("water_bodies", 9),
    ("flood_extent", 8),
    ("soil_moisture", 8),
    ("evapotranspiration", 7),
    ("land_surface_temp", 6),
]

FACTOR_WEIGHTS = [(name, rank / 10) for name, rank in FACTOR_RANKS]

FACTOR_NAMES = [name for name, _ in FACTOR_RANKS]

FACTOR_LABELS = {
    "ndvi": "vegetation/forage (NDVI)",
    "geospatial": "geospatial (water/elevation/conflict)",
    "rainfall": "rainfall",
    "water_bodies": "water bodies extent",
    "flood_extent": "flood extent",
    "soil_moisture": "soil moisture",
    "evapotranspiration": "evapotranspiration",
    "land_surface_temp": "land surface temperature",
}

# Geospatial sub-index weights: water proximity, elevation, conflict
GEOSPATIAL_SUB_WEIGHTS = {"water": 0.4, "elevation": 0.3, "conflict": 0.3}

# Compass order used for candidate enumeration (ties go to the earlier entry)
DIRECTIONS = [
    ("north", 1, 0),
    ("northeast", 1, 1),
    ("east", 0, 1),
    ("southeast", -1, 1),
    ("south", -1, 0),
    ("southwest", -1, -1),
    ("west", 0, -1),
    ("northwest", 1, -1),
]

KM_PER_DEGREE = 111.0

# Path-cost penalties
CONFLICT_PENALTY_SATURATION = 5       # incidents/month
CONFLICT_PENALTY_PER_INCIDENT = 0.2
FLOOD_PENALTY_SATURATION_PCT = 10.0
FLOOD_PENALTY_DIVISOR = 50.0
SATURATED_PENALTY = 1.5
MIN_CSI_FOR_COST = 0.01

RISK_LEVELS = {
    "high": {"rank": 0, "label": "HIGH"},
    "medium": {"rank": 1, "label": "MEDIUM"},
    "low": {"rank": 2, "label": "LOW"},
}

REDIRECT_IMPACT = "Lower conflict probability by ~40%"
DELAY_IMPACT = "Lower conflict probability by ~30%"

# Conflict incidents/month that map to a full-strength event-backed score
CONFLICT_INCIDENTS_FULL_SCORE = 8.0

# Environment snapshot key snapping (1 / step in degrees)
GRID_SNAP = 10
