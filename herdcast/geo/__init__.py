"""Geo module."""
from herdcast.geo.models import (
    Alert, AlertTriggers, AlternativeRoute, DayScenario, FactorIndexSet,
    FactorMeasurement, ForecastPoint, Herd, MovementLikelihood, RiskAssessment,
    RiskThresholdProfile, RiskZone, ScanResult, SuggestedAction, TrailPoint,
)
from herdcast.geo.pois import PointsOfInterest, corridor_pois, load_points_of_interest
from herdcast.geo.spatial import distance_km
