"""Core module."""
from herdcast.core.csi import assess, compute_csi, compute_factor_indices, get_movement_likelihood, get_path_cost
from herdcast.core.thresholds import ThresholdProfileResolver, threshold_resolver
from herdcast.core.movement import MovementSimulator, simulate, simulator
from herdcast.core.risk import RiskDetectionEngine, detect_risks, risk_engine
from herdcast.core.grid import generate_environment_grid
from herdcast.core.scanner import CorridorScanner
from herdcast.core.formatter import format_output
