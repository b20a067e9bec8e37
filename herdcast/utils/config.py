"""Configuration loader for herdcast."""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class BoundingBox(BaseModel):
    north: float = 8.2
    south: float = 5.5
    east: float = 33.5
    west: float = 30.0


class CorridorConfig(BaseModel):
    name: str = "Jonglei-Bor-Sudd corridor"
    bbox: BoundingBox = BoundingBox()
    center: dict = {"lat": 6.85, "lng": 31.75}
    # Inward margin (degrees) a candidate move must keep from the bbox edge
    margin_deg: float = 0.2


class SimulationConfig(BaseModel):
    history_days: int = 7
    min_forecast_days: int = 2
    max_forecast_days: int = 7
    default_forecast_days: int = 4
    confidence_decay_per_day: float = 0.08


class RiskThresholdConfig(BaseModel):
    convergence_km: float = 35.0
    village_proximity_km: float = 30.0
    farm_proximity_km: float = 20.0
    resource_scarcity: float = 0.35
    history: float = 0.3
    max_resource_scarcity: float = 0.7
    max_history: float = 0.8


class RiskConfig(BaseModel):
    base: RiskThresholdConfig = RiskThresholdConfig()
    min_triggers: int = 2
    max_alerts: int = 6
    risk_zone_radius_km: float = 15.0
    redirect_step_deg: float = 0.3


class DataConfig(BaseModel):
    snapshot_path: Optional[str] = None
    pois_path: Optional[str] = None


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
    rotation: str = "10 MB"
    retention: str = "7 days"


class AppConfig(BaseModel):
    name: str = "herdcast"
    version: str = "0.1.0"
    environment: str = "development"
    debug: bool = False


class Settings(BaseModel):
    app: AppConfig = AppConfig()
    logging: LoggingConfig = LoggingConfig()
    corridor: CorridorConfig = CorridorConfig()
    simulation: SimulationConfig = SimulationConfig()
    risk: RiskConfig = RiskConfig()
    data: DataConfig = DataConfig()


def get_project_root() -> Path:
    return Path(__file__).parent.parent.parent


def load_yaml_config(env: str = "development") -> dict[str, Any]:
    config_path = get_project_root() / "config" / "environments" / f"{env}.yaml"
    if not config_path.exists():
        return {}
    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def get_settings(env: Optional[str] = None) -> Settings:
    env = env or os.getenv("APP_ENV", "development")
    yaml_config = load_yaml_config(env)

    # Override with env vars
    if os.getenv("HERDCAST_SNAPSHOT_PATH"):
        yaml_config.setdefault("data", {})["snapshot_path"] = os.getenv("HERDCAST_SNAPSHOT_PATH")
    if os.getenv("HERDCAST_POIS_PATH"):
        yaml_config.setdefault("data", {})["pois_path"] = os.getenv("HERDCAST_POIS_PATH")
    if os.getenv("HERDCAST_LOG_LEVEL"):
        yaml_config.setdefault("logging", {})["level"] = os.getenv("HERDCAST_LOG_LEVEL")
    if os.getenv("HERDCAST_MIN_TRIGGERS"):
        yaml_config.setdefault("risk", {})["min_triggers"] = int(os.getenv("HERDCAST_MIN_TRIGGERS"))

    return Settings(**yaml_config) if yaml_config else Settings()


settings = get_settings()
