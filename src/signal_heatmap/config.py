"""
Signal Heatmap Configuration
============================

This module handles configuration loading for the heatmap engine.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    HEATMAP_CELL_SIZE             -> heatmap.cell_size
    HEATMAP_SMOOTHING_FACTOR      -> heatmap.smoothing_factor
    HEATMAP_INTERPOLATION_ENABLED -> heatmap.interpolation_enabled
    HEATMAP_INTERPOLATION_RADIUS  -> heatmap.interpolation_radius
    HEATMAP_DEAD_ZONE_THRESHOLD   -> heatmap.dead_zone_threshold
    HEATMAP_CLUSTER_DISTANCE      -> heatmap.cluster_distance
    HEATMAP_MIN_CLUSTER_SIZE      -> heatmap.min_cluster_size
    HEATMAP_SAMPLING_INTERVAL     -> heatmap.sampling_interval
    HEATMAP_PORT                  -> server.port
    HEATMAP_LOG_LEVEL             -> logging.level
    PORT                          -> server.port (container platforms)

Range Policy:
    HeatmapConfiguration never rejects a value. Anything outside the
    documented range is clamped to the nearest bound, both when the model
    is built and when an attribute is assigned later.

Example:
    from signal_heatmap.config import settings

    print(settings.heatmap.cell_size)
    settings.heatmap.smoothing_factor = 4.0   # clamped to 1.0
"""

import os
import logging
from pathlib import Path
from typing import Callable, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


logger = logging.getLogger(__name__)


def _clamp(name: str, value, low, high):
    """Clamp value into [low, high], logging when it had to move."""
    clamped = max(low, min(high, value))
    if clamped != value:
        logger.debug(f"Config {name}={value} out of range [{low}, {high}], clamped to {clamped}")
    return clamped


# =============================================================================
# Configuration Models
# =============================================================================

class HeatmapConfiguration(BaseModel):
    """
    Process-wide heatmap parameters.

    Setters clamp instead of failing, so a configuration object is always
    usable by the pipeline.
    """

    cell_size: float = Field(
        default=0.3,
        description="Grid cell edge length in meters, clamped to [0.01, 10]",
    )
    smoothing_factor: float = Field(
        default=0.5,
        description="Neighborhood blend weight in [0, 1] (0 = no smoothing)",
    )
    interpolation_enabled: bool = Field(
        default=True,
        description="Fill empty cells near sampled ones after recording",
    )
    interpolation_radius: int = Field(
        default=2,
        description="Interpolation search cube half-width in cells, clamped to [0, 10]",
    )
    dead_zone_threshold: int = Field(
        default=-75,
        description="Cells averaging below this strength are weak, clamped to [-100, 0]",
    )
    cluster_distance: float = Field(
        default=0.6,
        description="Maximum seed-to-member distance (m) when clustering weak cells",
    )
    min_cluster_size: int = Field(
        default=3,
        description="Minimum weak cells for a cluster to become a dead zone",
    )
    sampling_interval: float = Field(
        default=1.0,
        description="Seconds between samples requested from the capture feed",
    )

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True

    @field_validator("cell_size")
    @classmethod
    def clamp_cell_size(cls, v: float) -> float:
        return _clamp("cell_size", v, 0.01, 10.0)

    @field_validator("smoothing_factor")
    @classmethod
    def clamp_smoothing_factor(cls, v: float) -> float:
        return _clamp("smoothing_factor", v, 0.0, 1.0)

    @field_validator("interpolation_radius")
    @classmethod
    def clamp_interpolation_radius(cls, v: int) -> int:
        return _clamp("interpolation_radius", v, 0, 10)

    @field_validator("dead_zone_threshold")
    @classmethod
    def clamp_dead_zone_threshold(cls, v: int) -> int:
        return _clamp("dead_zone_threshold", v, -100, 0)

    @field_validator("cluster_distance")
    @classmethod
    def clamp_cluster_distance(cls, v: float) -> float:
        return _clamp("cluster_distance", v, 0.0, 100.0)

    @field_validator("min_cluster_size")
    @classmethod
    def clamp_min_cluster_size(cls, v: int) -> int:
        return _clamp("min_cluster_size", v, 1, 10000)

    @field_validator("sampling_interval")
    @classmethod
    def clamp_sampling_interval(cls, v: float) -> float:
        return _clamp("sampling_interval", v, 0.05, 60.0)


class ServiceConfig(BaseModel):
    """Service identification configuration."""

    name: str = Field(default="signal-heatmap", description="Service name")
    version: str = Field(default="v0.1.0", description="API version")


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8002, ge=1, le=65535, description="Bind port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the heatmap service.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    heatmap: HeatmapConfiguration = Field(default_factory=HeatmapConfiguration)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _env_value(name: str, cast: Callable):
    """Read and convert an env var; malformed values are skipped with a warning."""
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return None
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Ignoring malformed environment value {name}={raw!r}")
        return None


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    heatmap_overrides = [
        ("HEATMAP_CELL_SIZE", "cell_size", float),
        ("HEATMAP_SMOOTHING_FACTOR", "smoothing_factor", float),
        ("HEATMAP_INTERPOLATION_ENABLED", "interpolation_enabled", _parse_bool),
        ("HEATMAP_INTERPOLATION_RADIUS", "interpolation_radius", int),
        ("HEATMAP_DEAD_ZONE_THRESHOLD", "dead_zone_threshold", int),
        ("HEATMAP_CLUSTER_DISTANCE", "cluster_distance", float),
        ("HEATMAP_MIN_CLUSTER_SIZE", "min_cluster_size", int),
        ("HEATMAP_SAMPLING_INTERVAL", "sampling_interval", float),
    ]
    for env_name, key, cast in heatmap_overrides:
        value = _env_value(env_name, cast)
        if value is not None:
            config_data.setdefault("heatmap", {})[key] = value

    # PORT wins over HEATMAP_PORT
    if (env_port := _env_value("PORT", int)) is not None:
        config_data.setdefault("server", {})["port"] = env_port
    elif (env_port := _env_value("HEATMAP_PORT", int)) is not None:
        config_data.setdefault("server", {})["port"] = env_port

    if env_log := os.environ.get("HEATMAP_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
