"""
Configuration management for the heatmap engine

Settings come from three layers, later ones winning:
1. Defaults declared on the models below
2. YAML file (configs/heatmap_config.yaml, or $HEATMAP_CONFIG)
3. Environment variables (LOG_LEVEL)
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from loguru import logger
from pydantic import BaseModel, Field, model_validator

DEFAULT_CONFIG_PATH = "configs/heatmap_config.yaml"

RGB = Tuple[int, int, int]


class TintConfig(BaseModel):
    """Ambient tint composited over the rendered grid."""
    low_color: RGB = (180, 200, 220)     # dim / cool, sparse canopy
    high_color: RGB = (255, 240, 200)    # bright / warm, dense canopy
    opacity: float = Field(default=0.25, ge=0.0, le=1.0)
    mean_floor: float = 0.2
    mean_span: float = Field(default=0.6, gt=0.0)


class HeatmapConfig(BaseModel):
    """Engine-wide settings."""
    canvas_width: int = Field(default=800, gt=0)
    canvas_height: int = Field(default=800, gt=0)
    min_scale: float = Field(default=1.0, ge=1.0)
    max_scale: float = 8.0
    zoom_intensity: float = Field(default=0.001, gt=0.0)
    cell_overlap: float = Field(default=0.4, ge=0.0)
    background_color: str = "#1c1917"
    tint: TintConfig = Field(default_factory=TintConfig)
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _check_scale_bounds(self) -> "HeatmapConfig":
        if self.max_scale < self.min_scale:
            raise ValueError(
                f"max_scale ({self.max_scale}) must be >= min_scale ({self.min_scale})"
            )
        return self


def _resolve_config_path(config_path: Optional[str]) -> Optional[Path]:
    if config_path is None:
        config_path = os.getenv("HEATMAP_CONFIG", DEFAULT_CONFIG_PATH)

    path = Path(config_path)
    if path.exists():
        return path

    # Try relative to the project root
    candidate = Path(__file__).resolve().parent.parent / config_path
    if candidate.exists():
        return candidate

    return None


def load_config(config_path: Optional[str] = None) -> HeatmapConfig:
    """
    Load configuration from YAML file

    Args:
        config_path: Path to config file. Falls back to $HEATMAP_CONFIG and
            then to configs/heatmap_config.yaml; defaults are used when no
            file is found.

    Returns:
        Validated HeatmapConfig
    """
    path = _resolve_config_path(config_path)

    raw: Dict[str, Any] = {}
    if path is not None:
        with open(path, 'r') as f:
            raw = yaml.safe_load(f) or {}
        logger.info(f"Loaded configuration from {path}")
    else:
        logger.debug("No heatmap config file found, using defaults")

    # The YAML file nests engine settings under `heatmap`
    raw = raw.get("heatmap", raw)

    log_level = os.getenv("LOG_LEVEL")
    if log_level:
        raw = {**raw, "log_level": log_level}

    return HeatmapConfig.model_validate(raw)
