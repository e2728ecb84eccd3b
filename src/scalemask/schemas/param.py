"""ParamConfig: Expert defaults for the overlay pipeline.

This module defines the complete default configuration. ALL pipeline
parameters must have defaults here. No runtime code should define
fallback values - this is the single source of truth for defaults.

The calibration defaults describe the standard legend layout: a vertical
color bar whose rows 7..472 are sampled over columns 650..658, with the
physical scale running from 50.0 at the top to 0.0 at the bottom.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

import os
from typing import Literal, Optional

from pydantic import Field, field_validator

from scalemask.schemas.base import (
    ScalemaskBaseModel,
    check_anchors,
    check_pixel_range,
    check_rgb,
    normalize_anchors,
)


ANCHOR_ROWS = (7, 41, 79, 120, 161, 200, 240, 280, 322, 361, 401, 440, 472)
ANCHOR_VALUES = (50.0, 43.4, 36.7, 30.9, 25.4, 20.8, 16.6, 12.9, 10.0, 6.8, 4.3, 2.2, 0.0)


def default_workers() -> int:
    """Worker pool size: one thread per CPU."""
    return os.cpu_count() or 1


# =============================================================================
# Nested Configuration Models
# =============================================================================

class CalibrationConfig(ScalemaskBaseModel):
    """Legend (reference image) calibration."""
    reference_image: str = "image.png"
    scan_rows: tuple[int, int] = (7, 472)
    sample_columns: tuple[int, int] = (650, 658)
    anchors: tuple[tuple[int, float], ...] = tuple(zip(ANCHOR_ROWS, ANCHOR_VALUES))

    @field_validator("anchors", mode="before")
    @classmethod
    def normalize_anchor_input(cls, v):
        return normalize_anchors(v)

    @field_validator("anchors")
    @classmethod
    def validate_anchors(cls, v):
        return check_anchors(v)

    @field_validator("scan_rows", "sample_columns")
    @classmethod
    def validate_ranges(cls, v):
        return check_pixel_range(v)


class OverlayConfig(ScalemaskBaseModel):
    """Overlay rendering."""
    tint_color: tuple[int, int, int] = (0, 0, 255)
    saturation_threshold: float = Field(50.0, gt=0, description="Value at which alpha saturates to 255")

    @field_validator("tint_color")
    @classmethod
    def validate_tint(cls, v):
        return check_rgb(v)

    @field_validator("saturation_threshold", mode="before")
    @classmethod
    def coerce_threshold_to_float(cls, v):
        """Allow int or float for threshold."""
        return float(v)


class ParallelConfig(ScalemaskBaseModel):
    """Worker pool sizes for the two fan-out levels."""
    image_workers: int = Field(default_factory=default_workers, ge=1, description="Images processed concurrently")
    row_workers: int = Field(default_factory=default_workers, ge=1, description="Rows classified concurrently per image")


class LoggingConfig(ScalemaskBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: Optional[str] = None

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        if isinstance(v, str):
            return v.upper().strip()
        return v


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(ScalemaskBaseModel):
    """Complete expert configuration with all defaults.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)

    Runtime code only sees InternalConfig.
    """

    calibration: CalibrationConfig = Field(default_factory=CalibrationConfig)
    overlay: OverlayConfig = Field(default_factory=OverlayConfig)
    parallel: ParallelConfig = Field(default_factory=ParallelConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
