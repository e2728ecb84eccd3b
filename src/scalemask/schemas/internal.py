"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and contains NO optional fields that processing code depends on.

All .get() calls, fallback defaults, and validation logic are FORBIDDEN in
runtime code - everything is explicit here.
"""

from typing import Literal, Optional

from pydantic import ConfigDict, Field, field_validator

from scalemask.schemas.base import (
    ScalemaskBaseModel,
    check_anchors,
    check_pixel_range,
    check_rgb,
)


class InternalModel(ScalemaskBaseModel):
    """Frozen base for runtime sections.

    Calibration settings are shared by every worker thread, so no section
    may be mutated after resolution.
    """

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,
    )


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalCalibrationConfig(InternalModel):
    """Runtime calibration configuration."""
    reference_image: str
    scan_rows: tuple[int, int]
    sample_columns: tuple[int, int]
    anchors: tuple[tuple[int, float], ...]

    @field_validator("anchors")
    @classmethod
    def validate_anchors(cls, v):
        return check_anchors(v)

    @field_validator("scan_rows", "sample_columns")
    @classmethod
    def validate_ranges(cls, v):
        return check_pixel_range(v)


class InternalOverlayConfig(InternalModel):
    """Runtime overlay configuration."""
    tint_color: tuple[int, int, int]
    saturation_threshold: float = Field(gt=0)

    @field_validator("tint_color")
    @classmethod
    def validate_tint(cls, v):
        return check_rgb(v)


class InternalParallelConfig(InternalModel):
    """Runtime worker pool sizes."""
    image_workers: int = Field(ge=1)
    row_workers: int = Field(ge=1)


class InternalLoggingConfig(InternalModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    log_file: Optional[str]


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(InternalModel):
    """Authoritative runtime configuration.

    Usage
    -----
    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.tint = config.overlay.tint_color  # NOT .get()
            self.scan_rows = config.calibration.scan_rows

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation

    All of that happens during config resolution, not in runtime code.
    """

    calibration: InternalCalibrationConfig
    overlay: InternalOverlayConfig
    parallel: InternalParallelConfig
    logging: InternalLoggingConfig
