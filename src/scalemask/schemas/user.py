"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with aliases
for common naming patterns (e.g., REFERENCE_IMAGE → reference_image).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults.
"""

from typing import Optional

from pydantic import Field, field_validator

from scalemask.schemas.base import ScalemaskBaseModel, normalize_anchors


class UserCalibrationConfig(ScalemaskBaseModel):
    """User-facing calibration config."""
    reference_image: Optional[str] = None
    scan_rows: Optional[tuple[int, int]] = None
    sample_columns: Optional[tuple[int, int]] = None
    anchors: Optional[tuple[tuple[int, float], ...]] = None

    @field_validator("anchors", mode="before")
    @classmethod
    def normalize_anchor_input(cls, v):
        return normalize_anchors(v)


class UserOverlayConfig(ScalemaskBaseModel):
    """User-facing overlay config."""
    tint_color: Optional[tuple[int, int, int]] = None
    saturation_threshold: Optional[float] = None

    @field_validator("saturation_threshold", mode="before")
    @classmethod
    def coerce_threshold(cls, v):
        """Accept int or float for threshold."""
        if v is not None:
            return float(v)
        return v


class UserParallelConfig(ScalemaskBaseModel):
    """User-facing worker pool config."""
    image_workers: Optional[int] = None
    row_workers: Optional[int] = None


class UserConfig(ScalemaskBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify
    what they want to override from ParamConfig defaults.

    Usage
    -----
        user_cfg = UserConfig(
            reference_image="legend.png",
            scan_rows=(10, 400),
            anchors={"rows": [10, 400], "values": [40.0, 0.0]},
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    # Calibration settings (flat aliases)
    reference_image: Optional[str] = Field(None, alias="REFERENCE_IMAGE")
    scan_rows: Optional[tuple[int, int]] = Field(None, alias="SCAN_ROWS")
    sample_columns: Optional[tuple[int, int]] = Field(None, alias="SAMPLE_COLUMNS")
    anchors: Optional[tuple[tuple[int, float], ...]] = Field(None, alias="ANCHORS")

    # Overlay settings (flat aliases)
    tint_color: Optional[tuple[int, int, int]] = Field(None, alias="TINT_COLOR")
    saturation_threshold: Optional[float] = Field(None, alias="SATURATION_THRESHOLD")

    # Worker pools (flat aliases)
    image_workers: Optional[int] = Field(None, alias="IMAGE_WORKERS")
    row_workers: Optional[int] = Field(None, alias="ROW_WORKERS")

    # Logging (flat aliases)
    log_level: Optional[str] = Field(None, alias="LOG_LEVEL")
    log_file: Optional[str] = Field(None, alias="LOG_FILE")

    # Nested overrides (advanced users)
    calibration: Optional[UserCalibrationConfig] = None
    overlay: Optional[UserOverlayConfig] = None
    parallel: Optional[UserParallelConfig] = None

    model_config = ScalemaskBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("anchors", mode="before")
    @classmethod
    def normalize_anchor_input(cls, v):
        return normalize_anchors(v)

    @field_validator("saturation_threshold", mode="before")
    @classmethod
    def coerce_numeric_fields(cls, v):
        """Accept int or float for numeric fields."""
        if v is not None:
            return float(v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper().strip()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        # Calibration section
        calibration = {}
        if self.reference_image is not None:
            calibration["reference_image"] = self.reference_image
        if self.scan_rows is not None:
            calibration["scan_rows"] = self.scan_rows
        if self.sample_columns is not None:
            calibration["sample_columns"] = self.sample_columns
        if self.anchors is not None:
            calibration["anchors"] = self.anchors

        if self.calibration is not None:
            calibration.update(self.calibration.model_dump(exclude_none=True))

        if calibration:
            overrides["calibration"] = calibration

        # Overlay section
        overlay = {}
        if self.tint_color is not None:
            overlay["tint_color"] = self.tint_color
        if self.saturation_threshold is not None:
            overlay["saturation_threshold"] = self.saturation_threshold

        if self.overlay is not None:
            overlay.update(self.overlay.model_dump(exclude_none=True))

        if overlay:
            overrides["overlay"] = overlay

        # Parallel section
        parallel = {}
        if self.image_workers is not None:
            parallel["image_workers"] = self.image_workers
        if self.row_workers is not None:
            parallel["row_workers"] = self.row_workers

        if self.parallel is not None:
            parallel.update(self.parallel.model_dump(exclude_none=True))

        if parallel:
            overrides["parallel"] = parallel

        # Logging section
        logging_cfg = {}
        if self.log_level is not None:
            logging_cfg["level"] = self.log_level
        if self.log_file is not None:
            logging_cfg["log_file"] = self.log_file

        if logging_cfg:
            overrides["logging"] = logging_cfg

        return overrides
