"""CLIConfig: Command-line operational overrides.

Minimal configuration for operational parameters that commonly change
between runs: reference image, worker counts, verbosity.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Literal, Optional

from pydantic import Field

from scalemask.schemas.base import ScalemaskBaseModel


class CLIConfig(ScalemaskBaseModel):
    """Command-line configuration overrides.

    Operational-only settings that override user and param configs.
    Highest priority in config resolution.

    Usage
    -----
        cli_cfg = CLIConfig(reference_image="legend.png", row_workers=4)

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    reference_image: Optional[str] = None
    image_workers: Optional[int] = Field(None, ge=1)
    row_workers: Optional[int] = Field(None, ge=1)
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None
    log_file: Optional[str] = None

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.reference_image is not None:
            overrides["calibration"] = {"reference_image": self.reference_image}

        parallel = {}
        if self.image_workers is not None:
            parallel["image_workers"] = self.image_workers
        if self.row_workers is not None:
            parallel["row_workers"] = self.row_workers
        if parallel:
            overrides["parallel"] = parallel

        logging_cfg = {}
        if self.log_level is not None:
            logging_cfg["level"] = self.log_level
        if self.log_file is not None:
            logging_cfg["log_file"] = self.log_file
        if logging_cfg:
            overrides["logging"] = logging_cfg

        return overrides
