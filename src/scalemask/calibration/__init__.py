"""Legend calibration and classification.

- types: RGBColor, anchors, CalibrationTables
- sampler: Average color of a legend row span
- builder: Row→color and row→value tables
- classifier: Nearest-color lookup
- alpha: Value→opacity ramp
"""

from scalemask.calibration.types import (
    CalibrationAnchor,
    CalibrationTables,
    PixelCoordinate,
    RGBColor,
    RowRange,
)
from scalemask.calibration.sampler import sample_average
from scalemask.calibration.builder import CalibrationBuilder, build_calibration
from scalemask.calibration.classifier import classify, classify_pixels
from scalemask.calibration.alpha import alpha, alpha_array

__all__ = [
    "CalibrationAnchor",
    "CalibrationTables",
    "PixelCoordinate",
    "RGBColor",
    "RowRange",
    "sample_average",
    "CalibrationBuilder",
    "build_calibration",
    "classify",
    "classify_pixels",
    "alpha",
    "alpha_array",
]
