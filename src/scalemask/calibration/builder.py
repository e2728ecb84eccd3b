"""Build row→color and row→value tables from a legend image.

The legend is a vertical color bar. For each scanned row the builder
averages a short horizontal span of pixels to get that row's color, and
interpolates the row's physical value from a handful of known anchor
points along the bar.

Sampling failures are tolerated (the row is simply left out of the color
table); a row outside every anchor segment gets no value and any pixel
matched to it later becomes a classification gap.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from scalemask.calibration.sampler import sample_average
from scalemask.calibration.types import CalibrationAnchor, CalibrationTables, RowRange
from scalemask.contracts import assert_calibrated
from scalemask.errors import CalibrationSampleError

__all__ = ['CalibrationBuilder', 'build_calibration', 'interpolate', 'interpolate_row']

logger = logging.getLogger(__name__)


def interpolate(v1: float, v2: float, r1: int, r2: int, row: int) -> float:
    """Linear interpolation of the value at ``row`` between ``(r1, v1)`` and ``(r2, v2)``."""
    if r1 == r2:
        raise ValueError(f"degenerate anchor segment: both endpoints at row {r1}")
    return v1 + (v2 - v1) * (row - r1) / (r2 - r1)


def interpolate_row(row: int, anchors: Sequence[CalibrationAnchor]) -> Optional[float]:
    """Value at ``row`` from the first anchor segment that contains it.

    Segment boundaries are inclusive and segments are tested in ascending
    order, so an interior anchor row is resolved by the segment it closes.

    Returns
    -------
    float or None
        None when ``row`` lies outside every segment.
    """
    for (r1, v1), (r2, v2) in zip(anchors, anchors[1:]):
        if r1 <= row <= r2:
            return interpolate(v1, v2, r1, r2, row)
    return None


def build_calibration(
    reference_image: np.ndarray,
    scan_rows: RowRange,
    sample_columns: RowRange,
    anchors: Sequence[CalibrationAnchor],
) -> CalibrationTables:
    """Scan the legend and build its calibration tables.

    Parameters
    ----------
    reference_image : np.ndarray
        ``(height, width, 3)`` uint8 RGB grid of the legend image.
    scan_rows : RowRange
        Inclusive legend rows to scan.
    sample_columns : RowRange
        Inclusive columns averaged for every scanned row.
    anchors : sequence of CalibrationAnchor
        Ascending (row, value) points; consecutive pairs form segments.

    Returns
    -------
    CalibrationTables
        Not contract-checked; see :class:`CalibrationBuilder`.
    """
    scan_rows = RowRange(*scan_rows)
    sample_columns = RowRange(*sample_columns)
    anchors = [CalibrationAnchor(int(r), float(v)) for r, v in anchors]

    color_rows, colors = [], []
    value_rows, values = [], []
    skipped, uncovered = 0, 0

    for y in scan_rows:
        try:
            color = sample_average(reference_image, y, sample_columns.start, sample_columns.end)
        except CalibrationSampleError as e:
            logger.warning("Could not sample average color for row %d: %s", y, e)
            skipped += 1
        else:
            color_rows.append(y)
            colors.append(color)

        value = interpolate_row(y, anchors)
        if value is None:
            uncovered += 1
        else:
            value_rows.append(y)
            values.append(value)

    if uncovered:
        logger.warning(
            "%d of %d scanned rows lie outside anchors %d..%d and have no value",
            uncovered, len(scan_rows), anchors[0].row, anchors[-1].row
        )

    logger.debug(
        "Calibration scan: %d rows, %d colors, %d values, %d skipped",
        len(scan_rows), len(color_rows), len(value_rows), skipped
    )

    return CalibrationTables.from_arrays(
        color_rows,
        np.array(colors, dtype=np.uint8).reshape(-1, 3),
        value_rows,
        values,
    )


class CalibrationBuilder:
    """Config-driven calibration for the overlay pipeline."""

    def __init__(self, config):
        """Store calibration settings.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration; reads ``config.calibration``.
        """
        self.config = config
        self.scan_rows = RowRange(*config.calibration.scan_rows)
        self.sample_columns = RowRange(*config.calibration.sample_columns)
        self.anchors = [CalibrationAnchor(*a) for a in config.calibration.anchors]

        logger.info(
            "CalibrationBuilder initialized: rows=%d..%d, columns=%d..%d, anchors=%d",
            self.scan_rows.start, self.scan_rows.end,
            self.sample_columns.start, self.sample_columns.end,
            len(self.anchors)
        )

    def build(self, reference_image: np.ndarray) -> CalibrationTables:
        """Build and contract-check calibration tables from a decoded legend."""
        tables = build_calibration(
            reference_image, self.scan_rows, self.sample_columns, self.anchors
        )
        assert_calibrated(tables)

        gaps = tables.gap_rows()
        if gaps.size:
            logger.warning(
                "%d calibration rows have a color but no value; matching pixels will stay transparent",
                gaps.size
            )

        value_data = tables.values.values
        if value_data.size:
            logger.info(
                "Calibrated: %d color rows, values %.2f..%.2f",
                len(tables), value_data.min(), value_data.max()
            )
        else:
            logger.warning("Calibrated: %d color rows but no values", len(tables))
        return tables
