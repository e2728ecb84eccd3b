"""Nearest-color classification against a calibration table.

A pixel is assigned the value of the legend row whose average color is
closest in squared RGB distance. ``numpy.argmin`` returns the first
minimum and the color table is sorted by row, so ties resolve to the
lowest legend row.
"""

from typing import Optional

import numpy as np

from scalemask.calibration.types import CalibrationTables, RGBColor
from scalemask.contracts import require

__all__ = ['nearest_rows', 'classify_pixels', 'classify']


def nearest_rows(pixels: np.ndarray, tables: CalibrationTables, chunk_size: int = 1024) -> np.ndarray:
    """Index into the color table of the nearest color for each pixel.

    Parameters
    ----------
    pixels : np.ndarray
        ``(N, 3)`` or ``(N, C>=3)`` array of RGB samples.
    tables : CalibrationTables
    chunk_size : int
        Pixels compared per block; bounds the (chunk, table, 3) distance buffer.

    Returns
    -------
    np.ndarray
        ``(N,)`` int indices into ``tables.rows``.

    Raises
    ------
    ContractViolation
        If the color table is empty.
    """
    require(len(tables) > 0, "Classification requires a non-empty color table")

    # int32 holds 3 * 255**2 without overflow
    samples = np.asarray(pixels)[:, :3].astype(np.int32)
    palette = tables.color_array.astype(np.int32)
    nearest = np.empty(samples.shape[0], dtype=np.intp)

    for start in range(0, samples.shape[0], chunk_size):
        block = samples[start:start + chunk_size]
        diff = block[:, None, :] - palette[None, :, :]
        distances = (diff * diff).sum(axis=2)
        nearest[start:start + chunk_size] = np.argmin(distances, axis=1)

    return nearest


def classify_pixels(pixels: np.ndarray, tables: CalibrationTables) -> np.ndarray:
    """Calibrated value for each pixel; NaN where the nearest row has no value."""
    return tables.value_lookup[nearest_rows(pixels, tables)]


def classify(pixel_color: RGBColor, tables: CalibrationTables) -> Optional[float]:
    """Calibrated value for a single color.

    Scalar form of :func:`classify_pixels`: rows are compared in ascending
    order and only a strictly closer color replaces the current match, so
    ties also resolve to the lowest row.

    Returns
    -------
    float or None
        None when the nearest legend row has no value (classification gap).
    """
    require(len(tables) > 0, "Classification requires a non-empty color table")

    pixel_color = RGBColor(*pixel_color)
    colors = tables.color_table()
    nearest = min(colors, key=lambda row: pixel_color.distance(colors[row]))
    return tables.value_at(nearest)
