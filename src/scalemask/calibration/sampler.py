"""Average color of a horizontal span of legend pixels."""

import numpy as np

from scalemask.calibration.types import RGBColor
from scalemask.errors import EmptySpan, OutOfBounds

__all__ = ['sample_average']


def sample_average(image: np.ndarray, row: int, x_start: int, x_end: int) -> RGBColor:
    """Mean RGB color over columns ``x_start..x_end`` (inclusive) of ``row``.

    Each channel is averaged with integer division, so fractional means
    are truncated rather than rounded.

    Parameters
    ----------
    image : np.ndarray
        ``(height, width, channels)`` uint8 grid, channels >= 3 in RGB order.
    row : int
        Pixel row to sample.
    x_start, x_end : int
        Inclusive column span.

    Returns
    -------
    RGBColor

    Raises
    ------
    EmptySpan
        If ``x_end < x_start``.
    OutOfBounds
        If the row or any column lies outside the image.
    """
    if x_end < x_start:
        raise EmptySpan(f"empty span: x_end={x_end} < x_start={x_start}")

    height, width = image.shape[:2]
    if not 0 <= row < height:
        raise OutOfBounds(f"row {row} outside image height {height}")
    if x_start < 0 or x_end >= width:
        raise OutOfBounds(f"columns {x_start}..{x_end} outside image width {width}")

    span = image[row, x_start:x_end + 1, :3].astype(np.uint32)
    count = x_end - x_start + 1
    r, g, b = span.sum(axis=0) // count
    return RGBColor(int(r), int(g), int(b))
