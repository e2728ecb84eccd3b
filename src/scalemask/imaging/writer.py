"""Encode RGBA grids as PNG files."""

import logging
from pathlib import Path

import cv2
import numpy as np

from scalemask.errors import ImageEncodeError

__all__ = ['ImageSink']

logger = logging.getLogger(__name__)


class ImageSink:
    """``(height, width, 4)`` uint8 RGBA grid → PNG file."""

    def save(self, grid: np.ndarray, path) -> Path:
        """Write ``grid`` to ``path`` and return the path.

        Raises
        ------
        ImageEncodeError
            If encoding fails or the file cannot be written.
        """
        path = Path(path)
        try:
            bgra = cv2.cvtColor(grid, cv2.COLOR_RGBA2BGRA)
            ok, encoded = cv2.imencode(".png", bgra)
        except cv2.error as e:
            raise ImageEncodeError(path, f"PNG encoding failed ({e})") from e
        if not ok:
            raise ImageEncodeError(path, "PNG encoding failed")

        try:
            encoded.tofile(str(path))
        except OSError as e:
            raise ImageEncodeError(path, f"cannot write file ({e})") from e

        logger.debug("Wrote %s (%d bytes)", path.name, encoded.size)
        return path
