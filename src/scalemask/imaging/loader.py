"""Decode image files into RGB pixel grids.

Images are read through OpenCV. ``cv2.imread`` returns None instead of
raising and does not accept every non-ASCII path, so files are read as
bytes with numpy and decoded with ``cv2.imdecode``.
"""

import logging
from pathlib import Path

import cv2
import numpy as np

from scalemask.errors import ImageDecodeError

__all__ = ['ImageSource']

logger = logging.getLogger(__name__)


class ImageSource:
    """Path → ``(height, width, 3)`` uint8 RGB grid.

    Any alpha channel is dropped and 16-bit images are scaled to 8 bits.
    The returned array is read-only so a single decode can be shared
    between worker threads.
    """

    def load(self, path) -> np.ndarray:
        """Decode ``path``.

        Raises
        ------
        ImageDecodeError
            If the file is missing, unreadable, or not a decodable image.
        """
        path = Path(path)
        try:
            buffer = np.fromfile(str(path), dtype=np.uint8)
        except OSError as e:
            raise ImageDecodeError(path, f"cannot read file ({e})") from e

        if buffer.size == 0:
            raise ImageDecodeError(path, "file is empty")

        try:
            # pixel layout as stored; EXIF orientation is not applied
            bgr = cv2.imdecode(buffer, cv2.IMREAD_COLOR | cv2.IMREAD_IGNORE_ORIENTATION)
        except cv2.error as e:
            raise ImageDecodeError(path, f"decoder error ({e})") from e
        if bgr is None:
            raise ImageDecodeError(path, "not a decodable image")

        rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
        rgb.setflags(write=False)
        logger.debug("Decoded %s: %dx%d", path.name, rgb.shape[1], rgb.shape[0])
        return rgb
