"""Image decode and encode.

- loader: ImageSource (file → RGB grid)
- writer: ImageSink (RGBA grid → PNG file)
"""

from scalemask.imaging.loader import ImageSource
from scalemask.imaging.writer import ImageSink

__all__ = ["ImageSource", "ImageSink"]
