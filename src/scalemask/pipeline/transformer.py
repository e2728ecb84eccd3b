"""Per-image overlay rendering.

Decodes one target image, classifies every pixel against the shared
calibration tables and writes a tinted RGBA overlay whose alpha follows
the calibrated value.

Rows are classified in parallel on a single row pool owned by the
transformer and shared by every image it renders. Each row task reads the
shared, read-only source grid and returns its own result; only the owning
call writes the output grid, after all rows are back.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path
from typing import List, NamedTuple, Tuple

import numpy as np

from scalemask.calibration.alpha import alpha_array
from scalemask.calibration.classifier import classify_pixels
from scalemask.calibration.types import CalibrationTables, PixelCoordinate
from scalemask.contracts import assert_overlay
from scalemask.imaging import ImageSink, ImageSource

__all__ = ['ImageTransformer', 'TransformResult', 'RowResult', 'output_path_for']

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = "_alfa"
OUTPUT_EXTENSION = ".png"


class RowResult(NamedTuple):
    """Classification of one source row."""
    y: int
    alpha: np.ndarray
    valid: np.ndarray

    def gap_points(self) -> List[PixelCoordinate]:
        return [PixelCoordinate(int(x), self.y) for x in np.flatnonzero(~self.valid)]


class TransformResult(NamedTuple):
    """Outcome of one successful transform."""
    input_path: Path
    output_path: Path
    elapsed_ms: float
    gap_count: int


def output_path_for(path) -> Path:
    """``dir/name.ext`` → ``dir/name_alfa.png``."""
    path = Path(path)
    return path.with_name(f"{path.stem}{OUTPUT_SUFFIX}{OUTPUT_EXTENSION}")


class ImageTransformer:
    """Render calibrated alpha overlays for target images.

    One transformer is shared by every image of a batch. It holds no
    per-image state, so ``transform()`` may run concurrently from several
    threads. All of them feed the same row pool of
    ``config.parallel.row_workers`` threads, so the number of row threads
    does not grow with the number of images in flight.

    The row pool is started on first use and released by :meth:`close`
    (or by leaving a ``with`` block); a closed transformer starts a fresh
    pool if it is used again.

    Example usage::

        tables = CalibrationBuilder(config).build(legend_rgb)
        with ImageTransformer(config, tables) as transformer:
            result = transformer.transform("maps/frame_001.png")
        result.output_path   # maps/frame_001_alfa.png
    """

    def __init__(self, config, tables: CalibrationTables,
                 source: ImageSource = None, sink: ImageSink = None):
        """Initialize transformer.

        Parameters
        ----------
        config : InternalConfig
            Reads ``overlay.tint_color``, ``overlay.saturation_threshold``
            and ``parallel.row_workers``.
        tables : CalibrationTables
            Contract-checked calibration, shared read-only.
        source : ImageSource, optional
            Image decoder (default: OpenCV-backed ImageSource).
        sink : ImageSink, optional
            Image encoder (default: OpenCV-backed ImageSink).
        """
        self.config = config
        self.tables = tables
        self.tint = np.array(config.overlay.tint_color, dtype=np.uint8)
        self.saturation_threshold = config.overlay.saturation_threshold
        self.row_workers = config.parallel.row_workers
        self.source = source if source is not None else ImageSource()
        self.sink = sink if sink is not None else ImageSink()

        self._row_executor = None
        self._executor_lock = threading.Lock()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        """Shut down the row pool, waiting for queued rows."""
        with self._executor_lock:
            executor, self._row_executor = self._row_executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def _rows_pool(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._row_executor is None:
                self._row_executor = ThreadPoolExecutor(
                    max_workers=self.row_workers, thread_name_prefix="row"
                )
            return self._row_executor

    def transform(self, path) -> TransformResult:
        """Decode ``path``, render its overlay and write ``<stem>_alfa.png``.

        Raises
        ------
        ImageDecodeError
            If the source image cannot be decoded.
        ImageEncodeError
            If the overlay cannot be written.
        """
        start = time.perf_counter()
        path = Path(path)

        rgb = self.source.load(path)
        grid, gap_count = self.render(rgb)
        output_path = self.sink.save(grid, output_path_for(path))

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        return TransformResult(path, output_path, elapsed_ms, gap_count)

    def render(self, rgb: np.ndarray) -> Tuple[np.ndarray, int]:
        """Overlay grid for a decoded ``(H, W, 3)`` image.

        Returns
        -------
        grid : np.ndarray
            ``(H, W, 4)`` uint8 RGBA. Classified pixels are
            ``(*tint, alpha)``; gaps stay ``(0, 0, 0, 0)``.
        gap_count : int
            Pixels whose nearest legend row had no value.
        """
        height, width = rgb.shape[:2]

        rows = list(self._rows_pool().map(partial(self._classify_row, rgb), range(height)))

        grid = np.zeros((height, width, 4), dtype=np.uint8)
        gap_count = 0
        for row in rows:
            grid[row.y, row.valid, :3] = self.tint
            grid[row.y, row.valid, 3] = row.alpha[row.valid]

            for point in row.gap_points():
                logger.warning("No interpolated value found for point (%d, %d)", point.x, point.y)
                gap_count += 1

        assert_overlay(grid, rgb.shape)
        return grid, gap_count

    def _classify_row(self, rgb: np.ndarray, y: int) -> RowResult:
        values = classify_pixels(rgb[y], self.tables)
        valid = ~np.isnan(values)
        return RowResult(y, alpha_array(values, self.saturation_threshold), valid)
