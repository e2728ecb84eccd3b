"""Overlay stage contract.

Enforces the guarantee that the transformer produced an RGBA grid that
lines up pixel for pixel with its source image.
"""

import numpy as np

from scalemask.contracts.base import require


def assert_overlay(grid: np.ndarray, source_shape: tuple) -> None:
    """Enforce overlay stage contract.

    Called after per-row results are assembled and before the grid is
    handed to the image sink.

    Parameters
    ----------
    grid : np.ndarray
        Assembled output grid

    source_shape : tuple
        Shape of the decoded source image, ``(height, width, ...)``

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    require(
        grid.dtype == np.uint8,
        f"Overlay contract violated: grid dtype is {grid.dtype}, expected uint8"
    )
    require(
        grid.ndim == 3 and grid.shape[2] == 4,
        f"Overlay contract violated: grid shape is {grid.shape}, expected (H, W, 4)"
    )
    require(
        grid.shape[:2] == tuple(source_shape[:2]),
        f"Overlay contract violated: grid is {grid.shape[:2]}, source is {tuple(source_shape[:2])}"
    )
