"""Calibration stage contract.

Enforces the guarantee that after calibration the tables can drive
nearest-color classification for every pixel of every image.
"""

import numpy as np

from scalemask.contracts.base import require


def assert_calibrated(tables) -> None:
    """Enforce calibration stage contract.

    Called immediately after the calibration builder.

    Parameters
    ----------
    tables : CalibrationTables
        Output of ``build_calibration()``

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    require(
        len(tables) > 0,
        "Calibration contract violated: color table is empty "
        "(no legend row could be sampled)"
    )

    colors = tables.color_array
    require(
        colors.dtype == np.uint8,
        f"Calibration contract violated: colors dtype is {colors.dtype}, expected uint8"
    )
    require(
        colors.ndim == 2 and colors.shape[1] == 3,
        f"Calibration contract violated: colors shape is {colors.shape}, expected (N, 3)"
    )

    rows = tables.rows
    require(
        bool(np.all(np.diff(rows) > 0)),
        "Calibration contract violated: color rows must be strictly ascending"
    )

    value_rows = tables.values["row"].values
    require(
        bool(np.all(np.diff(value_rows) > 0)),
        "Calibration contract violated: value rows must be strictly ascending"
    )
    require(
        bool(np.all(np.isfinite(tables.values.values))),
        "Calibration contract violated: value table contains non-finite values"
    )
