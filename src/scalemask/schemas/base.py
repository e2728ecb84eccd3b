"""Base Pydantic model with strict defaults for scalemask configs.

All config schemas inherit from this base to ensure consistent
validation behavior across parameter, user, CLI, and internal configs.
The shared validators for pixel ranges and calibration anchors also
live here so every layer rejects the same inputs.
"""

import math

from pydantic import BaseModel, ConfigDict


class ScalemaskBaseModel(BaseModel):
    """Base model for all scalemask configuration schemas.

    Enforces strict validation:
    - No extra fields allowed
    - Validates assignments after initialization
    - Uses Python mode (not JSON mode)
    """

    model_config = ConfigDict(
        extra='forbid',           # Reject unknown fields
        validate_assignment=True, # Validate on field mutation
        use_enum_values=True,     # Convert enums to values
        str_strip_whitespace=True,# Strip whitespace from strings
    )


def normalize_anchors(v):
    """Accept anchors as ``[(row, value), ...]`` or ``{"rows": [...], "values": [...]}``.

    The second form matches how legend calibrations are usually written
    down: one list of pixel rows and one list of physical values.
    """
    if isinstance(v, dict):
        rows = v.get("rows")
        values = v.get("values")
        if rows is None or values is None:
            raise ValueError("anchors dict needs both 'rows' and 'values'")
        if len(rows) != len(values):
            raise ValueError(
                f"anchors: {len(rows)} rows but {len(values)} values"
            )
        return tuple(zip(rows, values))
    return v


def check_anchors(anchors):
    """Require at least two finite anchors with strictly ascending rows."""
    if len(anchors) < 2:
        raise ValueError(f"at least 2 anchors required, got {len(anchors)}")
    for row, value in anchors:
        if row < 0:
            raise ValueError(f"anchor row must be >= 0, got {row}")
        if not math.isfinite(value):
            raise ValueError(f"anchor value must be finite, got {value}")
    rows = [row for row, _ in anchors]
    for prev, cur in zip(rows, rows[1:]):
        if cur <= prev:
            raise ValueError(
                f"anchor rows must be strictly ascending, got {prev} then {cur}"
            )
    return anchors


def check_pixel_range(v):
    """Inclusive (start, end) pixel range with 0 <= start <= end."""
    start, end = v
    if start < 0:
        raise ValueError(f"range start must be >= 0, got {start}")
    if end < start:
        raise ValueError(f"range end {end} is before start {start}")
    return v


def check_rgb(v):
    """Three 8-bit channels."""
    for channel in v:
        if not 0 <= channel <= 255:
            raise ValueError(f"color channel out of 0..255: {channel}")
    return v
