"""Map calibrated values to 8-bit opacity.

Linear ramp from 0 at value 0 up to full opacity at the saturation
threshold. Negative values clamp to 0 and fractional alphas are
truncated, so with the default threshold of 50 a value of 25 maps to 127.
"""

import math

import numpy as np

__all__ = ['alpha', 'alpha_array']

MAX_ALPHA = 255


def alpha(value: float, saturation_threshold: float = 50.0) -> int:
    """Opacity in ``[0, 255]`` for a single value."""
    value = max(value, 0.0)
    if value < saturation_threshold:
        return int(math.floor(MAX_ALPHA * value / saturation_threshold))
    return MAX_ALPHA


def alpha_array(values: np.ndarray, saturation_threshold: float = 50.0) -> np.ndarray:
    """Vectorised :func:`alpha`. NaN values map to 0; mask gaps separately."""
    values = np.nan_to_num(np.asarray(values, dtype=np.float64), nan=0.0)
    values = np.maximum(values, 0.0)
    ramp = np.floor(MAX_ALPHA * values / saturation_threshold)
    return np.where(values < saturation_threshold, ramp, MAX_ALPHA).astype(np.uint8)
