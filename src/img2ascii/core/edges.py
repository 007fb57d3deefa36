"""Edge detection and smoothing helpers.

Gradient magnitudes are computed with the Sobel operator and normalized so
that an ideal black-to-white step on 0..1 input maps close to 1.0. Glyph
bitmaps and source frames go through the same function, so their gradient
maps are directly comparable.

Glyph bitmaps are also softened with a small Gaussian before intensity
comparisons, since resampled source pixels never have hard binary edges.
"""

import numpy as np
from scipy import ndimage

# Largest Sobel magnitude for input in [0, 1]: 4 per axis
_SOBEL_MAX = 4.0 * np.sqrt(2.0)


def gradient_magnitude(values: np.ndarray) -> np.ndarray:
    """Normalized Sobel gradient magnitude of a 2D array.

    Args:
        values: 2D array with values in [0, 1]

    Returns:
        Array of the same shape with values in [0, 1]
    """
    data = np.asarray(values, dtype=np.float64)
    gx = ndimage.sobel(data, axis=1, mode="nearest")
    gy = ndimage.sobel(data, axis=0, mode="nearest")
    return np.clip(np.hypot(gx, gy) / _SOBEL_MAX, 0.0, 1.0)


def soften(values: np.ndarray, sigma: float) -> np.ndarray:
    """Gaussian-blurred copy of a 2D array, edges extended by replication."""
    data = np.asarray(values, dtype=np.float64)
    return ndimage.gaussian_filter(data, sigma=sigma, mode="nearest")
