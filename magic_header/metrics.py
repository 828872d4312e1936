"""Scalar brightness metrics over an RGB triple.

Inputs may be plain numbers or numpy arrays of equal (broadcastable) shape;
channels are on the 0-255 scale and results stay on that scale.
"""

import numpy as np

LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def luma(r, g, b):
    """Perceptual brightness. Weights green highest."""
    wr, wg, wb = LUMA_WEIGHTS
    return wr * r + wg * g + wb * b


def rms_intensity(r, g, b):
    """Root-mean-square brightness.

    Unlike luma this does not push saturated single-channel colours (pure red,
    pure blue) toward zero, which keeps them from washing out in the blend.
    """
    r = np.asarray(r, dtype=np.float64)
    g = np.asarray(g, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    result = np.sqrt((r * r + g * g + b * b) / 3.0)
    if result.ndim == 0:
        return float(result)
    return result


def rgb_luma(rgb: np.ndarray) -> np.ndarray:
    """Luma of a ``(..., 3)`` array."""
    return luma(rgb[..., 0], rgb[..., 1], rgb[..., 2])


def rgb_intensity(rgb: np.ndarray) -> np.ndarray:
    """RMS intensity of a ``(..., 3)`` array."""
    return rms_intensity(rgb[..., 0], rgb[..., 1], rgb[..., 2])
