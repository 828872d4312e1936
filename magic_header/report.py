"""Fidelity report: how closely a generated image reproduces its two targets.

The image is flattened over white and compared with the light buffer, and
flattened over black and compared with the dark buffer.
"""

from typing import Any

import numpy as np

from magic_header import config
from magic_header.assets import composite_over
from magic_header.compositor import GeneratedImage


def _errors(shown: np.ndarray, target: np.ndarray) -> tuple[float, float]:
    diff = np.abs(shown - np.asarray(target, dtype=np.float64)[..., :3])
    return float(diff.mean()), float(diff.max())


def fidelity_report(result: GeneratedImage, light_buf: np.ndarray, dark_buf: np.ndarray) -> dict[str, Any]:
    """Alpha statistics plus mean/max channel error on each background."""
    alpha = result.pixels[..., 3]
    light_mean, light_max = _errors(composite_over(result.pixels, config.LIGHT_BACKGROUND), light_buf)
    dark_mean, dark_max = _errors(composite_over(result.pixels, config.DARK_BACKGROUND), dark_buf)
    return {
        "mode": result.mode.value,
        "width": result.width,
        "height": result.height,
        "alpha_min": int(alpha.min()),
        "alpha_max": int(alpha.max()),
        "alpha_mean": float(alpha.mean()),
        "light_mean_error": light_mean,
        "light_max_error": light_max,
        "dark_mean_error": dark_mean,
        "dark_max_error": dark_max,
    }


def format_report(report: dict[str, Any]) -> str:
    """Render a report as aligned ``key  value`` lines."""
    lines = []
    for key, value in report.items():
        text = f"{value:.2f}" if isinstance(value, float) else str(value)
        lines.append(f"  {key:<18s} {text:>10s}")
    return "\n".join(lines)
