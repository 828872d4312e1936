"""Compositor: drive the blend over the whole canvas.

generate() is the public entry point. It is a pure function of its inputs:
every call allocates its own buffers and keeps no state, so overlapping calls
never interfere and identical inputs give byte-identical output.
"""

import logging
import time
from dataclasses import dataclass

import numpy as np
from PIL import Image

from magic_header.blend import BlendMode, ProcessOptions, get_strategy
from magic_header.errors import ContextUnavailable, InvalidDimensions
from magic_header.normalize import check_dimensions, normalize_pair

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedImage:
    """Finished RGBA pixels plus their size. ``pixels`` is read-only."""

    pixels: np.ndarray
    width: int
    height: int
    mode: BlendMode

    def to_image(self) -> Image.Image:
        """Return the pixels as a Pillow RGBA image."""
        return Image.fromarray(self.pixels.copy())


def allocate_output(width: int, height: int) -> np.ndarray:
    """Allocate the uint8 ``(height, width, 4)`` output buffer."""
    try:
        return np.empty((height, width, 4), dtype=np.uint8)
    except (MemoryError, ValueError) as exc:
        msg = f"Could not allocate a {width}x{height} output buffer"
        raise ContextUnavailable(msg) from exc


def composite(light_buf: np.ndarray, dark_buf: np.ndarray, options: ProcessOptions) -> np.ndarray:
    """Blend two normalized buffers into a new read-only RGBA buffer.

    Walks the canvas in bands of ``options.band_rows`` rows; each band is
    blended with its absolute origin so pattern slots line up across bands.
    """
    expected = (options.height, options.width)
    if light_buf.shape[:2] != expected or dark_buf.shape[:2] != expected:
        msg = (
            f"Buffers must be {options.width}x{options.height} "
            f"(got light {light_buf.shape[1]}x{light_buf.shape[0]}, dark {dark_buf.shape[1]}x{dark_buf.shape[0]})"
        )
        raise InvalidDimensions(msg)

    strategy = get_strategy(options.mode)
    out = allocate_output(options.width, options.height)

    for top in range(0, options.height, options.band_rows):
        bottom = min(top + options.band_rows, options.height)
        out[top:bottom] = strategy.blend(light_buf[top:bottom], dark_buf[top:bottom], options, origin=(0, top))
        log.debug("  rows %d-%d/%d blended", top, bottom, options.height)

    out.setflags(write=False)
    return out


def generate(
    light: Image.Image,
    dark: Image.Image,
    options: ProcessOptions | None = None,
) -> GeneratedImage:
    """Turn a light and a dark source image into one RGBA image.

    Raises:
        InvalidDimensions: output size not positive, or a source has zero area.
        DecodeError: a source could not be rasterized.
        ContextUnavailable: the output buffer could not be allocated.
    """
    options = options or ProcessOptions()
    check_dimensions(options.width, options.height)

    strategy = get_strategy(options.mode)
    log.info("Generating %dx%d image: %s", options.width, options.height, strategy.label)
    t0 = time.monotonic()

    light_buf, dark_buf = normalize_pair(light, dark, options.width, options.height, resample=options.resample)
    pixels = composite(light_buf, dark_buf, options)

    log.info("Generated in %.2fs", time.monotonic() - t0)
    return GeneratedImage(pixels=pixels, width=options.width, height=options.height, mode=options.mode)
