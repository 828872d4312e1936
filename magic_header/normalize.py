"""Image Normalizer: cover-fit a decoded image onto a fixed-size canvas.

The source is scaled uniformly until it covers the whole canvas, centre-cropped
and composited over a solid background. The result is a read-only
``(height, width, 4)`` uint8 array.
"""

import logging

import numpy as np
from PIL import Image

from magic_header import config
from magic_header.errors import ContextUnavailable, DecodeError, InvalidDimensions

log = logging.getLogger(__name__)

RESAMPLE_FILTERS = {
    "nearest": Image.Resampling.NEAREST,
    "box": Image.Resampling.BOX,
    "bilinear": Image.Resampling.BILINEAR,
    "hamming": Image.Resampling.HAMMING,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}


def resample_filter(name: str) -> Image.Resampling:
    """Look up a Pillow resampling filter by name."""
    try:
        return RESAMPLE_FILTERS[name.lower()]
    except KeyError:
        msg = f"Unknown resample filter {name!r} (choose from: {', '.join(RESAMPLE_FILTERS)})"
        raise ValueError(msg) from None


def check_dimensions(width: int, height: int) -> None:
    """Raise InvalidDimensions unless both sides are positive."""
    if width <= 0 or height <= 0:
        msg = f"Output size must be positive (got {width}x{height})"
        raise InvalidDimensions(msg)


def cover_box(src_w: int, src_h: int, width: int, height: int) -> tuple[float, float, float, float]:
    """Source-space window that a cover fit shows on the canvas.

    The window has the canvas aspect ratio, lies inside the source and is
    centred on it. Resampling only this box keeps every intermediate image at
    canvas size, whatever the source aspect ratio.
    """
    scale = max(width / src_w, height / src_h)
    box_w = min(src_w, width / scale)
    box_h = min(src_h, height / scale)
    left = (src_w - box_w) / 2
    top = (src_h - box_h) / 2
    return left, top, left + box_w, top + box_h


def cover_fit(
    source: Image.Image,
    width: int,
    height: int,
    background: tuple[int, int, int],
    resample: str = config.DEFAULT_RESAMPLE,
) -> np.ndarray:
    """Scale ``source`` to cover the canvas and composite it over ``background``.

    Transparent source pixels take the background colour. The canvas is always
    fully covered by the scaled image.
    """
    check_dimensions(width, height)
    src_w, src_h = source.size
    if src_w <= 0 or src_h <= 0:
        msg = f"Source image has zero area ({src_w}x{src_h})"
        raise InvalidDimensions(msg)

    try:
        rgba = source.convert("RGBA")
    except (OSError, EOFError, ValueError) as exc:
        msg = f"Could not rasterize source image: {exc}"
        raise DecodeError(msg) from exc

    box = cover_box(src_w, src_h, width, height)
    log.debug("Cover fit %dx%d, window %s -> %dx%d", src_w, src_h, box, width, height)

    try:
        if (src_w, src_h) == (width, height):
            cropped = rgba
        else:
            cropped = rgba.resize((width, height), resample=resample_filter(resample), box=box)

        canvas = Image.new("RGBA", (width, height), (*background, 255))
        canvas.alpha_composite(cropped)
        buf = np.array(canvas)
    except MemoryError as exc:
        msg = f"Could not allocate a {width}x{height} canvas"
        raise ContextUnavailable(msg) from exc

    buf.setflags(write=False)
    return buf


def normalize_pair(
    light: Image.Image,
    dark: Image.Image,
    width: int,
    height: int,
    resample: str = config.DEFAULT_RESAMPLE,
) -> tuple[np.ndarray, np.ndarray]:
    """Normalize the light source over white and the dark source over black."""
    light_buf = cover_fit(light, width, height, config.LIGHT_BACKGROUND, resample=resample)
    dark_buf = cover_fit(dark, width, height, config.DARK_BACKGROUND, resample=resample)
    return light_buf, dark_buf
