"""Boundary collaborators: decode source images, encode and flatten results."""

import base64
import io
import logging
from pathlib import Path
from typing import BinaryIO

import numpy as np
from PIL import Image, UnidentifiedImageError

from magic_header.compositor import GeneratedImage
from magic_header.errors import DecodeError

log = logging.getLogger(__name__)


def load_image(src: str | Path | bytes | BinaryIO) -> Image.Image:
    """Decode an image from a path, raw bytes or a binary file object.

    Only the first frame of animated images is kept. Any read or decode
    failure is raised as DecodeError.
    """
    if isinstance(src, bytes):
        src = io.BytesIO(src)
    try:
        img = Image.open(src)
        img.seek(0)
        img.load()
    except FileNotFoundError as exc:
        msg = f"Image not found: {src}"
        raise DecodeError(msg) from exc
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, EOFError, ValueError) as exc:
        msg = f"Could not decode image: {exc}"
        raise DecodeError(msg) from exc

    log.debug("Loaded %s image %dx%d (%s)", img.format, img.width, img.height, img.mode)
    return img


def encode_png(result: GeneratedImage) -> bytes:
    """Serialize to PNG, alpha preserved exactly."""
    buf = io.BytesIO()
    result.to_image().save(buf, format="PNG")
    return buf.getvalue()


def to_data_url(result: GeneratedImage) -> str:
    """``data:image/png;base64,...`` URL for the result."""
    return "data:image/png;base64," + base64.b64encode(encode_png(result)).decode("ascii")


def save_png(result: GeneratedImage, path: Path) -> Path:
    """Write the result as a PNG file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_png(result))
    log.info("Saved: %s (%dx%d)", path, result.width, result.height)
    return path


def composite_over(pixels: np.ndarray, background: tuple[int, int, int]) -> np.ndarray:
    """Float ``(h, w, 3)`` appearance of RGBA ``pixels`` over an opaque background."""
    rgba = np.asarray(pixels, dtype=np.float64)
    alpha = rgba[..., 3:4] / 255.0
    bg = np.asarray(background, dtype=np.float64)
    return rgba[..., :3] * alpha + bg * (1.0 - alpha)
