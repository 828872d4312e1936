"""Fixtures for magic-header tests.

All source images are synthetic and built in memory with Pillow.
"""

import io
import pathlib

import numpy as np
import pytest
from PIL import Image

PROJECT_ROOT = pathlib.Path(__file__).resolve().parent.parent


def solid(color: tuple[int, ...], size: tuple[int, int] = (4, 4)) -> Image.Image:
    """Solid RGB or RGBA image of the given colour."""
    mode = "RGBA" if len(color) == 4 else "RGB"
    return Image.new(mode, size, color)


def noise(size: tuple[int, int], seed: int = 0) -> Image.Image:
    """Deterministic random RGB image."""
    rng = np.random.default_rng(seed)
    arr = rng.integers(0, 256, size=(size[1], size[0], 3), dtype=np.uint8)
    return Image.fromarray(arr)


def png_bytes(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def light_dark_pair() -> tuple[Image.Image, Image.Image]:
    """A light-themed and a dark-themed random source of different sizes."""
    return noise((40, 20), seed=1), noise((17, 9), seed=2)


@pytest.fixture
def source_files(tmp_path: pathlib.Path, light_dark_pair) -> tuple[pathlib.Path, pathlib.Path]:
    """The light/dark pair written to PNG files."""
    light, dark = light_dark_pair
    light_path = tmp_path / "light.png"
    dark_path = tmp_path / "dark.png"
    light.save(light_path)
    dark.save(dark_path)
    return light_path, dark_path
