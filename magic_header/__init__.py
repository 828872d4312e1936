"""magic-header: one transparent PNG that reads as two images.

Shown on a light page the result looks like the light source; on a dark page
it looks like the dark source. Alpha never reaches 0 or 255, so upload
pipelines that flatten opaque images to JPEG keep it as a PNG.
"""

import importlib.metadata

from magic_header.blend import AlphaBounds, BlendMode, ProcessOptions, blend_pixel, get_strategy
from magic_header.compositor import GeneratedImage, generate
from magic_header.errors import ContextUnavailable, DecodeError, InvalidDimensions, MagicHeaderError
from magic_header.metrics import luma, rms_intensity
from magic_header.normalize import cover_fit

__version__ = importlib.metadata.version("magic-header")

__all__ = [
    "AlphaBounds",
    "BlendMode",
    "ContextUnavailable",
    "DecodeError",
    "GeneratedImage",
    "InvalidDimensions",
    "MagicHeaderError",
    "ProcessOptions",
    "blend_pixel",
    "cover_fit",
    "generate",
    "get_strategy",
    "luma",
    "rms_intensity",
]
