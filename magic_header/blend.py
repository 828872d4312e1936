"""Blend Strategy Engine: derive one RGBA pixel from a light and a dark pixel.

Three interchangeable strategies, selected once per job by ``BlendMode``:

    BLENDED     : inverse alpha compositing; colour capable
    SCANLINES   : alternate rows carry the light / dark image
    INTERLACED  : checkerboard of light / dark pixels

Strategies work on whole ``(h, w, 3)`` blocks at once. ``origin`` is the
absolute canvas coordinate of the block's top-left pixel, so pattern slots
stay correct when the compositor blends the canvas band by band.

The "over" operator used throughout: shown = C·α + bg·(1 - α).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

import numpy as np

from magic_header import config
from magic_header.errors import InvalidDimensions
from magic_header.metrics import rgb_intensity, rgb_luma


class BlendMode(str, Enum):
    BLENDED = "BLENDED"
    SCANLINES = "SCANLINES"
    INTERLACED = "INTERLACED"

    @classmethod
    def parse(cls, value: "str | BlendMode") -> "BlendMode":
        """Accept an enum member or a case-insensitive mode name."""
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).upper()]
        except KeyError:
            choices = ", ".join(m.value.lower() for m in cls)
            msg = f"Unknown blend mode {value!r} (choose from: {choices})"
            raise ValueError(msg) from None


@dataclass(frozen=True)
class AlphaBounds:
    """Alpha clamp limits, as a fraction and as a byte."""

    alpha_min: float = config.ALPHA_MIN
    alpha_max: float = config.ALPHA_MAX
    byte_min: int = config.ALPHA_BYTE_MIN
    byte_max: int = config.ALPHA_BYTE_MAX

    def __post_init__(self) -> None:
        if not 0.0 < self.alpha_min < self.alpha_max < 1.0:
            msg = f"Alpha bounds must satisfy 0 < min < max < 1 (got {self.alpha_min}, {self.alpha_max})"
            raise ValueError(msg)
        if not 1 <= self.byte_min <= self.byte_max <= 254:
            msg = f"Alpha byte bounds must satisfy 1 <= min <= max <= 254 (got {self.byte_min}, {self.byte_max})"
            raise ValueError(msg)


_TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
_FALSE_WORDS = frozenset({"false", "no", "off", "0"})


def parse_flag(name: str, value: Any) -> bool:
    """Read a boolean option from config. Strings such as "false" are not truthy."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    msg = f"{name} must be a boolean (got {value!r})"
    raise ValueError(msg)


@dataclass(frozen=True)
class ProcessOptions:
    """Configuration for one generation job."""

    width: int = config.DEFAULT_WIDTH
    height: int = config.DEFAULT_HEIGHT
    mode: BlendMode = BlendMode.BLENDED
    # BLENDED only: floor every light channel at the dark channel
    normalize: bool = True
    # SCANLINES / INTERLACED only: keep hue, at the cost of a faint ghost pattern
    preserve_color: bool = False
    # Carried through for callers; the blend does not read it
    brightness: int = 0
    bounds: AlphaBounds = field(default_factory=AlphaBounds)
    resample: str = config.DEFAULT_RESAMPLE
    band_rows: int = config.DEFAULT_BAND_ROWS

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", BlendMode.parse(self.mode))
        if self.band_rows <= 0:
            msg = f"band_rows must be positive (got {self.band_rows})"
            raise ValueError(msg)

    @classmethod
    def from_config(cls, cfg: dict[str, Any], **overrides: Any) -> "ProcessOptions":
        """Build options from a config mapping; non-None ``overrides`` win."""
        merged = {**cfg, **{k: v for k, v in overrides.items() if v is not None}}
        bounds = AlphaBounds(
            alpha_min=float(merged.pop("alpha_min", config.ALPHA_MIN)),
            alpha_max=float(merged.pop("alpha_max", config.ALPHA_MAX)),
            byte_min=int(merged.pop("alpha_byte_min", config.ALPHA_BYTE_MIN)),
            byte_max=int(merged.pop("alpha_byte_max", config.ALPHA_BYTE_MAX)),
        )
        known = {f.name for f in fields(cls)} - {"bounds"}
        kwargs = {k: v for k, v in merged.items() if k in known}
        for flag in ("normalize", "preserve_color"):
            if flag in kwargs:
                kwargs[flag] = parse_flag(flag, kwargs[flag])
        return cls(bounds=bounds, **kwargs)


# ── Strategies ────────────────────────────────────────────────────


class BlendStrategy(ABC):
    """Base class for the per-pixel colour/alpha synthesis strategies."""

    @property
    @abstractmethod
    def mode(self) -> BlendMode:
        """The BlendMode this strategy implements."""

    @property
    @abstractmethod
    def label(self) -> str:
        """Human-readable description."""

    @abstractmethod
    def solve(
        self,
        light: np.ndarray,
        dark: np.ndarray,
        options: ProcessOptions,
        origin: tuple[int, int] = (0, 0),
    ) -> tuple[np.ndarray, np.ndarray]:
        """Compute unquantized output for a block.

        ``light`` and ``dark`` are float ``(h, w, 3)`` arrays on 0-255.
        Returns ``(rgb, alpha)``: rgb ``(h, w, 3)`` on 0-255 and alpha ``(h, w)``
        already on the byte scale.
        """

    def blend(
        self,
        light: np.ndarray,
        dark: np.ndarray,
        options: ProcessOptions,
        origin: tuple[int, int] = (0, 0),
    ) -> np.ndarray:
        """Blend two equal-sized RGB(A) blocks into a uint8 ``(h, w, 4)`` block.

        RGB is rounded half-to-even; alpha is always clamped to the byte bounds.
        """
        light = np.asarray(light, dtype=np.float64)[..., :3]
        dark = np.asarray(dark, dtype=np.float64)[..., :3]
        if light.shape != dark.shape:
            msg = f"Light and dark blocks differ in size: {light.shape[:2]} vs {dark.shape[:2]}"
            raise InvalidDimensions(msg)

        rgb, alpha = self.solve(light, dark, options, origin)

        bounds = options.bounds
        out = np.empty(light.shape[:-1] + (4,), dtype=np.uint8)
        out[..., :3] = np.clip(np.rint(rgb), 0, 255)
        out[..., 3] = np.clip(np.rint(alpha), bounds.byte_min, bounds.byte_max)
        return out


class AlphaBlendStrategy(BlendStrategy):
    """Inverse alpha compositing from the RMS intensity difference.

    Exact over black; over white the result only approximates the light image,
    since one alpha cannot satisfy two independent targets.
    """

    @property
    def mode(self) -> BlendMode:
        return BlendMode.BLENDED

    @property
    def label(self) -> str:
        return "Blended: alpha composite, colour"

    def solve(self, light, dark, options, origin=(0, 0)):
        bounds = options.bounds
        if options.normalize:
            light = np.maximum(light, dark)

        alpha = 1.0 - (rgb_intensity(light) - rgb_intensity(dark)) / 255.0
        alpha = np.clip(alpha, bounds.alpha_min, bounds.alpha_max)

        # Invert "over black": C_D = C_out * alpha
        rgb = np.minimum(255.0, dark / alpha[..., np.newaxis])
        return rgb, np.floor(alpha * 255.0)


class PatternStrategy(BlendStrategy):
    """Masking strategies: each pixel shows either the light or the dark image.

    Light slots are tuned to vanish over black and dark slots to vanish over
    white, so each page background reveals only its own image.
    """

    @abstractmethod
    def light_slots(self, height: int, width: int, origin: tuple[int, int] = (0, 0)) -> np.ndarray:
        """Boolean ``(height, width)`` mask, True where the pixel carries the light image."""

    def solve(self, light, dark, options, origin=(0, 0)):
        h, w = light.shape[:2]
        slots = self.light_slots(h, w, origin)

        if options.preserve_color:
            light_rgb, light_alpha = _color_over_white(light, options.bounds)
            dark_rgb, dark_alpha = _color_over_black(dark, options.bounds)
        else:
            light_rgb, light_alpha = _gray_over_white(light, options.bounds)
            dark_rgb, dark_alpha = _gray_over_black(dark, options.bounds)

        rgb = np.where(slots[..., np.newaxis], light_rgb, dark_rgb)
        alpha = np.where(slots, light_alpha, dark_alpha)
        return rgb, alpha


class ScanlineStrategy(PatternStrategy):
    """Even rows carry the light image.

    Survives width-only rescaling, the usual distortion in mobile feeds.
    """

    @property
    def mode(self) -> BlendMode:
        return BlendMode.SCANLINES

    @property
    def label(self) -> str:
        return "Scanlines: alternating rows"

    def light_slots(self, height, width, origin=(0, 0)):
        _, y0 = origin
        rows = (np.arange(height) + y0) % 2 == 0
        return np.broadcast_to(rows[:, np.newaxis], (height, width))


class InterlaceStrategy(PatternStrategy):
    """Checkerboard: pixels with even x + y carry the light image.

    Breaks down under non-integer resampling.
    """

    @property
    def mode(self) -> BlendMode:
        return BlendMode.INTERLACED

    @property
    def label(self) -> str:
        return "Interlaced: checkerboard"

    def light_slots(self, height, width, origin=(0, 0)):
        x0, y0 = origin
        ys = np.arange(height) + y0
        xs = np.arange(width) + x0
        return (ys[:, np.newaxis] + xs[np.newaxis, :]) % 2 == 0


# ── Pattern sub-strategies ────────────────────────────────────────


def _gray_over_white(light: np.ndarray, bounds: AlphaBounds) -> tuple[np.ndarray, np.ndarray]:
    """Black ink covering the light image's darkness.

    Over white this shows luma(light); over black it stays black.
    """
    alpha = np.clip(255.0 - rgb_luma(light), bounds.byte_min, bounds.byte_max)
    return np.zeros_like(light), alpha


def _gray_over_black(dark: np.ndarray, bounds: AlphaBounds) -> tuple[np.ndarray, np.ndarray]:
    alpha = np.clip(rgb_luma(dark), bounds.byte_min, bounds.byte_max)
    return np.full_like(dark, 255.0), alpha


def _color_over_white(light: np.ndarray, bounds: AlphaBounds) -> tuple[np.ndarray, np.ndarray]:
    """Smallest alpha that reproduces the light colour over white without clipping."""
    alpha = np.maximum(bounds.alpha_min, 1.0 - light.min(axis=-1) / 255.0)
    a = alpha[..., np.newaxis]
    rgb = np.clip((light - 255.0 * (1.0 - a)) / a, 0.0, 255.0)
    return rgb, np.clip(np.floor(alpha * 255.0), bounds.byte_min, bounds.byte_max)


def _color_over_black(dark: np.ndarray, bounds: AlphaBounds) -> tuple[np.ndarray, np.ndarray]:
    """Smallest alpha that reproduces the dark colour over black without clipping."""
    alpha = np.maximum(bounds.alpha_min, dark.max(axis=-1) / 255.0)
    rgb = np.clip(dark / alpha[..., np.newaxis], 0.0, 255.0)
    return rgb, np.clip(np.floor(alpha * 255.0), bounds.byte_min, bounds.byte_max)


# ── Registry ──────────────────────────────────────────────────────

STRATEGIES: dict[BlendMode, BlendStrategy] = {
    s.mode: s for s in (AlphaBlendStrategy(), ScanlineStrategy(), InterlaceStrategy())
}


def get_strategy(mode: "BlendMode | str") -> BlendStrategy:
    """Return the registered strategy for ``mode``."""
    return STRATEGIES[BlendMode.parse(mode)]


def blend_pixel(
    light_rgb: tuple[int, int, int],
    dark_rgb: tuple[int, int, int],
    options: ProcessOptions | None = None,
    x: int = 0,
    y: int = 0,
) -> tuple[int, int, int, int]:
    """Blend a single pixel at canvas position (x, y). Same code path as a full job."""
    options = options or ProcessOptions()
    light = np.asarray(light_rgb, dtype=np.float64).reshape(1, 1, -1)
    dark = np.asarray(dark_rgb, dtype=np.float64).reshape(1, 1, -1)
    out = get_strategy(options.mode).blend(light, dark, options, origin=(x, y))
    r, g, b, a = (int(v) for v in out[0, 0])
    return r, g, b, a
