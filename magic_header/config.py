"""Configuration for magic-header.

Built-in defaults live here as module constants. A JSON config file and a few
environment variables can override them; CLI flags override both.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

# ── Output canvas ─────────────────────────────────────────────────

# Social banner size
BANNER_WIDTH = 1500
BANNER_HEIGHT = 500

DEFAULT_WIDTH = int(os.environ.get("MAGIC_HEADER_WIDTH", BANNER_WIDTH))
DEFAULT_HEIGHT = int(os.environ.get("MAGIC_HEADER_HEIGHT", BANNER_HEIGHT))

DEFAULT_OUTPUT_NAME = "x-ray-header.png"

# ── Alpha clamp ───────────────────────────────────────────────────

# Alpha 0 or 255 anywhere lets the upload pipeline flatten the asset to JPEG.
ALPHA_MIN = 0.005
ALPHA_MAX = 0.995
ALPHA_BYTE_MIN = 1
ALPHA_BYTE_MAX = 254

# ── Normalizer ────────────────────────────────────────────────────

LIGHT_BACKGROUND = (255, 255, 255)
DARK_BACKGROUND = (0, 0, 0)

# Pillow resampling filter name used for the cover-fit resize
DEFAULT_RESAMPLE = "lanczos"

# ── Compositor ────────────────────────────────────────────────────

# Rows blended per band
DEFAULT_BAND_ROWS = 64

# ── Config file ───────────────────────────────────────────────────

DEFAULT_CONFIG_FILE = Path(os.environ.get("MAGIC_HEADER_CONFIG", "magic_header.json"))

CONFIG_KEYS = frozenset(
    {
        "width",
        "height",
        "mode",
        "normalize",
        "preserve_color",
        "brightness",
        "alpha_min",
        "alpha_max",
        "alpha_byte_min",
        "alpha_byte_max",
        "resample",
        "band_rows",
    }
)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load JSON config, falling back to defaults if not found.

    An explicitly given path must exist. Unknown keys are dropped with a warning.
    """
    path = config_path or DEFAULT_CONFIG_FILE
    if not path.exists():
        if config_path is not None:
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        log.debug("No config file at %s, using built-in defaults", path)
        return {}

    cfg = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(cfg, dict):
        msg = f"Config file must contain a JSON object: {path}"
        raise ValueError(msg)

    unknown = sorted(set(cfg) - CONFIG_KEYS)
    for key in unknown:
        log.warning("Ignoring unknown config key %r in %s", key, path)
        del cfg[key]

    log.info("Loaded config from %s", path)
    return cfg
