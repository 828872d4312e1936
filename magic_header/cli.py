"""CLI entry point: `python -m magic_header` / `magic-header`

Two subcommands:
    generate    : build the RGBA header from a light and a dark image
    report      : score an existing header against its two source images
"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from magic_header import config
from magic_header.assets import load_image, save_png, to_data_url
from magic_header.blend import BlendMode, ProcessOptions
from magic_header.compositor import GeneratedImage, generate
from magic_header.errors import InvalidDimensions, MagicHeaderError
from magic_header.normalize import normalize_pair
from magic_header.report import fidelity_report, format_report

log = logging.getLogger(__name__)


def _build_options(args: argparse.Namespace) -> ProcessOptions:
    """Config file first, then CLI flags on top."""
    cfg = config.load_config(args.config)
    return ProcessOptions.from_config(
        cfg,
        width=args.width,
        height=args.height,
        mode=args.mode,
        normalize=args.normalize,
        preserve_color=args.preserve_color,
        brightness=args.brightness,
    )


def _cmd_generate(args: argparse.Namespace) -> None:
    """Handle the 'generate' subcommand."""
    options = _build_options(args)
    light = load_image(args.light)
    dark = load_image(args.dark)

    result = generate(light, dark, options)
    save_png(result, args.output)

    if args.data_url:
        print(to_data_url(result))

    if args.report:
        light_buf, dark_buf = normalize_pair(light, dark, options.width, options.height, resample=options.resample)
        print(format_report(fidelity_report(result, light_buf, dark_buf)))


def _cmd_report(args: argparse.Namespace) -> None:
    """Handle the 'report' subcommand."""
    options = _build_options(args)
    generated = load_image(args.generated).convert("RGBA")
    if generated.size != (options.width, options.height):
        msg = (
            f"{args.generated} is {generated.width}x{generated.height}, "
            f"expected {options.width}x{options.height} (pass --width/--height)"
        )
        raise InvalidDimensions(msg)

    result = GeneratedImage(
        pixels=np.array(generated),
        width=generated.width,
        height=generated.height,
        mode=options.mode,
    )
    light_buf, dark_buf = normalize_pair(
        load_image(args.light), load_image(args.dark), options.width, options.height, resample=options.resample
    )
    print(format_report(fidelity_report(result, light_buf, dark_buf)))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="magic-header",
        description="Combine a light and a dark image into one theme-aware transparent PNG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
The result looks like LIGHT on a white page and like DARK on a black page.
Every alpha value stays within 1-254 so upload pipelines keep it as PNG.

Defaults are loaded from ./magic_header.json (or $MAGIC_HEADER_CONFIG).
CLI flags override config.

Examples:
  %(prog)s generate light.png dark.png
  %(prog)s generate light.png dark.png --mode scanlines --preserve-color
  %(prog)s generate light.png dark.png -o header.png --report
  %(prog)s report light.png dark.png header.png
        """,
    )
    sub = p.add_subparsers(dest="command", required=True)

    # Shared options
    shared = argparse.ArgumentParser(add_help=False)
    shared.add_argument("light", type=Path, help="Image shown on light backgrounds")
    shared.add_argument("dark", type=Path, help="Image shown on dark backgrounds")
    shared.add_argument("--config", type=Path, default=None, help="JSON config file (default: ./magic_header.json)")
    shared.add_argument(
        "--mode",
        choices=[m.value.lower() for m in BlendMode],
        default=None,
        help="Blend strategy (default: blended)",
    )
    shared.add_argument("--width", type=int, default=None, help=f"Output width (default: {config.DEFAULT_WIDTH})")
    shared.add_argument("--height", type=int, default=None, help=f"Output height (default: {config.DEFAULT_HEIGHT})")
    shared.add_argument(
        "--normalize",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Blended mode: floor light channels at the dark ones (default: on)",
    )
    shared.add_argument(
        "--preserve-color",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Scanlines/interlaced: keep hue instead of perfect hiding (default: off)",
    )
    shared.add_argument("--brightness", type=int, default=None, help="Brightness offset (currently unused)")
    shared.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    shared.add_argument("-q", "--quiet", action="store_true", help="Errors only")

    gen = sub.add_parser("generate", parents=[shared], help="Build the header image")
    gen.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path(config.DEFAULT_OUTPUT_NAME),
        help=f"Output PNG path (default: {config.DEFAULT_OUTPUT_NAME})",
    )
    gen.add_argument("--data-url", action="store_true", help="Also print the PNG as a data: URL")
    gen.add_argument("--report", action="store_true", help="Print a fidelity report")

    rep = sub.add_parser("report", parents=[shared], help="Score an existing header against its sources")
    rep.add_argument("generated", type=Path, help="Generated header PNG")

    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    # Configure logging
    if args.quiet:
        level = logging.ERROR
    elif args.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    handlers = {
        "generate": _cmd_generate,
        "report": _cmd_report,
    }
    try:
        handlers[args.command](args)
    except MagicHeaderError as exc:
        log.error("%s failed: %s error (use -v for details)", args.command, exc.kind)
        log.debug("%s", exc, exc_info=True)
        return 1
    except (OSError, ValueError) as exc:
        log.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
