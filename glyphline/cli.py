# this_file: glyphline/cli.py
"""
glyphline command line interface: render one line of text to a PNG.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .base import ConfigError, GlyphlineError
from .constants import DEFAULT_BACKEND, DEFAULT_PADDING, DEFAULT_POINT_SIZE
from .fonts import BACKENDS
from .output import format_report, save_png
from .pipeline import Pipeline, RenderRequest
from .raster import Hinting
from .unquote import unquote

logger = logging.getLogger(__name__)


def parse_color(color_str: str) -> tuple:
    """Parse a color given as R,G,B,A or as #RRGGBB / #RRGGBBAA"""
    if "," in color_str:
        parts = [int(x) for x in color_str.split(",")]
        if len(parts) != 4:
            raise ValueError("Color must have 4 components (R,G,B,A)")
        if any(p < 0 or p > 255 for p in parts):
            raise ValueError("Color components must be in 0..255")
        return tuple(parts)

    hex_str = color_str.lstrip("#")
    if len(hex_str) == 6:
        hex_str += "FF"
    if len(hex_str) != 8:
        raise ValueError(f"Invalid color format: {color_str}. Must be R,G,B,A, RRGGBB or RRGGBBAA")
    return tuple(int(hex_str[i:i + 2], 16) for i in range(0, 8, 2))


def _color_option(ctx, param, value):
    try:
        return parse_color(value)
    except ValueError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)


@click.command()
@click.version_option(version=__version__, prog_name="glyphline")
@click.argument("text")
@click.option("-f", "--font", "font_file", type=click.Path(dir_okay=False), help="Font file SOURCE")
@click.option("-o", "--output", "output_file", type=click.Path(dir_okay=False), help="FILENAME of output")
@click.option("-p", "--points", type=float, default=DEFAULT_POINT_SIZE, show_default=True, help="Font size in PTS")
@click.option("--pad", type=int, default=DEFAULT_PADDING, show_default=True, help="Set padding to INT")
@click.option("--full", is_flag=True, help="Turn full font hinting on")
@click.option("-n", "--dry-run", is_flag=True, help="Display output information, but don't actually generate file")
@click.option("--color", "foreground", default="0,0,0,255", callback=_color_option, help="Text color (R,G,B,A or RRGGBB[AA])")
@click.option("--background", default="0,0,0,0", callback=_color_option, help="Background color (R,G,B,A or RRGGBB[AA])")
@click.option(
    "--backend",
    type=click.Choice(["auto", *BACKENDS]),
    default=DEFAULT_BACKEND,
    show_default=True,
    help="Font backend",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def main(
    text: str,
    font_file: Optional[str],
    output_file: Optional[str],
    points: float,
    pad: int,
    full: bool,
    dry_run: bool,
    foreground: tuple,
    background: tuple,
    backend: str,
    verbose: bool,
):
    """Render TEXT in a single line to a PNG image"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not font_file:
        raise click.UsageError("font is required (-f/--font)")
    if not output_file and not dry_run:
        raise click.UsageError("output file is required (-o/--output)")

    try:
        input_text = unquote(text)
    except ConfigError as e:
        raise click.BadParameter(str(e), param_hint="TEXT")

    try:
        request = RenderRequest(
            font_data=Path(font_file).read_bytes(),
            text=input_text,
            point_size=points,
            padding=pad,
            hinting=Hinting.FULL if full else Hinting.NONE,
            foreground=foreground,
            background=background,
            backend=backend,
        )
        pipeline = Pipeline(request)

        if dry_run:
            click.echo(format_report(pipeline.measure()))
            return

        canvas = pipeline.render()
        save_png(canvas, output_file)
        logger.debug("Rendered %r to %s (%dx%d)", input_text, output_file, canvas.width, canvas.height)

    except (GlyphlineError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
