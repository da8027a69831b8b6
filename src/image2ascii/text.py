import logging
import math
from pathlib import Path

import numpy as np

from image2ascii.fonts import Glyph, load_font, rasterize_glyph
from image2ascii.grid import CharGrid

logger = logging.getLogger(__name__)

COVERAGE_THRESHOLD = 0.5


def _squash_vertically(glyph: Glyph) -> tuple[int, np.ndarray]:
    """Halve a glyph's height by averaging row pairs.

    Returns the new top row (relative to the ascender line) and the
    coverage as floats in 0-1.
    """
    top = glyph.top - glyph.top % 2
    coverage = glyph.coverage.astype(np.float64) / 255.0
    pad_top = glyph.top - top
    pad_bottom = (pad_top + coverage.shape[0]) % 2
    coverage = np.pad(coverage, ((pad_top, pad_bottom), (0, 0)))
    rows, cols = coverage.shape
    return top // 2, coverage.reshape(rows // 2, 2, cols).mean(axis=1)


def string2ascii(
    message: str,
    height: float,
    ch: str,
    second: tuple[int, str] | None = None,
    font_path: str | Path | None = None,
) -> CharGrid:
    """Draw ``message`` in large letters made of ``ch``.

    The grid is ``ceil(height)`` rows tall. Glyphs are laid out twice as wide
    as the font's natural proportions so they look right in a terminal. When
    ``second`` is given as ``(index, char)``, glyphs from position ``index``
    onward are drawn with ``char`` instead.
    """
    if math.ceil(height) <= 0:
        return CharGrid(0, 0)

    # Rasterize at double height, then halve vertically: 2h wide by h tall
    font = load_font(font_path, pixel_height=height * 2)
    switch_at, second_ch = second if second is not None else (len(message), ch)

    width = math.ceil(font.getlength(message)) if message else 0
    pixel_height = math.ceil(height)
    grid = CharGrid(width, pixel_height)
    logger.debug("rendering %r into %dx%d grid", message, width, pixel_height)

    for i, char in enumerate(message):
        glyph = rasterize_glyph(font, char)
        if glyph is None:
            continue
        origin_x = math.floor(font.getlength(message[:i]))
        top, coverage = _squash_vertically(glyph)
        fill = ch if i < switch_at else second_ch

        ys, xs = np.nonzero(coverage > COVERAGE_THRESHOLD)
        for y, x in zip(ys + top, xs + origin_x + glyph.left):
            if 0 <= x < width and 0 <= y < pixel_height:
                grid.cells[y][x] = fill

    return grid
