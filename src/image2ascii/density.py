"""Ink-density palettes used to map luminance onto characters."""

import logging

import numpy as np

from image2ascii.charsets import DEFAULT_CHARACTERS
from image2ascii.fonts import GlyphRenderer, has_glyph

logger = logging.getLogger(__name__)

# Every character is measured at the same pixel height; only the relative
# ordering of the counts is used.
CALIBRATION_HEIGHT = 20.0

# One entry per 8-bit luminance value.
PALETTE_SIZE = 256

DensityPalette = list[tuple[int, str]]


def pad(characters: str, target_size: int) -> str:
    """Repeat ``characters`` and append a prefix of it to reach ``target_size``.

    >>> pad("ABC", 10)
    'ABCABCABCA'
    """
    if not characters:
        raise ValueError("cannot pad an empty character set")
    if target_size < len(characters):
        raise ValueError(f"target size {target_size} is smaller than the {len(characters)} characters given")
    repeats, remainder = divmod(target_size, len(characters))
    return characters * repeats + characters[:remainder]


def ascii2density(characters: str, renderer: GlyphRenderer | None = None) -> DensityPalette:
    """Measure each character's ink and sort by pixel count, densest first.

    A pixel counts when its coverage is nonzero. Characters that do not form
    a glyph of their own (combining marks, control characters) are left
    out. Characters missing from the font are measured with a fallback font
    that has them. The sort is stable, so equal counts keep their input order.
    """
    if renderer is None:
        renderer = GlyphRenderer(pixel_height=CALIBRATION_HEIGHT)

    density: DensityPalette = []
    for char in characters:
        if not has_glyph(char):
            continue
        glyph = renderer.render(char)
        count = 0 if glyph is None else int(np.count_nonzero(glyph.coverage))
        density.append((count, char))
    density.sort(key=lambda entry: entry[0], reverse=True)
    return density


def build_palette(characters: str | None = None, size: int = PALETTE_SIZE) -> DensityPalette:
    palette = ascii2density(pad(characters or DEFAULT_CHARACTERS, size))
    logger.debug("built density palette of %d entries", len(palette))
    return palette
