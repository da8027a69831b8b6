import functools
import logging
import shutil
import subprocess
import unicodedata
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from image2ascii.errors import FontLoadError

logger = logging.getLogger(__name__)

# Font size used only to measure ascent + descent before picking the real size.
CALIBRATION_SIZE = 100

# Combining marks, controls, format characters and unassigned code points
_NO_GLYPH_CATEGORIES = {"Mn", "Me", "Cc", "Cf", "Cs", "Cn"}

# Last code point; no font maps it, so it always renders as the missing-glyph box
MISSING_PROBE = "\U0010FFFF"


@dataclass
class Glyph:
    """Coverage bitmap of one character.

    ``left`` and ``top`` locate the bitmap's top-left pixel relative to the
    pen origin on the ascender line. ``coverage`` is uint8, 0-255.
    """

    left: int
    top: int
    coverage: np.ndarray


@functools.lru_cache(maxsize=32)
def _default_font(size: float) -> ImageFont.FreeTypeFont:
    return ImageFont.load_default(size=size)


def _open(font_path: str | Path | None, size: float) -> ImageFont.FreeTypeFont:
    if font_path is None:
        return _default_font(size)
    try:
        return ImageFont.truetype(str(font_path), size)
    except (OSError, ValueError) as exc:
        raise FontLoadError(font_path) from exc


def load_font(font_path: str | Path | None = None, pixel_height: float = 20.0) -> ImageFont.FreeTypeFont:
    """Load a font scaled so that ascent + descent spans ``pixel_height`` pixels.

    Without ``font_path`` the font embedded in Pillow is used.
    """
    reference = _open(font_path, CALIBRATION_SIZE)
    ascent, descent = reference.getmetrics()
    size = pixel_height * CALIBRATION_SIZE / (ascent + descent)
    logger.debug("font %s: pixel height %s -> size %.2f", font_path or "<default>", pixel_height, size)
    return _open(font_path, size)


def has_glyph(char: str) -> bool:
    """Whether a character lays out as a glyph of its own."""
    return unicodedata.category(char) not in _NO_GLYPH_CATEGORIES


def rasterize_glyph(font: ImageFont.FreeTypeFont, char: str) -> Glyph | None:
    """Render one character; None when it has an empty pixel bounding box."""
    left, top, right, bottom = font.getbbox(char, anchor="la")
    if right <= left or bottom <= top:
        return None
    img = Image.new("L", (right - left, bottom - top), 0)
    draw = ImageDraw.Draw(img)
    draw.text((-left, -top), char, fill=255, font=font, anchor="la")
    return Glyph(left=left, top=top, coverage=np.asarray(img))


def _find_fallback_font(char: str) -> str | None:
    """Ask fontconfig which font provides a given character."""
    if shutil.which("fc-match") is None:
        return None
    codepoint = f"{ord(char):04x}"
    result = subprocess.run(
        ["fc-match", "-f", "%{file}", f":charset={codepoint}"],
        capture_output=True,
        text=True,
    )
    if result.returncode == 0 and result.stdout.strip():
        return result.stdout.strip()
    return None


def _same_bitmap(a: Glyph | None, b: Glyph | None) -> bool:
    if a is None or b is None or not a.coverage.any():
        return False
    return a.coverage.shape == b.coverage.shape and np.array_equal(a.coverage, b.coverage)


class GlyphRenderer:
    """Rasterizes characters at a fixed pixel height, falling back to other fonts.

    A character the primary font lacks comes out as the font's missing-glyph
    box. Such characters are rendered with whatever font fontconfig reports
    as covering them, scaled to the same pixel height.
    """

    def __init__(self, font_path: str | Path | None = None, pixel_height: float = 20.0):
        self.pixel_height = pixel_height
        self.font = load_font(font_path, pixel_height)
        self._missing = rasterize_glyph(self.font, MISSING_PROBE)
        self._fallbacks: dict[str, ImageFont.FreeTypeFont | None] = {}
        self._glyphs: dict[str, Glyph | None] = {}

    def _fallback_font(self, path: str) -> ImageFont.FreeTypeFont | None:
        if path not in self._fallbacks:
            try:
                self._fallbacks[path] = load_font(path, self.pixel_height)
            except FontLoadError:
                logger.debug("fallback font %s could not be loaded", path)
                self._fallbacks[path] = None
        return self._fallbacks[path]

    def render(self, char: str) -> Glyph | None:
        if char not in self._glyphs:
            self._glyphs[char] = self._render(char)
        return self._glyphs[char]

    def _render(self, char: str) -> Glyph | None:
        glyph = rasterize_glyph(self.font, char)
        if not _same_bitmap(glyph, self._missing):
            return glyph
        path = _find_fallback_font(char)
        fallback = self._fallback_font(path) if path is not None else None
        if fallback is None:
            return glyph
        logger.debug("rendering %r with fallback font %s", char, path)
        return rasterize_glyph(fallback, char)
