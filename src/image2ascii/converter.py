import logging
from pathlib import Path

import numpy as np
from PIL import Image

from image2ascii.density import PALETTE_SIZE, build_palette
from image2ascii.errors import ImageDecodeError
from image2ascii.grid import CharGrid

logger = logging.getLogger(__name__)

DEFAULT_CONTRAST = 30.0


def _open_image(image: Image.Image | str | Path) -> Image.Image:
    if isinstance(image, Image.Image):
        return image
    try:
        opened = Image.open(image)
        opened.load()
    except OSError as exc:
        raise ImageDecodeError(image) from exc
    return opened


def adjust_contrast(image: Image.Image, contrast: float) -> Image.Image:
    """Stretch every colour band away from mid-grey.

    A contrast of 0 is the identity; negative values flatten the image.
    """
    percent = ((100.0 + contrast) / 100.0) ** 2
    levels = np.arange(256, dtype=np.float64) / 255.0
    lut = np.clip(np.rint(((levels - 0.5) * percent + 0.5) * 255.0), 0, 255).astype(np.uint8).tolist()

    if image.mode not in ("L", "RGB"):
        image = image.convert("RGB")
    return image.point(lut * len(image.getbands()))


def image2ascii(
    image: Image.Image | str | Path,
    target_width: int,
    contrast: float | None = None,
    characters: str | None = None,
) -> CharGrid:
    """Render an image as a grid of characters ``target_width`` columns wide.

    Each resized pixel's 8-bit luminance is used directly as an index into
    the density-sorted palette, so black picks the densest character and
    white the sparsest.
    """
    palette = build_palette(characters, PALETTE_SIZE)
    lookup = np.array([char for _, char in palette])

    image = _open_image(image)
    image = adjust_contrast(image, DEFAULT_CONTRAST if contrast is None else contrast)

    # Characters are about twice as tall as they are wide
    scale = target_width / image.width
    target_height = round(image.height * scale / 2)
    logger.debug("resizing %dx%d -> %dx%d", image.width, image.height, target_width, target_height)

    if target_width <= 0 or target_height <= 0:
        return CharGrid(max(target_width, 0), max(target_height, 0))

    image = image.resize((target_width, target_height), Image.LANCZOS)
    luma = np.asarray(image.convert("L"))

    return CharGrid.from_rows(lookup[luma].tolist())
