import shutil
import subprocess

import pytest

from image2ascii.fonts import _find_fallback_font


def _find_system_font():
    """Ask fontconfig for a TrueType sans font."""
    if shutil.which("fc-match") is None:
        return None
    out = subprocess.run(["fc-match", "-f", "%{file}", "sans"], capture_output=True, text=True)
    if out.returncode == 0 and out.stdout.strip().endswith((".ttf", ".otf")):
        return out.stdout.strip()
    return None


FONT_PATH = _find_system_font()
needs_font = pytest.mark.skipif(FONT_PATH is None, reason="No TrueType font found on system")

BLOCK_FONT_PATH = _find_fallback_font("█")
needs_block_font = pytest.mark.skipif(BLOCK_FONT_PATH is None, reason="No font with block elements found on system")
