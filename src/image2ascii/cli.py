import argparse
import logging
import os
import sys
from pathlib import Path

from image2ascii.charsets import CHARSETS
from image2ascii.converter import DEFAULT_CONTRAST, image2ascii
from image2ascii.errors import Image2AsciiError
from image2ascii.grid import CharGrid
from image2ascii.text import string2ascii

logger = logging.getLogger(__name__)


def _terminal_width() -> int:
    """Columns of the terminal, or 80 if stdout is not a tty."""
    if not sys.stdout.isatty():
        return 80
    return os.get_terminal_size().columns


def _single_char(value: str) -> str:
    if len(value) != 1:
        raise argparse.ArgumentTypeError(f"expected a single character, got {value!r}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render an image or a message as ASCII art")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Log debug details to stderr")
    commands = parser.add_subparsers(dest="command", required=True)

    image = commands.add_parser("image", help="Render an image file")
    image.add_argument("input", help="Path to input image")
    image.add_argument(
        "-w", "--width", type=int, default=None, help="Output width in columns (default: terminal width)"
    )
    image.add_argument(
        "-c",
        "--contrast",
        type=float,
        default=DEFAULT_CONTRAST,
        help=f"Contrast adjustment applied before sampling (default: {DEFAULT_CONTRAST})",
    )
    image.add_argument("-o", "--output", type=Path, default=None, help="Write to this file instead of stdout")
    chars = image.add_mutually_exclusive_group()
    chars.add_argument(
        "--charset", default="default", choices=sorted(CHARSETS), help="Named character set (default: default)"
    )
    chars.add_argument("--characters", default=None, help="Custom characters to measure and use")

    text = commands.add_parser("text", help="Render a message in large letters")
    text.add_argument("input", help="Message to render")
    text.add_argument("-c", "--char", type=_single_char, required=True, help="Character to draw with")
    text.add_argument("-H", "--height", type=float, default=20.0, help="Height in rows (default: 20)")
    text.add_argument("-o", "--output", type=Path, default=None, help="Write to this file instead of stdout")
    text.add_argument("-f", "--font", default=None, help="TrueType/OpenType font file (default: built-in font)")
    text.add_argument(
        "--second-char", type=_single_char, default=None, help="Character for glyphs from --switch-at onward"
    )
    text.add_argument("--switch-at", type=int, default=0, help="Index of the first glyph drawn with --second-char")
    return parser


def _render(args: argparse.Namespace) -> CharGrid:
    if args.command == "image":
        width = args.width if args.width is not None else _terminal_width()
        characters = args.characters or CHARSETS[args.charset]
        return image2ascii(args.input, width, contrast=args.contrast, characters=characters)

    second = (args.switch_at, args.second_char) if args.second_char is not None else None
    return string2ascii(args.input, args.height, args.char, second=second, font_path=args.font)


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )

    try:
        grid = _render(args)
        if args.output is not None:
            logger.info("output to file %s", args.output)
            grid.save(args.output)
            return
    except (Image2AsciiError, OSError) as exc:
        print(exc, file=sys.stderr)
        sys.exit(1)

    for line in grid.to_lines():
        print(line)
