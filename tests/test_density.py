import pytest
from PIL import Image

from image2ascii import fonts
from image2ascii.charsets import BLOCKS, DEFAULT_CHARACTERS
from image2ascii.converter import image2ascii
from image2ascii.density import PALETTE_SIZE, ascii2density, build_palette, pad
from tests.conftest import needs_block_font


def test_pad():
    assert pad("ABC", 10) == "ABCABCABCA"


def test_pad_exact_multiple():
    assert pad("AB", 6) == "ABABAB"


def test_pad_same_length():
    assert pad("ABC", 3) == "ABC"


def test_pad_undersized_target():
    with pytest.raises(ValueError):
        pad("ABCDEF", 3)


def test_pad_empty():
    with pytest.raises(ValueError):
        pad("", 10)


def test_density_order():
    density = ascii2density("A.@=")
    assert [char for _, char in density] == ["@", "A", "=", "."]


def test_density_counts_are_descending():
    counts = [count for count, _ in ascii2density("A.@=#-")]
    assert counts == sorted(counts, reverse=True)


def test_space_has_no_ink():
    assert ascii2density(" ") == [(0, " ")]


def test_blank_characters_sort_last():
    density = ascii2density("x y z")
    assert density[-2:] == [(0, " "), (0, " ")]


def test_combining_marks_are_omitted():
    density = ascii2density("A\u0301B")
    assert sorted(char for _, char in density) == ["A", "B"]


def test_default_palette_has_one_entry_per_luminance():
    palette = build_palette()
    assert len(palette) == PALETTE_SIZE
    assert {char for _, char in palette} == set(DEFAULT_CHARACTERS)


def test_default_palette_ends_with_spaces():
    palette = build_palette()
    assert palette[-1] == (0, " ")
    assert palette[0][0] > 0


def test_custom_palette():
    palette = build_palette(" @")
    assert len(palette) == PALETTE_SIZE
    assert [char for _, char in palette[:128]] == ["@"] * 128
    assert [char for _, char in palette[128:]] == [" "] * 128


@needs_block_font
def test_block_elements_use_fallback_font():
    density = ascii2density(BLOCKS)
    assert density[0][1] == "█"
    assert density[-1] == (0, " ")
    assert len({count for count, _ in density}) > 2


@needs_block_font
def test_black_image_with_blocks_is_full_block():
    grid = image2ascii(Image.new("L", (20, 20), 0), 4, characters=BLOCKS)
    assert grid.to_lines() == ["█" * 4] * 2


def test_fallback_only_for_missing_glyphs(monkeypatch):
    asked = []

    def fake_fallback(char):
        asked.append(char)
        return None

    monkeypatch.setattr(fonts, "_find_fallback_font", fake_fallback)
    density = ascii2density("A ██")
    assert asked == ["█"]
    assert sorted(char for _, char in density) == [" ", "A", "█", "█"]
