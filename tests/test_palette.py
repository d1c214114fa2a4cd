import pytest

from fracticons.kernel.errors import InvalidOptionError
from fracticons.kernel.palette import (
    BLACK,
    PALETTE_STYLES,
    PRESET_PALETTES,
    RGB,
    ColorPalette,
    color_for_iteration,
    generate_palette,
    hsl_to_rgb,
    rgb_to_hex,
)
from fracticons.kernel.prng import SeededRandom

RGB_PALETTE = ColorPalette((RGB(255, 0, 0), RGB(0, 255, 0), RGB(0, 0, 255)), RGB(255, 255, 255))


def test_hsl_to_rgb_primaries():
    assert hsl_to_rgb(0, 1, 0.5) == (255, 0, 0)
    assert hsl_to_rgb(1 / 3, 1, 0.5) == (0, 255, 0)
    assert hsl_to_rgb(0, 0, 1) == (255, 255, 255)


def test_hsl_to_rgb_rounds_half_up():
    assert hsl_to_rgb(0, 0, 0.5) == (128, 128, 128)


def test_rgb_to_hex():
    assert rgb_to_hex(RGB(255, 0, 16)) == "#ff0010"
    assert RGB(1, 2, 3).hex() == "#010203"


def test_random_palette_shape_and_determinism():
    a = generate_palette(SeededRandom([1, 2, 3]))
    b = generate_palette(SeededRandom([1, 2, 3]))
    assert a == b
    assert len(a.colors) == 5
    for color in a.colors + (a.background,):
        assert all(0 <= c <= 255 for c in color)
    assert len(generate_palette(SeededRandom([1, 2, 3]), num_colors=8).colors) == 8


def test_random_palette_draw_order():
    rng = SeededRandom([4, 5])
    reference = SeededRandom([4, 5])
    generate_palette(rng)
    # hue, saturation, two lightness bounds, dark flag, background lightness and saturation
    for _ in range(7):
        reference.next()
    assert rng.next() == reference.next()


@pytest.mark.parametrize("style", PALETTE_STYLES)
def test_every_style_produces_a_palette(style):
    palette = generate_palette(SeededRandom([7, 8]), style)
    assert len(palette.colors) >= 1
    assert isinstance(palette.background, RGB)


def test_fixed_preset_uses_table_and_one_draw():
    rng = SeededRandom([7, 8])
    reference = SeededRandom([7, 8])
    palette = generate_palette(rng, "fire")
    colors, dark, light = PRESET_PALETTES["fire"]
    assert palette.colors == colors
    assert palette.background in (dark, light)
    reference.next()
    assert rng.next() == reference.next()


def test_monochrome_shares_one_hue():
    palette = generate_palette(SeededRandom([11, 12]), "monochrome", num_colors=4)
    assert len(palette.colors) == 4
    assert palette.colors[0] != palette.colors[-1]


def test_unknown_style_rejected():
    with pytest.raises(InvalidOptionError):
        generate_palette(SeededRandom([1, 2]), "sepia")


def test_in_set_is_black():
    assert color_for_iteration(50, 50, RGB_PALETTE, 0.3) == BLACK


def test_color_interpolation():
    assert color_for_iteration(0, 50, RGB_PALETTE) == (255, 0, 0)
    assert color_for_iteration(25, 50, RGB_PALETTE) == (0, 255, 0)
    assert color_for_iteration(10, 40, RGB_PALETTE) == (128, 128, 0)


def test_color_offset_wraps():
    assert color_for_iteration(0, 50, RGB_PALETTE, 0.5) == (0, 255, 0)
    assert color_for_iteration(25, 50, RGB_PALETTE, 0.5) == (255, 0, 0)


def test_single_color_palette():
    palette = ColorPalette((RGB(9, 8, 7),), RGB(0, 0, 0))
    assert color_for_iteration(13, 50, palette, 0.7) == (9, 8, 7)


def test_palette_to_dict():
    assert RGB_PALETTE.to_dict() == {
        "colors": ["#ff0000", "#00ff00", "#0000ff"],
        "background": "#ffffff",
    }
