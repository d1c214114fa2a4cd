"""
Colour palettes and iteration-to-colour mapping.

Preset tables are fixed; changing any entry changes every avatar rendered with
that style.
"""

import logging
import math
from dataclasses import dataclass
from typing import NamedTuple, Tuple

from .errors import InvalidOptionError

logger = logging.getLogger(__name__)

GOLDEN_FRACTION = 0.618033988749895


class RGB(NamedTuple):
    r: int
    g: int
    b: int

    def hex(self) -> str:
        return rgb_to_hex(self)


BLACK = RGB(0, 0, 0)


@dataclass(frozen=True)
class ColorPalette:
    colors: Tuple[RGB, ...]
    background: RGB

    def to_dict(self) -> dict:
        return {
            "colors": [c.hex() for c in self.colors],
            "background": self.background.hex(),
        }


def _round_channel(value: float) -> int:
    # half-up, matching the usual web convention rather than banker's rounding
    return max(0, min(255, int(math.floor(value * 255 + 0.5))))


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> RGB:
    if s == 0:
        r = g = b = l
    else:
        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        r = _hue_to_channel(p, q, h + 1 / 3)
        g = _hue_to_channel(p, q, h)
        b = _hue_to_channel(p, q, h - 1 / 3)
    return RGB(_round_channel(r), _round_channel(g), _round_channel(b))


def rgb_to_hex(color) -> str:
    return "#" + "".join(f"{max(0, min(255, int(c))):02x}" for c in color)


def _table(*triples):
    return tuple(RGB(*t) for t in triples)


# style -> (colors, dark background, light background)
PRESET_PALETTES = {
    "fire": (
        _table((48, 0, 0), (140, 20, 0), (220, 70, 0), (255, 150, 20), (255, 230, 120)),
        RGB(20, 6, 2), RGB(255, 244, 230),
    ),
    "ocean": (
        _table((0, 20, 60), (0, 60, 120), (0, 120, 180), (40, 180, 210), (170, 235, 245)),
        RGB(2, 10, 24), RGB(232, 246, 252),
    ),
    "forest": (
        _table((16, 40, 16), (34, 85, 34), (70, 130, 50), (140, 180, 80), (210, 225, 150)),
        RGB(8, 18, 8), RGB(240, 246, 232),
    ),
    "sunset": (
        _table((60, 20, 90), (150, 40, 110), (230, 80, 90), (250, 150, 70), (255, 215, 130)),
        RGB(22, 8, 30), RGB(255, 240, 230),
    ),
    "neon": (
        _table((255, 0, 200), (120, 0, 255), (0, 200, 255), (0, 255, 140), (230, 255, 0)),
        RGB(8, 4, 16), RGB(245, 245, 250),
    ),
    "grayscale": (
        _table((30, 30, 30), (80, 80, 80), (130, 130, 130), (185, 185, 185), (235, 235, 235)),
        RGB(10, 10, 10), RGB(248, 248, 248),
    ),
    "rainbow": (
        _table((230, 40, 40), (240, 150, 30), (235, 225, 40), (50, 200, 80), (40, 120, 230), (140, 60, 210)),
        RGB(12, 12, 16), RGB(250, 250, 250),
    ),
}
HUED_STYLES = ("pastel", "monochrome")
PALETTE_STYLES = ("random",) + tuple(PRESET_PALETTES) + HUED_STYLES


def _background(rng, base_hue: float) -> RGB:
    is_dark = rng.bool(0.5)
    lightness = rng.range(0.05, 0.15) if is_dark else rng.range(0.9, 0.98)
    saturation = rng.range(0, 0.1)
    return hsl_to_rgb(base_hue, saturation, lightness)


def _random_palette(rng, num_colors: int) -> ColorPalette:
    base_hue = rng.next()
    saturation = rng.range(0.4, 0.9)
    light_min = rng.range(0.3, 0.4)
    light_max = rng.range(0.6, 0.8)

    colors = []
    for i in range(num_colors):
        hue = (base_hue + i * GOLDEN_FRACTION) % 1
        lightness = light_min + (i / num_colors) * (light_max - light_min)
        colors.append(hsl_to_rgb(hue, saturation, lightness))

    return ColorPalette(tuple(colors), _background(rng, base_hue))


def _hued_palette(rng, style: str, num_colors: int) -> ColorPalette:
    base_hue = rng.next()
    colors = []
    for i in range(num_colors):
        f = i / max(num_colors - 1, 1)
        if style == "pastel":
            hue = (base_hue + i * GOLDEN_FRACTION) % 1
            colors.append(hsl_to_rgb(hue, 0.6, 0.72 + 0.16 * f))
        else:
            colors.append(hsl_to_rgb(base_hue, 0.7, 0.15 + 0.7 * f))
    dark = rng.bool(0.5)
    background = hsl_to_rgb(base_hue, 0.08, 0.1 if dark else 0.95)
    return ColorPalette(tuple(colors), background)


def generate_palette(rng, style: str = "random", num_colors: int = 5) -> ColorPalette:
    """
    Build a palette for ``style``, drawing from ``rng``.

    Fixed preset tables only draw the light/dark background choice; pastel
    and monochrome also draw a base hue. ``num_colors`` applies to the
    generated styles.
    """
    style = (style or "random").strip().lower()
    num_colors = int(num_colors)
    if num_colors < 1:
        raise InvalidOptionError(f"num_colors must be positive, got {num_colors}")

    if style == "random":
        return _random_palette(rng, num_colors)
    if style in HUED_STYLES:
        return _hued_palette(rng, style, num_colors)
    if style in PRESET_PALETTES:
        colors, dark, light = PRESET_PALETTES[style]
        logger.debug("using %s palette", style)
        return ColorPalette(colors, dark if rng.bool(0.5) else light)

    raise InvalidOptionError(f"unknown palette style {style!r} (expected one of: {', '.join(PALETTE_STYLES)})")


def color_for_iteration(iteration: int, max_iterations: int, palette: ColorPalette, color_offset: float = 0.0) -> RGB:
    if iteration == max_iterations:
        return BLACK

    t = (iteration / max_iterations + color_offset) % 1
    colors = palette.colors
    index = t * (len(colors) - 1)
    i = int(math.floor(index))
    f = index - i

    c1 = colors[i]
    c2 = colors[min(i + 1, len(colors) - 1)]
    return RGB(
        int(math.floor(c1.r + (c2.r - c1.r) * f + 0.5)),
        int(math.floor(c1.g + (c2.g - c1.g) * f + 0.5)),
        int(math.floor(c1.b + (c2.b - c1.b) * f + 0.5)),
    )
