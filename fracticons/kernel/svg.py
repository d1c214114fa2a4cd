"""
SVG rendering of an iteration grid.
"""

import re
from xml.sax.saxutils import quoteattr

from .palette import color_for_iteration, rgb_to_hex

SVG_NS = "http://www.w3.org/2000/svg"
PATH_THRESHOLD = 10
STYLIZED_LEVELS = 5

_INNER = re.compile(r"<svg[^>]*>(.*)</svg>", re.S)


def _num(value) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.4f}".rstrip("0").rstrip(".")


def _open_tag(size, view_box=None) -> str:
    view_box = view_box or f"0 0 {size} {size}"
    return f'<svg xmlns="{SVG_NS}" width="{size}" height="{size}" viewBox={quoteattr(view_box)}>'


def grid_to_svg(grid, params, palette, size: int = 128, view_box=None) -> str:
    grid_size = len(grid)
    cell = size / grid_size
    bg = rgb_to_hex(palette.background)

    groups = {}
    for y, row in enumerate(grid):
        for x, iteration in enumerate(row):
            color = rgb_to_hex(color_for_iteration(iteration, params.max_iterations, palette, params.color_offset))
            groups.setdefault(color, []).append((x, y))

    parts = [_open_tag(size, view_box), f'<rect width="100%" height="100%" fill="{bg}"/>']
    c = _num(cell)
    for color, cells in groups.items():
        if color == bg:
            continue
        if len(cells) < PATH_THRESHOLD:
            for x, y in cells:
                parts.append(f'<rect x="{_num(x * cell)}" y="{_num(y * cell)}" width="{c}" height="{c}" fill="{color}"/>')
        else:
            path = "".join(f"M{_num(x * cell)},{_num(y * cell)}h{c}v{c}h-{c}z" for x, y in cells)
            parts.append(f'<path d="{path}" fill="{color}"/>')
    parts.append("</svg>")
    return "".join(parts)


def stylized_svg(grid, params, palette, size: int = 128, view_box=None) -> str:
    """Iteration bands drawn as translucent circles around their centroids."""
    grid_size = len(grid)
    band = params.max_iterations / STYLIZED_LEVELS

    parts = [_open_tag(size, view_box), f'<rect width="100%" height="100%" fill="{rgb_to_hex(palette.background)}"/>']
    for level in range(STYLIZED_LEVELS):
        threshold = int(band * (level + 1))
        points = [
            (x / grid_size * size, y / grid_size * size)
            for y, row in enumerate(grid)
            for x, value in enumerate(row)
            if threshold <= value < threshold + band
        ]
        if len(points) <= PATH_THRESHOLD:
            continue
        mx = sum(p[0] for p in points) / len(points)
        my = sum(p[1] for p in points) / len(points)
        radius = sum(((px - mx) ** 2 + (py - my) ** 2) ** 0.5 for px, py in points) / len(points)
        color = rgb_to_hex(palette.colors[level % len(palette.colors)])
        opacity = 0.3 + (level / STYLIZED_LEVELS) * 0.5
        parts.append(
            f'<circle cx="{_num(mx)}" cy="{_num(my)}" r="{_num(radius)}" fill="{color}" opacity="{_num(opacity)}"/>'
        )
    parts.append("</svg>")
    return "".join(parts)


def wrap_in_circle_mask(svg: str, size: int) -> str:
    m = _INNER.search(svg)
    if not m:
        return svg
    half = _num(size / 2)
    return (
        f'<svg xmlns="{SVG_NS}" width="{size}" height="{size}" viewBox="0 0 {size} {size}">'
        f'<defs><clipPath id="circleClip"><circle cx="{half}" cy="{half}" r="{half}"/></clipPath></defs>'
        f'<g clip-path="url(#circleClip)">{m.group(1)}</g></svg>'
    )
