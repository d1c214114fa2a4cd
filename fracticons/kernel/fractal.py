"""
Escape-time fractal families, the grid rasterizer and parameter selection.

Parameter selection runs a small probe render per candidate and rejects
"boring" ones (mostly in-set, or too few distinct iteration counts).
"""

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

from .errors import InvalidDescriptorError, InvalidOptionError, UnknownPresetError

logger = logging.getLogger(__name__)

DESCRIPTOR_PREFIX = "frsig://"

PROBE_SIZE = 32
MAX_ATTEMPTS = 10
MAX_IN_SET_RATIO = 0.25
MIN_UNIQUE_VALUES = 8
JULIA_JITTER = 0.08
REGION_SPREAD = 0.5

# Classic connected Julia constants with plenty of boundary detail.
JULIA_PRESETS = {
    "dendrite": (0.0, 1.0),
    "douady-rabbit": (-0.123, 0.745),
    "siegel-disk": (-0.391, -0.587),
    "dragon": (-0.8, 0.156),
    "spiral": (0.285, 0.01),
    "galaxy": (-0.4, 0.6),
    "whirlpool": (-0.7269, 0.1889),
    "seahorse": (-0.75, 0.11),
    "starfish": (-0.54, 0.54),
    "snowflake": (0.45, 0.1428),
}
PRESET_NAMES = tuple(JULIA_PRESETS)


def julia_iteration(px, py, cx, cy, max_iterations):
    zx, zy = px, py
    for i in range(max_iterations):
        zx2 = zx * zx
        zy2 = zy * zy
        if zx2 + zy2 > 4:
            return i
        new_zx = zx2 - zy2 + cx
        zy = 2 * zx * zy + cy
        zx = new_zx
    return max_iterations


def mandelbrot_iteration(px, py, cx, cy, max_iterations):
    re, im = px + cx, py + cy
    zx = zy = 0.0
    for i in range(max_iterations):
        zx2 = zx * zx
        zy2 = zy * zy
        if zx2 + zy2 > 4:
            return i
        new_zx = zx2 - zy2 + re
        zy = 2 * zx * zy + im
        zx = new_zx
    return max_iterations


def burning_ship_iteration(px, py, cx, cy, max_iterations):
    re, im = px + cx, py + cy
    zx = zy = 0.0
    for i in range(max_iterations):
        zx2 = zx * zx
        zy2 = zy * zy
        if zx2 + zy2 > 4:
            return i
        new_zx = zx2 - zy2 + re
        zy = abs(2 * zx * zy) + im
        zx = new_zx
    return max_iterations


def tricorn_iteration(px, py, cx, cy, max_iterations):
    re, im = px + cx, py + cy
    zx = zy = 0.0
    for i in range(max_iterations):
        zx2 = zx * zx
        zy2 = zy * zy
        if zx2 + zy2 > 4:
            return i
        new_zx = zx2 - zy2 + re
        zy = -2 * zx * zy + im
        zx = new_zx
    return max_iterations


class FractalFamily(str, Enum):
    JULIA = "julia"
    MANDELBROT = "mandelbrot"
    BURNING_SHIP = "burning-ship"
    TRICORN = "tricorn"

    @classmethod
    def parse(cls, value) -> "FractalFamily":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = ", ".join(f.value for f in cls)
            raise InvalidOptionError(f"unknown fractal family {value!r} (expected one of: {names})") from None

    @property
    def kernel(self):
        return _KERNELS[self]


_KERNELS = {
    FractalFamily.JULIA: julia_iteration,
    FractalFamily.MANDELBROT: mandelbrot_iteration,
    FractalFamily.BURNING_SHIP: burning_ship_iteration,
    FractalFamily.TRICORN: tricorn_iteration,
}


@dataclass(frozen=True)
class FractalParams:
    cx: float
    cy: float
    zoom: float
    max_iterations: int
    color_offset: float
    family: FractalFamily = FractalFamily.JULIA

    def descriptor(self) -> str:
        return (
            f"{DESCRIPTOR_PREFIX}{self.family.value}:{self.cx:.6f}:{self.cy:.6f}"
            f":{self.zoom:.6f}:{self.max_iterations}:{self.color_offset:.6f}"
        )

    @staticmethod
    def from_descriptor(desc: str) -> "FractalParams":
        if not (isinstance(desc, str) and desc.startswith(DESCRIPTOR_PREFIX)):
            raise InvalidDescriptorError(f"descriptor must start with {DESCRIPTOR_PREFIX}")
        parts = desc[len(DESCRIPTOR_PREFIX):].split(":")
        if len(parts) != 6:
            raise InvalidDescriptorError(f"expected 6 descriptor fields, got {len(parts)}")
        try:
            family = FractalFamily.parse(parts[0])
            cx, cy, zoom = map(float, parts[1:4])
            max_iterations = int(parts[4])
            color_offset = float(parts[5])
        except (InvalidOptionError, ValueError) as e:
            raise InvalidDescriptorError(f"bad descriptor {desc!r}: {e}") from e
        return FractalParams(cx, cy, zoom, max_iterations, color_offset, family)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["family"] = self.family.value
        return d


def rasterize(size: int, params: FractalParams) -> List[List[int]]:
    """
    Iteration count per cell of a ``size`` x ``size`` grid.

    Only the left half (plus the centre column for odd sizes) is iterated;
    each value is mirrored into column ``size - 1 - x``.
    """
    size = int(size)
    if size < 1:
        raise InvalidOptionError(f"grid size must be positive, got {size}")

    kernel = params.family.kernel
    cx, cy, zoom, max_iterations = params.cx, params.cy, params.zoom, params.max_iterations
    half = (size + 1) // 2

    grid = []
    for y in range(size):
        py = (y / size - 0.5) * zoom
        row = [0] * size
        for x in range(half):
            px = (x / size - 0.5) * zoom
            value = kernel(px, py, cx, cy, max_iterations)
            row[x] = value
            row[size - 1 - x] = value
        grid.append(row)
    return grid


class GridEntropy(NamedTuple):
    in_set_ratio: float
    unique_values: int
    score: float


def calculate_grid_entropy(grid, max_iterations: int) -> GridEntropy:
    total = 0
    in_set = 0
    seen = set()
    for row in grid:
        for value in row:
            total += 1
            if value == max_iterations:
                in_set += 1
            seen.add(value)

    ratio = in_set / total if total else 0.0
    if 0.2 <= ratio <= 0.6:
        balance = 1.0
    elif ratio < 0.1 or ratio > 0.9:
        balance = 0.1
    else:
        balance = 0.5
    variety = min(len(seen) / 15, 1.0)
    return GridEntropy(ratio, len(seen), 0.6 * balance + 0.4 * variety)


def passes_quality(entropy: GridEntropy) -> bool:
    return entropy.in_set_ratio <= MAX_IN_SET_RATIO and entropy.unique_values >= MIN_UNIQUE_VALUES


def lookup_preset(name: str) -> Tuple[float, float]:
    key = (name or "").strip().lower()
    if key not in JULIA_PRESETS:
        raise UnknownPresetError(f"unknown preset {name!r} (expected one of: {', '.join(PRESET_NAMES)})")
    return JULIA_PRESETS[key]


def _draw_view(rng):
    zoom = rng.range(1.5, 3.0)
    max_iterations = 50 + rng.int(0, 50)
    color_offset = rng.range(0, 1)
    return zoom, max_iterations, color_offset


def _candidate(rng, family: FractalFamily) -> FractalParams:
    if family is FractalFamily.JULIA:
        base_x, base_y = JULIA_PRESETS[rng.pick(PRESET_NAMES)]
        cx = base_x + rng.range(-JULIA_JITTER, JULIA_JITTER)
        cy = base_y + rng.range(-JULIA_JITTER, JULIA_JITTER)
    else:
        cx = rng.range(-REGION_SPREAD, REGION_SPREAD)
        cy = rng.range(-REGION_SPREAD, REGION_SPREAD)
    zoom, max_iterations, color_offset = _draw_view(rng)
    return FractalParams(cx, cy, zoom, max_iterations, color_offset, family)


def generate_params(
    rng,
    family=FractalFamily.JULIA,
    preset: Optional[str] = None,
    constant: Optional[Tuple[float, float]] = None,
    skip_quality_check: bool = False,
) -> FractalParams:
    """
    Pick fractal parameters from ``rng``.

    An explicit ``constant`` wins over a named ``preset``; both skip the
    quality filter. Otherwise up to ``MAX_ATTEMPTS`` candidates are probed and
    the first acceptable one is returned, or the last one if none passes.
    With ``skip_quality_check`` the first candidate is returned unprobed.
    """
    family = FractalFamily.parse(family)

    if constant is not None:
        cx, cy = (float(v) for v in constant)
        return FractalParams(cx, cy, *_draw_view(rng), family)

    if preset is not None:
        cx, cy = lookup_preset(preset)
        logger.debug("using preset %s for %s", preset, family.value)
        return FractalParams(cx, cy, *_draw_view(rng), family)

    if skip_quality_check:
        return _candidate(rng, family)

    params = None
    for attempt in range(1, MAX_ATTEMPTS + 1):
        params = _candidate(rng, family)
        entropy = calculate_grid_entropy(rasterize(PROBE_SIZE, params), params.max_iterations)
        if passes_quality(entropy):
            return params
        logger.debug(
            "rejected %s candidate %d/%d: in_set=%.3f unique=%d",
            family.value, attempt, MAX_ATTEMPTS, entropy.in_set_ratio, entropy.unique_values,
        )

    logger.debug("no %s candidate passed the quality filter, keeping the last one", family.value)
    return params
