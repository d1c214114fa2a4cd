"""
Fracticons: deterministic fractal avatars from any string.

    png = generate_fracticon("user@example.com")
    url = generate_fracticon_data_url("user@example.com", circular=True)

Every entry point funnels into ``render``, which owns one SeededRandom for the
whole generation: fractal parameters are drawn first, the palette second.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from .errors import InvalidOptionError
from .fractal import FractalFamily, FractalParams, generate_params, rasterize
from .hashing import hex_to_bytes, seed_material, sha256, to_seeds
from .palette import ColorPalette, generate_palette
from .png import encode_image, png_data_url
from .prng import SeededRandom
from .svg import grid_to_svg, stylized_svg, wrap_in_circle_mask


@dataclass(frozen=True)
class AvatarOptions:
    size: int = 128
    resolution: int = 64
    circular: bool = False
    family: FractalFamily = FractalFamily.JULIA
    preset: Optional[str] = None
    constant: Optional[Tuple[float, float]] = None
    palette_style: str = "random"
    num_colors: int = 5
    skip_quality_check: bool = False

    def __post_init__(self):
        object.__setattr__(self, "family", FractalFamily.parse(self.family))
        for name in ("size", "resolution", "num_colors"):
            value = getattr(self, name)
            try:
                object.__setattr__(self, name, int(value))
            except (TypeError, ValueError):
                raise InvalidOptionError(f"{name} must be an integer, got {value!r}") from None
        if self.size < 1:
            raise InvalidOptionError(f"size must be positive, got {self.size}")
        if self.resolution < 1:
            raise InvalidOptionError(f"resolution must be positive, got {self.resolution}")
        if self.constant is not None:
            if len(self.constant) != 2:
                raise InvalidOptionError("constant must be a (real, imag) pair")
            object.__setattr__(self, "constant", (float(self.constant[0]), float(self.constant[1])))

    def replace(self, **overrides) -> "AvatarOptions":
        return replace(self, **overrides)


@dataclass(frozen=True)
class FracticonResult:
    png: bytes
    hash: str
    params: FractalParams
    palette: ColorPalette
    grid: List[List[int]] = field(repr=False)
    options: AvatarOptions = field(repr=False)

    @property
    def data_url(self) -> str:
        return png_data_url(self.png)

    def to_svg(self, stylized: bool = False) -> str:
        size = self.options.size
        render_svg = stylized_svg if stylized else grid_to_svg
        svg = render_svg(self.grid, self.params, self.palette, size)
        if self.options.circular:
            svg = wrap_in_circle_mask(svg, size)
        return svg

    def metadata(self) -> dict:
        return {
            "hash": self.hash,
            "descriptor": self.params.descriptor(),
            "params": self.params.to_dict(),
            "palette": self.palette.to_dict(),
            "data_url": self.data_url,
        }


def _options(options: Optional[AvatarOptions], overrides: dict) -> AvatarOptions:
    options = options or AvatarOptions()
    return options.replace(**overrides) if overrides else options


def render(seed: bytes, options: Optional[AvatarOptions] = None) -> FracticonResult:
    options = options or AvatarOptions()
    rng = SeededRandom(to_seeds(seed))
    params = generate_params(
        rng,
        options.family,
        preset=options.preset,
        constant=options.constant,
        skip_quality_check=options.skip_quality_check,
    )
    palette = generate_palette(rng, options.palette_style, options.num_colors)
    grid = rasterize(options.resolution, params)
    png = encode_image(grid, params, palette, options.size, options.circular)
    return FracticonResult(png, seed.hex(), params, palette, grid, options)


def generate_fracticon_with_metadata(value: str, options=None, **overrides) -> FracticonResult:
    return render(seed_material(value), _options(options, overrides))


def generate_fracticon(value: str, options=None, **overrides) -> bytes:
    return generate_fracticon_with_metadata(value, options, **overrides).png


def generate_fracticon_data_url(value: str, options=None, **overrides) -> str:
    return generate_fracticon_with_metadata(value, options, **overrides).data_url


def generate_fracticon_svg(value: str, options=None, stylized: bool = False, **overrides) -> str:
    return generate_fracticon_with_metadata(value, options, **overrides).to_svg(stylized)


def generate_fracticon_from_text(text: str, options=None, **overrides) -> bytes:
    return render(seed_material(text, detect_hex=False), _options(options, overrides)).png


def generate_fracticon_from_hex(hex_digest: str, options=None, **overrides) -> bytes:
    return render(hex_to_bytes(hex_digest), _options(options, overrides)).png


def generate_fracticon_from_bytes(data: bytes, options=None, **overrides) -> bytes:
    return render(bytes(data), _options(options, overrides)).png


def fracticon_hash(value: str) -> str:
    return sha256((value or "").encode("utf-8")).hex()
