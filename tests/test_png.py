import io
import struct
import zlib

import pytest
from PIL import Image

from fracticons.kernel.errors import InvalidOptionError
from fracticons.kernel.fractal import FractalFamily, FractalParams
from fracticons.kernel.palette import RGB, ColorPalette, color_for_iteration
from fracticons.kernel.png import (
    PNG_SIGNATURE,
    adler32,
    crc32,
    deflate_stored,
    encode_image,
    encode_png,
    grid_to_pixels,
    png_data_url,
)

GRID = [
    [0, 10, 20],
    [10, 50, 10],
    [20, 10, 0],
]
PARAMS = FractalParams(-0.7, 0.27, 2.0, 50, 0.0, FractalFamily.JULIA)
PALETTE = ColorPalette((RGB(255, 0, 0), RGB(0, 255, 0), RGB(0, 0, 255)), RGB(255, 255, 255))


def _chunks(png):
    pos = len(PNG_SIGNATURE)
    while pos < len(png):
        (length,) = struct.unpack(">I", png[pos:pos + 4])
        kind = png[pos + 4:pos + 8]
        data = png[pos + 8:pos + 8 + length]
        (crc,) = struct.unpack(">I", png[pos + 8 + length:pos + 12 + length])
        yield kind, data, crc
        pos += 12 + length


@pytest.mark.parametrize("data", [b"", b"IEND", b"a" * 1000, bytes(range(256)) * 300])
def test_checksums_match_zlib(data):
    assert crc32(data) == zlib.crc32(data) & 0xFFFFFFFF
    assert adler32(data) == zlib.adler32(data) & 0xFFFFFFFF


@pytest.mark.parametrize("length", [0, 10, 65535, 65536, 200000])
def test_stored_deflate_round_trips(length):
    data = bytes((i * 7) & 0xFF for i in range(length))
    stream = deflate_stored(data)
    assert stream[:2] == b"\x78\x01"
    assert zlib.decompress(stream) == data


def test_stored_blocks_are_capped():
    stream = deflate_stored(b"\x00" * 70000)
    # first block is not final and holds exactly 65535 bytes
    assert stream[2] == 0
    assert struct.unpack("<HH", stream[3:7]) == (65535, 0)


def test_chunk_layout():
    png = encode_image(GRID, PARAMS, PALETTE, size=16)
    assert png[:8] == b"\x89PNG\r\n\x1a\n"
    chunks = list(_chunks(png))
    assert [kind for kind, _, _ in chunks] == [b"IHDR", b"IDAT", b"IEND"]
    for kind, data, crc in chunks:
        assert crc == zlib.crc32(kind + data) & 0xFFFFFFFF
    assert chunks[0][1] == struct.pack(">IIBBBBB", 16, 16, 8, 6, 0, 0, 0)
    assert chunks[2][1] == b""

    raw = zlib.decompress(chunks[1][1])
    assert len(raw) == 16 * (16 * 4 + 1)
    assert all(raw[row * 65] == 0 for row in range(16))


def test_decodes_with_reference_reader():
    png = encode_image(GRID, PARAMS, PALETTE, size=6)
    image = Image.open(io.BytesIO(png))
    assert image.size == (6, 6)
    assert image.mode == "RGBA"
    for y in range(6):
        for x in range(6):
            c = color_for_iteration(GRID[y // 2][x // 2], 50, PALETTE, 0.0)
            assert image.getpixel((x, y)) == (c.r, c.g, c.b, 255)


def test_circular_mask_makes_corners_transparent():
    png = encode_image(GRID, PARAMS, PALETTE, size=32, circular=True)
    image = Image.open(io.BytesIO(png)).convert("RGBA")
    assert image.getpixel((0, 0)) == (0, 0, 0, 0)
    assert image.getpixel((31, 31)) == (0, 0, 0, 0)
    assert image.getpixel((16, 16))[3] == 255
    assert png != encode_image(GRID, PARAMS, PALETTE, size=32)


def test_larger_output_is_larger():
    small = encode_image(GRID, PARAMS, PALETTE, size=32)
    large = encode_image(GRID, PARAMS, PALETTE, size=128)
    assert len(large) > len(small)


def test_deterministic():
    assert encode_image(GRID, PARAMS, PALETTE, size=64) == encode_image(GRID, PARAMS, PALETTE, size=64)


def test_large_image_spans_several_stored_blocks():
    png = encode_image(GRID, PARAMS, PALETTE, size=200)
    image = Image.open(io.BytesIO(png))
    image.load()
    assert image.size == (200, 200)


def test_pixel_buffer_validation():
    with pytest.raises(InvalidOptionError):
        encode_png(b"\x00" * 7, 1, 2)
    with pytest.raises(InvalidOptionError):
        grid_to_pixels(GRID, PARAMS, PALETTE, size=0)


def test_data_url():
    url = png_data_url(encode_image(GRID, PARAMS, PALETTE, size=8))
    assert url.startswith("data:image/png;base64,iVBORw0KGgo")
