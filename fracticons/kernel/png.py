"""
Minimal RGBA PNG encoder.

One colour mode (8-bit RGBA), filter type 0 on every row and a zlib stream
made of stored (uncompressed) DEFLATE blocks. CRC-32 and Adler-32 are
computed here rather than borrowed from zlib.
"""

import base64
import struct

from .errors import InvalidOptionError
from .palette import color_for_iteration

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
ZLIB_HEADER = b"\x78\x01"
MAX_STORED_BLOCK = 65535
ADLER_MOD = 65521


def _crc_table():
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            c = (c >> 1) ^ 0xEDB88320 if c & 1 else c >> 1
        table.append(c)
    return tuple(table)


CRC_TABLE = _crc_table()


def crc32(data: bytes, crc: int = 0) -> int:
    crc ^= 0xFFFFFFFF
    for byte in data:
        crc = CRC_TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ 0xFFFFFFFF


def adler32(data: bytes) -> int:
    a, b = 1, 0
    # reduce once per 5552-byte run, as zlib does
    for start in range(0, len(data), 5552):
        for byte in data[start:start + 5552]:
            a += byte
            b += a
        a %= ADLER_MOD
        b %= ADLER_MOD
    return (b << 16) | a


def deflate_stored(data: bytes) -> bytes:
    """Wrap ``data`` in a zlib stream of stored DEFLATE blocks."""
    out = bytearray(ZLIB_HEADER)
    blocks = range(0, len(data), MAX_STORED_BLOCK) if data else [0]
    last = len(data) - 1 if data else 0
    for start in blocks:
        block = data[start:start + MAX_STORED_BLOCK]
        final = 1 if start + MAX_STORED_BLOCK > last else 0
        out.append(final)
        out += struct.pack("<HH", len(block), len(block) ^ 0xFFFF)
        out += block
    out += struct.pack(">I", adler32(data))
    return bytes(out)


def make_chunk(chunk_type: bytes, data: bytes) -> bytes:
    body = chunk_type + data
    return struct.pack(">I", len(data)) + body + struct.pack(">I", crc32(body))


def encode_png(pixels: bytes, width: int, height: int) -> bytes:
    """Encode tightly packed RGBA ``pixels`` as a PNG."""
    stride = width * 4
    if len(pixels) != stride * height:
        raise InvalidOptionError(f"expected {stride * height} RGBA bytes, got {len(pixels)}")

    raw = bytearray()
    for y in range(height):
        raw.append(0)
        raw += pixels[y * stride:(y + 1) * stride]

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    return b"".join((
        PNG_SIGNATURE,
        make_chunk(b"IHDR", ihdr),
        make_chunk(b"IDAT", deflate_stored(bytes(raw))),
        make_chunk(b"IEND", b""),
    ))


def grid_to_pixels(grid, params, palette, size: int = 128, circular: bool = False) -> bytearray:
    """
    Nearest-neighbour upscale of ``grid`` to ``size`` x ``size`` RGBA.

    With ``circular`` every pixel whose centre falls outside the inscribed
    circle is fully transparent black.
    """
    size = int(size)
    if size < 1:
        raise InvalidOptionError(f"output size must be positive, got {size}")
    grid_size = len(grid)
    if grid_size < 1:
        raise InvalidOptionError("iteration grid is empty")

    pixels = bytearray(size * size * 4)
    center = size / 2
    radius_sq = (size / 2) ** 2
    cache = {}

    for y in range(size):
        gy = (y * grid_size) // size
        dy = y - center + 0.5
        row = grid[gy]
        for x in range(size):
            if circular:
                dx = x - center + 0.5
                if dx * dx + dy * dy > radius_sq:
                    continue
            iteration = row[(x * grid_size) // size]
            rgba = cache.get(iteration)
            if rgba is None:
                color = color_for_iteration(iteration, params.max_iterations, palette, params.color_offset)
                rgba = cache[iteration] = bytes((color.r, color.g, color.b, 255))
            idx = (y * size + x) * 4
            pixels[idx:idx + 4] = rgba
    return pixels


def encode_image(grid, params, palette, size: int = 128, circular: bool = False) -> bytes:
    return encode_png(bytes(grid_to_pixels(grid, params, palette, size, circular)), size, size)


def png_data_url(png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")
