"""
SHA-256 (FIPS 180-4) and seed derivation.

Written out by hand so the digest never depends on the host's crypto build;
tests check it against hashlib.
"""

import string

from .errors import InvalidHexError

MASK32 = 0xFFFFFFFF

K = (
    0x428a2f98, 0x71374491, 0xb5c0fbcf, 0xe9b5dba5, 0x3956c25b, 0x59f111f1, 0x923f82a4, 0xab1c5ed5,
    0xd807aa98, 0x12835b01, 0x243185be, 0x550c7dc3, 0x72be5d74, 0x80deb1fe, 0x9bdc06a7, 0xc19bf174,
    0xe49b69c1, 0xefbe4786, 0x0fc19dc6, 0x240ca1cc, 0x2de92c6f, 0x4a7484aa, 0x5cb0a9dc, 0x76f988da,
    0x983e5152, 0xa831c66d, 0xb00327c8, 0xbf597fc7, 0xc6e00bf3, 0xd5a79147, 0x06ca6351, 0x14292967,
    0x27b70a85, 0x2e1b2138, 0x4d2c6dfc, 0x53380d13, 0x650a7354, 0x766a0abb, 0x81c2c92e, 0x92722c85,
    0xa2bfe8a1, 0xa81a664b, 0xc24b8b70, 0xc76c51a3, 0xd192e819, 0xd6990624, 0xf40e3585, 0x106aa070,
    0x19a4c116, 0x1e376c08, 0x2748774c, 0x34b0bcb5, 0x391c0cb3, 0x4ed8aa4a, 0x5b9cca4f, 0x682e6ff3,
    0x748f82ee, 0x78a5636f, 0x84c87814, 0x8cc70208, 0x90befffa, 0xa4506ceb, 0xbef9a3f7, 0xc67178f2,
)

H0 = (
    0x6a09e667, 0xbb67ae85, 0x3c6ef372, 0xa54ff53a,
    0x510e527f, 0x9b05688c, 0x1f83d9ab, 0x5be0cd19,
)

HEX_DIGITS = frozenset(string.hexdigits)
MIN_HEX_ID_LENGTH = 16


def _rotr(value: int, amount: int) -> int:
    return ((value >> amount) | (value << (32 - amount))) & MASK32


def _pad(message: bytes) -> bytes:
    bit_length = (len(message) * 8) & 0xFFFFFFFFFFFFFFFF
    padding = b"\x80" + b"\x00" * ((55 - len(message)) % 64)
    return message + padding + bit_length.to_bytes(8, "big")


def _compress(block: bytes, h: list) -> None:
    w = [int.from_bytes(block[i:i + 4], "big") for i in range(0, 64, 4)]
    for i in range(16, 64):
        x, y = w[i - 15], w[i - 2]
        s0 = _rotr(x, 7) ^ _rotr(x, 18) ^ (x >> 3)
        s1 = _rotr(y, 17) ^ _rotr(y, 19) ^ (y >> 10)
        w.append((w[i - 16] + s0 + w[i - 7] + s1) & MASK32)

    a, b, c, d, e, f, g, hh = h
    for i in range(64):
        big_s1 = _rotr(e, 6) ^ _rotr(e, 11) ^ _rotr(e, 25)
        ch = (e & f) ^ (~e & g)
        temp1 = (hh + big_s1 + ch + K[i] + w[i]) & MASK32
        big_s0 = _rotr(a, 2) ^ _rotr(a, 13) ^ _rotr(a, 22)
        maj = (a & b) ^ (a & c) ^ (b & c)
        temp2 = (big_s0 + maj) & MASK32

        hh = g
        g = f
        f = e
        e = (d + temp1) & MASK32
        d = c
        c = b
        b = a
        a = (temp1 + temp2) & MASK32

    for i, v in enumerate((a, b, c, d, e, f, g, hh)):
        h[i] = (h[i] + v) & MASK32


def sha256(data: bytes) -> bytes:
    """Return the 32-byte SHA-256 digest of ``data``."""
    padded = _pad(bytes(data))
    h = list(H0)
    for i in range(0, len(padded), 64):
        _compress(padded[i:i + 64], h)
    return b"".join(v.to_bytes(4, "big") for v in h)


def sha256_hex(text: str) -> str:
    return sha256((text or "").encode("utf-8")).hex()


def looks_like_hex_digest(value: str) -> bool:
    return (
        len(value) >= MIN_HEX_ID_LENGTH
        and len(value) % 2 == 0
        and all(ch in HEX_DIGITS for ch in value)
    )


def hex_to_bytes(value: str) -> bytes:
    value = (value or "").strip()
    if len(value) % 2:
        raise InvalidHexError(f"hex digest has odd length {len(value)}")
    bad = [ch for ch in value if ch not in HEX_DIGITS]
    if bad:
        raise InvalidHexError(f"non-hex character {bad[0]!r} in digest")
    return bytes.fromhex(value)


def seed_material(value: str, detect_hex: bool = True) -> bytes:
    """
    Bytes that seed generation for a caller-supplied string.

    Strings that already look like a hex digest are decoded as-is, anything
    else is UTF-8 encoded and hashed.
    """
    value = value or ""
    if detect_hex and looks_like_hex_digest(value):
        return bytes.fromhex(value)
    return sha256(value.encode("utf-8"))


def to_seeds(data: bytes) -> list:
    """Split ``data`` into big-endian uint32 words; a trailing partial word is dropped."""
    data = bytes(data)
    usable = len(data) - len(data) % 4
    return [int.from_bytes(data[i:i + 4], "big") for i in range(0, usable, 4)]
