"""
Seeded xorshift128+ generator over two 32-bit words.

The exact draw sequence is part of the output contract: every derived helper
consumes exactly one ``next()`` draw, so callers sharing one instance always
see the same interleaving.
"""

import math

MASK32 = 0xFFFFFFFF
TWO_32 = 4294967296.0

FALLBACK_STATE0 = 0x12345678
FALLBACK_STATE1 = 0x87654321
WARMUP_DRAWS = 10


class SeededRandom:
    def __init__(self, seeds):
        seeds = [int(s) & MASK32 for s in seeds]
        # an all-zero state is a fixed point of the generator
        self.state0 = seeds[0] if len(seeds) > 0 and seeds[0] else FALLBACK_STATE0
        self.state1 = seeds[1] if len(seeds) > 1 and seeds[1] else FALLBACK_STATE1

        for extra in seeds[2:]:
            self.state0 ^= extra
            self.next()

        for _ in range(WARMUP_DRAWS):
            self.next()

    def next(self) -> float:
        """Next float in [0, 1)."""
        s1 = self.state0
        s0 = self.state1

        self.state0 = s0
        s1 ^= (s1 << 23) & MASK32
        s1 ^= s1 >> 17
        s1 ^= s0
        s1 ^= s0 >> 26
        self.state1 = s1

        return ((self.state0 + self.state1) & MASK32) / TWO_32

    def range(self, lo: float, hi: float) -> float:
        return lo + self.next() * (hi - lo)

    def int(self, lo, hi):
        """Integer in [lo, hi)."""
        return math.floor(self.range(lo, hi))

    def pick(self, seq):
        return seq[self.int(0, len(seq))]

    def bool(self, probability=0.5):
        return self.next() < probability
