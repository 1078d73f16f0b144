"""Mulberry32, bit-for-bit identical to the browser client's generator."""

MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_DIVISOR = 4294967296  # 2**32


class Mulberry32:
    """Reproducible [0, 1) stream seeded from a 32-bit unsigned integer.

    Every intermediate is masked back to 32 bits so the results match the
    client's ``Math.imul`` / ``>>>`` arithmetic exactly.
    """

    def __init__(self, seed: int):
        self.state = int(seed) & MASK32
        self.calls = 0

    def next_u32(self) -> int:
        self.state = (self.state + _INCREMENT) & MASK32
        a = self.state
        t = ((a ^ (a >> 15)) * (1 | a)) & MASK32
        t = ((t + (((t ^ (t >> 7)) * (61 | t)) & MASK32)) & MASK32) ^ t
        self.calls += 1
        return (t ^ (t >> 14)) & MASK32

    def next(self) -> float:
        return self.next_u32() / _DIVISOR

    def randint(self, lo: int, hi: int) -> int:
        # inclusive, one draw
        return int(self.next() * (hi - lo + 1)) + lo
