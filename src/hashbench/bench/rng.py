"""Deterministic key source compatible with ``java.util.Random``.

Benchmarks draw keys with the same 48-bit linear congruential generator as the
reference runs, so collision counts line up for a given seed.
"""

from __future__ import annotations

from collections.abc import Iterator

_MULTIPLIER = 0x5DEECE66D
_ADDEND = 0xB
_MASK = (1 << 48) - 1
_INT_BIAS = 1 << 31
MAX_BOUND = _INT_BIAS - 1


class JavaRandom:
    """48-bit LCG with ``nextInt`` semantics of ``java.util.Random``."""

    __slots__ = ("_seed",)

    def __init__(self, seed: int) -> None:
        self._seed = (seed ^ _MULTIPLIER) & _MASK

    def next_bits(self, bits: int) -> int:
        """Return the next ``bits`` high-order bits as a signed 32-bit int."""

        if not 1 <= bits <= 32:
            raise ValueError("bits must be within [1, 32]")
        self._seed = (self._seed * _MULTIPLIER + _ADDEND) & _MASK
        value = self._seed >> (48 - bits)
        if value >= _INT_BIAS:
            value -= 1 << 32
        return value

    def next_int(self, bound: int | None = None) -> int:
        if bound is None:
            return self.next_bits(32)
        if bound <= 0:
            raise ValueError("bound must be positive")
        if bound > MAX_BOUND:
            raise ValueError(f"bound must be <= {MAX_BOUND} (got {bound})")
        if bound & (bound - 1) == 0:
            return (bound * self.next_bits(31)) >> 31
        while True:
            bits = self.next_bits(31)
            value = bits % bound
            # Reject draws from the truncated top range (int overflow in Java).
            if bits - value + (bound - 1) < _INT_BIAS:
                return value


def keys(seed: int, count: int, numbers_size: int) -> Iterator[int]:
    """Yield ``count`` keys in ``[0, numbers_size)`` for ``seed``."""

    rng = JavaRandom(seed)
    for _ in range(count):
        yield rng.next_int(numbers_size)


__all__ = ["MAX_BOUND", "JavaRandom", "keys"]
