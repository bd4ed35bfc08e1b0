"""Index strategies ("hash functions") for the chained hash table."""

from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Dict

GOLDEN_RATIO_FRACTION: float = 0.6180339887

_LEGACY_NAMES: Dict[str, str] = {
    "module": "modulo",
    "multiplication": "multiplicative",
}


class HashFunction(str, Enum):
    """Closed set of slot-index strategies, fixed per table."""

    MODULO = "modulo"
    MULTIPLICATIVE = "multiplicative"
    FOLDING = "folding"

    @classmethod
    def parse(cls, name: "str | HashFunction") -> "HashFunction":
        if isinstance(name, HashFunction):
            return name
        normalized = str(name).strip().lower()
        normalized = _LEGACY_NAMES.get(normalized, normalized)
        for member in cls:
            if member.value == normalized:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown hash function {name!r} (expected one of: {choices})")

    def slot_index(self, key: int, capacity: int) -> int:
        return index_for(self, key, capacity)


def _check(key: int, capacity: int) -> None:
    if capacity <= 0:
        raise ValueError(f"capacity must be > 0 (got {capacity})")
    if key < 0:
        raise ValueError(f"key must be >= 0 (got {key})")


def modulo_index(key: int, capacity: int) -> int:
    _check(key, capacity)
    return key % capacity


def multiplicative_index(key: int, capacity: int) -> int:
    """Fibonacci hashing: scale the fractional part of ``key * (1/phi)``."""

    _check(key, capacity)
    frac = math.fmod(key * GOLDEN_RATIO_FRACTION, 1.0)
    return int(capacity * frac)


def folding_index(key: int, capacity: int) -> int:
    """Sum decimal digit chunks of ``key`` (chunk = len // 3, min 1) mod capacity.

    ``123456789`` folds as ``123 + 456 + 789``; a trailing chunk may be shorter
    than the others (``12345`` folds as ``1 + 2 + 3 + 4 + 5``).
    """

    _check(key, capacity)
    digits = str(key)
    chunk_size = max(1, len(digits) // 3)
    total = 0
    for start in range(0, len(digits), chunk_size):
        total += int(digits[start : start + chunk_size])
    return total % capacity


_DISPATCH: Dict[HashFunction, Callable[[int, int], int]] = {
    HashFunction.MODULO: modulo_index,
    HashFunction.MULTIPLICATIVE: multiplicative_index,
    HashFunction.FOLDING: folding_index,
}


def index_for(strategy: HashFunction, key: int, capacity: int) -> int:
    return _DISPATCH[strategy](key, capacity)


__all__ = [
    "GOLDEN_RATIO_FRACTION",
    "HashFunction",
    "folding_index",
    "index_for",
    "modulo_index",
    "multiplicative_index",
]
