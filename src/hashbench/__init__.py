"""Separate-chaining hash table benchmark package."""

from . import bench, contracts, core, io

__all__ = [
    "bench",
    "contracts",
    "core",
    "io",
]
