"""Error contracts and bundled schemas for hashbench."""

from .error import (
    BadInputError,
    EnvelopeError,
    ErrorEnvelope,
    Exit,
    InvariantError,
    IOErrorEnvelope,
    die,
    guard_cli,
)

__all__ = [
    "Exit",
    "ErrorEnvelope",
    "EnvelopeError",
    "BadInputError",
    "InvariantError",
    "IOErrorEnvelope",
    "guard_cli",
    "die",
]
