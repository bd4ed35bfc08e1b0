"""Error envelope helpers and exit codes for the hashbench CLI."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from functools import wraps
from typing import Any, NoReturn, TypeVar

logger = logging.getLogger("hashbench")
T = TypeVar("T")


class Exit(IntEnum):
    """Stable exit codes shared across the CLI."""

    OK = 0
    BAD_INPUT = 2
    INVARIANT = 3
    POLICY = 4
    IO = 5


@dataclass(slots=True)
class ErrorEnvelope:
    """Machine-readable error contract for CLI failures."""

    error: str
    detail: str
    hint: str | None = None

    def to_json(self) -> str:
        payload = {"error": self.error, "detail": self.detail}
        if self.hint:
            payload["hint"] = self.hint
        return json.dumps(payload, ensure_ascii=False)


def die(code: Exit, kind: str, detail: str, hint: str | None = None) -> NoReturn:
    """Write the JSON error envelope to stderr and exit with ``code``."""

    env = ErrorEnvelope(error=kind, detail=detail, hint=hint)
    sys.stderr.write(env.to_json() + "\n")
    try:
        sys.stderr.flush()
    finally:
        sys.exit(int(code))


class EnvelopeError(Exception):
    """Base exception that carries an optional hint for the error envelope."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class BadInputError(EnvelopeError):
    """Raised for malformed user input (config values, flags, summary files)."""


class InvariantError(EnvelopeError):
    """Raised when a benchmark trial observes an impossible state (e.g. a lost key)."""


class IOErrorEnvelope(EnvelopeError):  # noqa: N818 - mirrors the Exit.IO label
    """Raised for IO errors that should map to Exit.IO."""


_EXCEPTION_ORDER: tuple[tuple[type[EnvelopeError], Exit, str], ...] = (
    (BadInputError, Exit.BAD_INPUT, "BadInput"),
    (InvariantError, Exit.INVARIANT, "Invariant"),
    (IOErrorEnvelope, Exit.IO, "IO"),
)


def guard_cli(fn: Callable[..., T]) -> Callable[..., T]:
    """Decorate a CLI handler to enforce exit codes and error envelopes."""

    @wraps(fn)
    def _wrapped(*args: Any, **kwargs: Any) -> T:
        try:
            return fn(*args, **kwargs)
        except EnvelopeError as exc:
            for exc_type, exit_code, label in _EXCEPTION_ORDER:
                if isinstance(exc, exc_type):
                    die(exit_code, label, str(exc), hint=exc.hint)
            die(Exit.POLICY, "UnhandledEnvelope", str(exc), hint=exc.hint)
        except FileNotFoundError as exc:
            die(Exit.IO, "FileNotFound", str(exc))
        except OSError as exc:
            die(Exit.IO, "IO", f"{type(exc).__name__}: {exc}")
        except Exception as exc:  # pragma: no cover - last-resort envelope
            logger.exception("Unhandled CLI exception")
            die(Exit.POLICY, "Unhandled", f"{type(exc).__name__}: {exc}")

    return _wrapped


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
