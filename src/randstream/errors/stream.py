"""Error ADTs and boundary exceptions for random streams.

Inside the package every failure travels as a frozen ADT wrapped in a
``Failure``.  The exceptions below exist only where a ``Result`` cannot be
returned: the raising constructors, the ``state`` property setter, and the
async iterator protocol.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from randstream.errors.config import InvalidOption, InvalidOptions
from randstream.errors.state import StateError


@dataclass(frozen=True)
class UnknownEncoding:
    """``encoding`` is not a text codec known to Python."""

    encoding: str
    kind: Literal["UnknownEncoding"] = "UnknownEncoding"

    def __str__(self) -> str:
        return f"invalid option. `encoding` must name a text codec. Option: `{self.encoding!r}`."


@dataclass(frozen=True)
class GenerationFailed:
    """Sampler, uniform source, or state listener raised during production."""

    message: str
    produced: int
    kind: Literal["GenerationFailed"] = "GenerationFailed"

    def __str__(self) -> str:
        return f"generation failed after {self.produced} values: {self.message}"


StreamError = InvalidOptions | InvalidOption | UnknownEncoding | StateError


class RandomStreamError(Exception):
    """Base exception for all randstream errors."""

    pass


class OptionTypeError(RandomStreamError, TypeError):
    """Raised when an option fails type validation."""

    def __init__(self, error: InvalidOptions | InvalidOption) -> None:
        self.error = error
        super().__init__(str(error))


class StreamConfigError(RandomStreamError, ValueError):
    """Raised when seed, state, prng or encoding cannot be used."""

    def __init__(self, error: UnknownEncoding | StateError) -> None:
        self.error = error
        super().__init__(str(error))


class StateReplacementError(RandomStreamError, ValueError):
    """Raised by the ``state`` property setter when replacement fails."""

    def __init__(self, error: StateError) -> None:
        self.error = error
        super().__init__(str(error))


class GenerationError(RandomStreamError):
    """Raised to the consumer when production terminated with an error."""

    def __init__(self, error: GenerationFailed) -> None:
        self.error = error
        super().__init__(str(error))
