"""Error ADTs for generator seed/state handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class InvalidSeed:
    """Seed is not a 32-bit positive integer or a non-empty sequence of them."""

    value: object
    kind: Literal["InvalidSeed"] = "InvalidSeed"

    def __str__(self) -> str:
        return (
            "invalid option. `seed` option must be a positive integer less than or equal "
            f"to 4294967295 or a non-empty sequence of such integers. Option: `{self.value!r}`."
        )


@dataclass(frozen=True)
class InvalidState:
    """State buffer has the wrong type or an unrecognised layout."""

    reason: str
    kind: Literal["InvalidState"] = "InvalidState"

    def __str__(self) -> str:
        return f"invalid state. {self.reason}"


@dataclass(frozen=True)
class InvalidPrng:
    """Externally supplied uniform source is not callable."""

    value: object
    kind: Literal["InvalidPrng"] = "InvalidPrng"

    def __str__(self) -> str:
        return f"invalid option. `prng` option must be callable. Option: `{self.value!r}`."


@dataclass(frozen=True)
class InvalidCopyFlag:
    """``copy`` option is not a boolean."""

    value: object
    kind: Literal["InvalidCopyFlag"] = "InvalidCopyFlag"

    def __str__(self) -> str:
        return f"invalid option. `copy` option must be a boolean. Option: `{self.value!r}`."


@dataclass(frozen=True)
class StateUnavailable:
    """State access on a manager backed by an external uniform source."""

    kind: Literal["StateUnavailable"] = "StateUnavailable"

    def __str__(self) -> str:
        return "invalid invocation. Cannot access the state of an externally supplied PRNG."


StateError = InvalidSeed | InvalidState | InvalidPrng | InvalidCopyFlag | StateUnavailable
