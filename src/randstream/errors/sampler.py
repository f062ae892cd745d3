"""Error ADTs for building samplers from scipy.stats distributions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class UnknownDistribution:
    """Name does not resolve to a scipy.stats continuous/discrete distribution."""

    name: str
    kind: Literal["UnknownDistribution"] = "UnknownDistribution"

    def __str__(self) -> str:
        return f"unknown distribution: `{self.name}`."


@dataclass(frozen=True)
class InvalidParameters:
    """Distribution rejected the supplied parameters."""

    name: str
    params: tuple[float, ...]
    message: str
    kind: Literal["InvalidParameters"] = "InvalidParameters"

    def __str__(self) -> str:
        return f"invalid parameters for `{self.name}` {self.params}: {self.message}"


SamplerError = UnknownDistribution | InvalidParameters
