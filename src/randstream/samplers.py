"""
randstream.samplers
===================
Adapters that turn ``scipy.stats`` distributions into samplers.

A *sampler* is any callable taking a uniform source (a zero-argument
callable returning floats on ``[0, 1)``) and returning one value of the
target distribution.  Streams only ever call ``sampler(uniform)``; the
sampling mathematics lives in SciPy.

The adapters here use inverse-transform sampling: one uniform draw per
value, mapped through the distribution's percent-point function.  Because
exactly one uniform is consumed per value, the generator state after ``n``
values is fully determined by ``n``, which keeps snapshots easy to reason
about.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Annotated, Protocol

from pydantic import BaseModel, ConfigDict, Field
from scipy import stats

from randstream.errors.sampler import InvalidParameters, UnknownDistribution
from randstream.result import Failure, Result, Success
from randstream.state import UniformSource


__all__: list[str] = ["Sampler", "SamplerSpec", "inverse_cdf", "scipy_sampler", "uniform"]

Sampler = Callable[[UniformSource], float]


class FrozenDistribution(Protocol):
    """Anything exposing a percent-point function, e.g. ``scipy.stats.norm(0, 1)``."""

    def ppf(self, q: float) -> float: ...


class SamplerSpec(BaseModel):
    """A scipy.stats distribution name and its positional parameters."""

    name: Annotated[str, Field(min_length=1)]
    params: tuple[float, ...] = ()

    model_config = ConfigDict(frozen=True, extra="forbid")


def uniform(source: UniformSource) -> float:
    """Identity sampler: pass the uniform draw through."""
    return source()


def inverse_cdf(distribution: FrozenDistribution) -> Sampler:
    """Sampler drawing from a frozen scipy distribution via its ``ppf``."""

    def _sample(source: UniformSource) -> float:
        return float(distribution.ppf(source()))

    return _sample


def scipy_sampler(spec: SamplerSpec) -> Result[Sampler, UnknownDistribution | InvalidParameters]:
    """Resolve *spec* against ``scipy.stats`` and freeze it.

    Parameters are validated by evaluating the median: SciPy signals
    out-of-support arguments with ``nan`` rather than raising.
    """
    family = getattr(stats, spec.name, None)
    if not isinstance(family, (stats.rv_continuous, stats.rv_discrete)):
        return Failure(UnknownDistribution(name=spec.name))

    try:
        frozen = family(*spec.params)
        median = float(frozen.ppf(0.5))
    except TypeError as exc:
        return Failure(InvalidParameters(name=spec.name, params=spec.params, message=str(exc)))
    if math.isnan(median):
        return Failure(
            InvalidParameters(
                name=spec.name, params=spec.params, message="parameters outside support"
            )
        )
    return Success(inverse_cdf(frozen))
