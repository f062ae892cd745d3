"""
randstream
==========
Backpressure-aware streams of pseudorandom numbers drawn from scipy.stats
distributions, with snapshot/resume of the underlying MT19937 state.
"""

from __future__ import annotations

from randstream.config import StreamOptions, StreamSettings, validate_options
from randstream.errors.stream import (
    GenerationError,
    OptionTypeError,
    RandomStreamError,
    StateReplacementError,
    StreamConfigError,
)
from randstream.result import Failure, Result, Success
from randstream.samplers import Sampler, SamplerSpec, inverse_cdf, scipy_sampler, uniform
from randstream.state import Exclusive, GeneratorStateManager, SeedContext, Shared
from randstream.stream import RandomStream, object_stream, random_stream, stream_factory


__all__ = [
    "Exclusive",
    "Failure",
    "GenerationError",
    "GeneratorStateManager",
    "OptionTypeError",
    "RandomStream",
    "RandomStreamError",
    "Result",
    "Sampler",
    "SamplerSpec",
    "SeedContext",
    "Shared",
    "StateReplacementError",
    "StreamConfigError",
    "StreamOptions",
    "StreamSettings",
    "Success",
    "inverse_cdf",
    "object_stream",
    "random_stream",
    "scipy_sampler",
    "stream_factory",
    "uniform",
    "validate_options",
]
