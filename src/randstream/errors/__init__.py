"""randstream error ADTs and exceptions."""

from randstream.errors.config import InvalidOption, InvalidOptions, OptionError
from randstream.errors.sampler import InvalidParameters, SamplerError, UnknownDistribution
from randstream.errors.state import (
    InvalidCopyFlag,
    InvalidPrng,
    InvalidSeed,
    InvalidState,
    StateError,
    StateUnavailable,
)
from randstream.errors.stream import (
    GenerationError,
    GenerationFailed,
    OptionTypeError,
    RandomStreamError,
    StateReplacementError,
    StreamConfigError,
    StreamError,
    UnknownEncoding,
)

__all__ = [
    "InvalidOption",
    "InvalidOptions",
    "OptionError",
    "InvalidParameters",
    "SamplerError",
    "UnknownDistribution",
    "InvalidCopyFlag",
    "InvalidPrng",
    "InvalidSeed",
    "InvalidState",
    "StateError",
    "StateUnavailable",
    "GenerationError",
    "GenerationFailed",
    "OptionTypeError",
    "RandomStreamError",
    "StateReplacementError",
    "StreamConfigError",
    "StreamError",
    "UnknownEncoding",
]
