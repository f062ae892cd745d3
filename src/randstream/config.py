"""
randstream.config
=================
Validation of raw stream options into an immutable :class:`StreamOptions`
record, plus the defaults applied when a stream is constructed.

Raw options use the public key names (``sep``, ``objectMode``,
``encoding``, ``highWaterMark``, ``iter``, ``siter``, ``prng``, ``seed``,
``state``, ``copy``).  Validation is deliberately shallow and ordered:

* the six typed options are checked in a fixed order and the first
  failure is returned;
* ``prng``, ``seed``, ``state`` and ``copy`` are passed through untouched,
  their validity belongs to :class:`randstream.state.GeneratorStateManager`;
* absent options stay unset, defaulting happens in :meth:`StreamOptions.resolve`;
* unrecognised keys are ignored so callers may pass forward-compatible extras.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Callable, Mapping
from typing import Annotated, Any, Final

from pydantic import BaseModel, ConfigDict, Field

from randstream.errors.config import InvalidOption, InvalidOptions
from randstream.result import Failure, Result, Success


__all__: list[str] = [
    "DEFAULT_HIGH_WATER_MARK",
    "DEFAULT_SEP",
    "DEFAULT_SNAPSHOT_INTERVAL",
    "StreamOptions",
    "StreamSettings",
    "validate_options",
]

# --------------------------------------------------------------------------- #
# Defaults                                                                    #
# --------------------------------------------------------------------------- #

DEFAULT_SEP: Final[str] = "\n"
DEFAULT_HIGH_WATER_MARK: Final[int] = 16  # chunks buffered before production pauses
DEFAULT_SNAPSHOT_INTERVAL: Final[int] = 2**53  # never reached in practice

# --------------------------------------------------------------------------- #
# Predicates                                                                  #
# --------------------------------------------------------------------------- #


def _is_integer(value: object) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_nonnegative_number(value: object) -> bool:
    if not isinstance(value, numbers.Real) or isinstance(value, bool):
        return False
    if isinstance(value, numbers.Integral):
        return int(value) >= 0
    return not math.isnan(value) and value >= 0


def _as_float(value: object) -> float:
    """Integers beyond the float range saturate to infinity."""
    try:
        return float(value)  # type: ignore[arg-type]
    except OverflowError:
        return math.inf


def _is_nonnegative_integer(value: object) -> bool:
    return _is_integer(value) and int(value) >= 0  # type: ignore[call-overload]


def _is_positive_integer(value: object) -> bool:
    return _is_integer(value) and int(value) > 0  # type: ignore[call-overload]


_CHECKS: tuple[tuple[str, Callable[[object], bool], str], ...] = (
    ("sep", lambda v: isinstance(v, str), "a string"),
    ("objectMode", lambda v: isinstance(v, bool), "a boolean"),
    ("encoding", lambda v: v is None or isinstance(v, str), "a string or None"),
    ("highWaterMark", _is_nonnegative_number, "a nonnegative number"),
    ("iter", _is_nonnegative_integer, "a nonnegative integer"),
    ("siter", _is_positive_integer, "a positive integer"),
)

_PASS_THROUGH: tuple[str, ...] = ("prng", "seed", "state", "copy")

# --------------------------------------------------------------------------- #
# Models                                                                      #
# --------------------------------------------------------------------------- #


class StreamOptions(BaseModel):
    """Validated, possibly partial, stream options.

    Attributes left at ``None`` were not supplied unless listed in
    ``model_fields_set``; ``encoding`` is the one option where an explicit
    ``None`` is meaningful (raw ``bytes`` output).
    """

    sep: str | None = None
    object_mode: bool | None = Field(None, alias="objectMode")
    encoding: str | None = None
    high_water_mark: Annotated[float | None, Field(alias="highWaterMark", ge=0)] = None
    iterations: Annotated[int | None, Field(alias="iter", ge=0)] = None
    snapshot_interval: Annotated[int | None, Field(alias="siter", gt=0)] = None
    prng: Any = None
    seed: Any = None
    state: Any = None
    copy_state: Any = Field(None, alias="copy")

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    def resolve(self) -> StreamSettings:
        """Fill every unset option with its default."""
        return StreamSettings(
            sep=DEFAULT_SEP if self.sep is None else self.sep,
            object_mode=bool(self.object_mode),
            encoding=self.encoding,
            high_water_mark=(
                DEFAULT_HIGH_WATER_MARK if self.high_water_mark is None else self.high_water_mark
            ),
            iterations=self.iterations,
            snapshot_interval=(
                DEFAULT_SNAPSHOT_INTERVAL
                if self.snapshot_interval is None
                else self.snapshot_interval
            ),
        )


class StreamSettings(BaseModel):
    """Fully defaulted channel and emission settings of a stream.

    ``iterations`` of ``None`` means production is unbounded.
    """

    sep: str
    object_mode: bool
    encoding: str | None
    high_water_mark: Annotated[float, Field(ge=0)]
    iterations: Annotated[int | None, Field(ge=0)]
    snapshot_interval: Annotated[int, Field(gt=0)]

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def channel_size(self) -> int:
        """``asyncio.Queue`` maxsize for this high-water mark (0 is unbounded)."""
        if math.isinf(self.high_water_mark):
            return 0
        return max(1, math.ceil(self.high_water_mark))


# --------------------------------------------------------------------------- #
# Validation                                                                  #
# --------------------------------------------------------------------------- #


def validate_options(
    options: Mapping[str, object],
) -> Result[StreamOptions, InvalidOptions | InvalidOption]:
    """Validate raw options, stopping at the first offending field.

    Examples
    --------
    >>> validate_options({"objectMode": True, "iter": 10}).unwrap().iterations
    10
    >>> validate_options({"sep": 1})
    Failure(error=InvalidOption(field='sep', value=1, expected='a string', kind='InvalidOption'))
    """
    if not isinstance(options, Mapping):
        return Failure(InvalidOptions(value=options))

    data: dict[str, object] = {}
    for key, check, expected in _CHECKS:
        if key not in options:
            continue
        value = options[key]
        if not check(value):
            return Failure(InvalidOption(field=key, value=value, expected=expected))
        if key in ("iter", "siter"):
            data[key] = int(value)  # type: ignore[call-overload]
        elif key == "highWaterMark":
            data[key] = _as_float(value)
        else:
            data[key] = value

    for key in _PASS_THROUGH:
        if key in options:
            data[key] = options[key]

    return Success(StreamOptions.model_validate(data))
