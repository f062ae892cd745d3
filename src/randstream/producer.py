"""Turn one uniform draw into one emitted chunk."""

from __future__ import annotations

import math
import numbers

from randstream.samplers import Sampler
from randstream.state import UniformSource


__all__: list[str] = ["Chunk", "ChunkProducer", "format_number"]

Chunk = float | str | bytes


def format_number(value: float) -> str:
    """Shortest text form of *value*; integral values print without ``.0``."""
    if isinstance(value, numbers.Integral):
        return str(int(value))
    number = float(value)
    if math.isfinite(number) and number.is_integer():
        return str(int(number))
    return repr(number)


class ChunkProducer:
    """Draw, sample and format a single value per call.

    In object mode the sampled number is returned as is.  Otherwise the
    number is rendered as text, prefixed with ``sep`` for every value after
    the first, and encoded as UTF-8 ``bytes``; with an ``encoding`` the bytes
    are decoded back into ``str`` using that codec.  Concatenating the
    chunks therefore yields the values joined by ``sep``.
    """

    def __init__(
        self,
        uniform: UniformSource,
        sampler: Sampler,
        *,
        object_mode: bool = False,
        sep: str = "\n",
        encoding: str | None = None,
    ) -> None:
        self._uniform = uniform
        self._sampler = sampler
        self._object_mode = object_mode
        self._sep = sep
        self._encoding = encoding
        self._first = True

    def produce(self) -> Chunk:
        value = self._sampler(self._uniform)
        if self._object_mode:
            return value
        text = format_number(value)
        if self._first:
            self._first = False
        else:
            text = self._sep + text
        fragment = text.encode("utf-8")
        if self._encoding is None:
            return fragment
        return fragment.decode(self._encoding)
