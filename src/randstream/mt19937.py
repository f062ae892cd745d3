"""
randstream.mt19937
==================
Layout of the MT19937 state buffer and a stepping engine that advances such
a buffer *in place*.

The generator itself is NumPy's :class:`numpy.random.MT19937`; this module
only owns the flat ``uint32`` representation that streams expose, snapshot
and share:

=========  ============================================
index      content
=========  ============================================
0          layout version (``STATE_ARRAY_VERSION``)
1          number of sections (``NUM_STATE_SECTIONS``)
2          key length (624)
3 .. 626   MT19937 key
627        length of the position section (1)
628        position within the key
629        seed length ``n``
630 ..     ``n`` seed words
=========  ============================================

Because the seed travels inside the buffer, restoring a snapshot also
restores the seed that produced it.
"""

from __future__ import annotations

import numbers
from collections.abc import Sequence
from typing import Final

import numpy as np
from numpy.typing import NDArray

from randstream.errors.state import InvalidSeed, InvalidState
from randstream.result import Failure, Result, Success


__all__: list[str] = [
    "KEY_LENGTH",
    "MAX_SEED",
    "Mt19937Engine",
    "SeedLike",
    "build_state",
    "check_seed",
    "check_state",
    "seed_length",
    "seed_words",
]

# --------------------------------------------------------------------------- #
# Constants                                                                   #
# --------------------------------------------------------------------------- #

STATE_ARRAY_VERSION: Final[int] = 1
NUM_STATE_SECTIONS: Final[int] = 3
KEY_LENGTH: Final[int] = 624
MAX_SEED: Final[int] = 2**32 - 1

_VERSION_IDX: Final[int] = 0
_SECTIONS_IDX: Final[int] = 1
_KEY_LENGTH_IDX: Final[int] = 2
_KEY: Final[slice] = slice(3, 3 + KEY_LENGTH)
_POS_LENGTH_IDX: Final[int] = 3 + KEY_LENGTH
_POS_IDX: Final[int] = _POS_LENGTH_IDX + 1
_SEED_LENGTH_IDX: Final[int] = _POS_IDX + 1
_SEED_OFFSET: Final[int] = _SEED_LENGTH_IDX + 1

SeedLike = int | Sequence[int] | NDArray[np.integer]

# --------------------------------------------------------------------------- #
# Seeds                                                                       #
# --------------------------------------------------------------------------- #


def _valid_word(value: object) -> bool:
    return (
        isinstance(value, numbers.Integral)
        and not isinstance(value, (bool, np.bool_))
        and 1 <= int(value) <= MAX_SEED
    )


def check_seed(seed: object) -> Result[int | list[int], InvalidSeed]:
    """Normalise *seed* to an ``int`` or a non-empty ``list[int]``.

    The two forms seed the generator differently (``init_genrand`` versus
    ``init_by_array``), so the distinction is preserved.
    """
    if isinstance(seed, (str, bytes)):
        return Failure(InvalidSeed(value=seed))
    if _valid_word(seed):
        return Success(int(seed))  # type: ignore[call-overload]
    if isinstance(seed, (Sequence, np.ndarray)):
        words = list(np.ravel(seed)) if isinstance(seed, np.ndarray) else list(seed)
        if words and all(_valid_word(word) for word in words):
            return Success([int(word) for word in words])
    return Failure(InvalidSeed(value=seed))


def build_state(seed: int | list[int]) -> NDArray[np.uint32]:
    """Derive a fresh state buffer from a normalised seed."""
    # A list (never an ndarray) keeps NumPy on init_by_array for 1-word seeds.
    _, key, pos, *_ = np.random.RandomState(seed).get_state(legacy=True)
    words = np.asarray([seed] if isinstance(seed, int) else seed, dtype=np.uint32)

    state = np.empty(_SEED_OFFSET + words.size, dtype=np.uint32)
    state[_VERSION_IDX] = STATE_ARRAY_VERSION
    state[_SECTIONS_IDX] = NUM_STATE_SECTIONS
    state[_KEY_LENGTH_IDX] = KEY_LENGTH
    state[_KEY] = key
    state[_POS_LENGTH_IDX] = 1
    state[_POS_IDX] = pos
    state[_SEED_LENGTH_IDX] = words.size
    state[_SEED_OFFSET:] = words
    return state


# --------------------------------------------------------------------------- #
# State buffers                                                               #
# --------------------------------------------------------------------------- #


def check_state(buffer: object) -> Result[NDArray[np.uint32], InvalidState]:
    """Return *buffer* unchanged if it is a well-formed state buffer."""
    if not isinstance(buffer, np.ndarray) or buffer.dtype != np.uint32 or buffer.ndim != 1:
        return Failure(InvalidState(reason="State must be a one-dimensional uint32 ndarray."))
    if buffer.size <= _SEED_OFFSET:
        return Failure(
            InvalidState(reason=f"State length must exceed {_SEED_OFFSET}. Length: {buffer.size}.")
        )
    if buffer[_VERSION_IDX] != STATE_ARRAY_VERSION:
        return Failure(
            InvalidState(reason=f"Unsupported state version: {int(buffer[_VERSION_IDX])}.")
        )
    if (
        buffer[_SECTIONS_IDX] != NUM_STATE_SECTIONS
        or buffer[_KEY_LENGTH_IDX] != KEY_LENGTH
        or buffer[_POS_LENGTH_IDX] != 1
    ):
        return Failure(InvalidState(reason="Unrecognised state section layout."))
    if buffer[_POS_IDX] > KEY_LENGTH:
        return Failure(InvalidState(reason=f"Position out of range: {int(buffer[_POS_IDX])}."))
    if buffer[_SEED_LENGTH_IDX] != buffer.size - _SEED_OFFSET:
        return Failure(InvalidState(reason="Seed length does not match state length."))
    return Success(buffer)


def seed_words(buffer: NDArray[np.uint32]) -> NDArray[np.uint32]:
    """Copy of the seed section of *buffer*."""
    return buffer[_SEED_OFFSET:].copy()


def seed_length(buffer: NDArray[np.uint32]) -> int:
    return int(buffer[_SEED_LENGTH_IDX])


# --------------------------------------------------------------------------- #
# Engine                                                                      #
# --------------------------------------------------------------------------- #


class Mt19937Engine:
    """Step an externally held state buffer with NumPy's MT19937.

    The engine keeps no state of its own between calls: every draw loads the
    key and position from the buffer, advances, and writes them back, so any
    other holder of the same buffer observes the new state immediately.
    """

    def __init__(self) -> None:
        self._bitgen = np.random.MT19937(0)
        self._generator = np.random.Generator(self._bitgen)

    def _load(self, buffer: NDArray[np.uint32]) -> None:
        self._bitgen.state = {
            "bit_generator": "MT19937",
            "state": {"key": buffer[_KEY], "pos": int(buffer[_POS_IDX])},
        }

    def _store(self, buffer: NDArray[np.uint32]) -> None:
        inner = self._bitgen.state["state"]
        buffer[_KEY] = inner["key"]
        buffer[_POS_IDX] = inner["pos"]

    def next_double(self, buffer: NDArray[np.uint32]) -> float:
        """53-bit resolution float on ``[0, 1)`` (``genrand_res53``)."""
        self._load(buffer)
        value = float(self._generator.random())
        self._store(buffer)
        return value

    def next_uint32(self, buffer: NDArray[np.uint32]) -> int:
        """Raw 32-bit tempered output."""
        self._load(buffer)
        value = int(self._bitgen.random_raw())
        self._store(buffer)
        return value
