"""
randstream.state
================
Ownership-aware management of the generator state behind a random stream.

Ownership model
---------------
The state buffer is held through an explicit tag:

* :class:`Exclusive` - the manager owns a private clone; nothing outside
  the manager can observe or mutate it.
* :class:`Shared` - the manager holds the caller's buffer itself.  Every
  holder of that buffer draws from, and advances, the same generator.

Replacement (:meth:`GeneratorStateManager.set_state`) branches on the tag
and on a length comparison:

* ``Shared`` + same length: copied element-wise into the shared buffer, so
  every co-holder sees the new state.
* different length: the manager rebinds to the new buffer (cloned when
  ``copy`` is set).  Former co-holders keep the old buffer.
* ``Exclusive``: copied in place when ``copy`` is set and the length
  matches, otherwise re-tagged according to ``copy``.

Sharing is only safe within a single thread; the stream runtime is a
single asyncio event loop and never mutates a buffer from two threads.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

import numpy as np
from numpy.typing import NDArray

from randstream.errors.state import (
    InvalidCopyFlag,
    InvalidPrng,
    InvalidSeed,
    InvalidState,
    StateUnavailable,
)
from randstream.mt19937 import (
    MAX_SEED,
    Mt19937Engine,
    build_state,
    check_seed,
    check_state,
    seed_length,
    seed_words,
)
from randstream.result import Failure, Result, Success


__all__: list[str] = [
    "Exclusive",
    "GeneratorStateManager",
    "Ownership",
    "SeedContext",
    "Shared",
    "UniformSource",
]

logger = logging.getLogger(__name__)

UniformSource = Callable[[], float]

# --------------------------------------------------------------------------- #
# Ownership tags                                                              #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class Exclusive:
    """Buffer cloned into, and owned solely by, one manager."""

    buffer: NDArray[np.uint32]
    kind: Literal["Exclusive"] = "Exclusive"


@dataclass(frozen=True)
class Shared:
    """Caller-supplied buffer referenced in place by one or more managers."""

    buffer: NDArray[np.uint32]
    kind: Literal["Shared"] = "Shared"


Ownership = Exclusive | Shared

# --------------------------------------------------------------------------- #
# Default seeding context                                                     #
# --------------------------------------------------------------------------- #


class SeedContext:
    """Source of seeds for streams constructed without seed, state or prng.

    Pass the same context to several constructions to get distinct but
    reproducible seeds; omit *entropy* to seed from the operating system.
    """

    def __init__(self, entropy: int | None = None) -> None:
        self._rng = np.random.default_rng(entropy)

    def next_seed(self) -> int:
        return int(self._rng.integers(1, MAX_SEED, endpoint=True))


# --------------------------------------------------------------------------- #
# Manager                                                                     #
# --------------------------------------------------------------------------- #


class GeneratorStateManager:
    """Owns or shares the MT19937 state buffer backing a uniform source."""

    def __init__(
        self,
        *,
        ownership: Ownership | None,
        copy: bool,
        external: UniformSource | None = None,
    ) -> None:
        self._ownership = ownership
        self._copy = copy
        self._external = external
        self._engine = Mt19937Engine()

    @classmethod
    def create(
        cls,
        *,
        prng: object = None,
        seed: object = None,
        state: object = None,
        copy: object = True,
        context: SeedContext | None = None,
    ) -> Result[
        GeneratorStateManager, InvalidPrng | InvalidSeed | InvalidState | InvalidCopyFlag
    ]:
        """Build a manager, honouring ``prng`` > ``state`` > ``seed`` precedence."""
        if not isinstance(copy, bool):
            return Failure(InvalidCopyFlag(value=copy))

        if prng is not None:
            if not callable(prng):
                return Failure(InvalidPrng(value=prng))
            logger.debug("using external uniform source %r", prng)
            return Success(cls(ownership=None, copy=copy, external=prng))

        if state is not None:
            match check_state(state):
                case Failure(error):
                    return Failure(error)
                case Success(buffer):
                    ownership: Ownership = Exclusive(buffer.copy()) if copy else Shared(buffer)
                    logger.debug("initialised from supplied state (%s)", ownership.kind)
                    return Success(cls(ownership=ownership, copy=copy))

        if seed is None:
            seed = (context or SeedContext()).next_seed()
        match check_seed(seed):
            case Failure(error):
                return Failure(error)
            case Success(normalised):
                logger.debug("initialised from seed %r", normalised)
                return Success(cls(ownership=Exclusive(build_state(normalised)), copy=copy))

    # ------------------------------------------------------------------ #
    # Uniform draws                                                      #
    # ------------------------------------------------------------------ #

    def draw(self) -> float:
        """Next uniform value on ``[0, 1)``."""
        if self._ownership is None:
            assert self._external is not None
            return float(self._external())
        return self._engine.next_double(self._ownership.buffer)

    def draw_uint32(self) -> Result[int, StateUnavailable]:
        """Next raw 32-bit output of the internal generator."""
        if self._ownership is None:
            return Failure(StateUnavailable())
        return Success(self._engine.next_uint32(self._ownership.buffer))

    # ------------------------------------------------------------------ #
    # State replacement                                                  #
    # ------------------------------------------------------------------ #

    def set_state(self, buffer: object) -> Result[None, InvalidState | StateUnavailable]:
        """Replace the generator state; see the module docstring for sharing rules."""
        if self._ownership is None:
            return Failure(StateUnavailable())
        match check_state(buffer):
            case Failure(error):
                return Failure(error)
            case Success(new):
                pass

        current = self._ownership.buffer
        same_length = new.size == current.size
        match self._ownership:
            case Shared() if same_length:
                current[:] = new
            case Exclusive() if same_length and self._copy:
                current[:] = new
            case _:
                self._ownership = Exclusive(new.copy()) if self._copy else Shared(new)
                logger.debug(
                    "rebound state (%d -> %d words, %s)",
                    current.size,
                    new.size,
                    self._ownership.kind,
                )
        return Success(None)

    # ------------------------------------------------------------------ #
    # Read-only props                                                    #
    # ------------------------------------------------------------------ #

    @property
    def prng(self) -> UniformSource:
        """The active uniform source."""
        return self._external if self._external is not None else self.draw

    @property
    def ownership(self) -> Ownership | None:
        """Current ownership tag, ``None`` with an external source."""
        return self._ownership

    @property
    def copy(self) -> bool:
        return self._copy

    @property
    def seed(self) -> NDArray[np.uint32] | None:
        if self._ownership is None:
            return None
        return seed_words(self._ownership.buffer)

    @property
    def seed_length(self) -> int | None:
        if self._ownership is None:
            return None
        return seed_length(self._ownership.buffer)

    @property
    def state(self) -> NDArray[np.uint32] | None:
        """Snapshot (copy) of the current state buffer."""
        if self._ownership is None:
            return None
        return self._ownership.buffer.copy()

    @property
    def state_length(self) -> int | None:
        if self._ownership is None:
            return None
        return int(self._ownership.buffer.size)

    @property
    def byte_length(self) -> int | None:
        if self._ownership is None:
            return None
        return int(self._ownership.buffer.nbytes)
