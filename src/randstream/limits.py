"""
randstream.limits
=================
Per-production bookkeeping: the iteration cap and periodic state
notifications.

Both observers are driven by *production*.  A stream buffers up to its
high-water mark ahead of the consumer, so a state notification describes
the generator after the most recently produced value, which may be several
values ahead of what the consumer has read.  Capturing state at a specific
read offset is not supported: resuming from a notification continues after
the last produced value, not the last value read.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import numpy as np
from numpy.typing import NDArray


__all__: list[str] = ["IterationLimiter", "StateEventEmitter", "StateListener"]

logger = logging.getLogger(__name__)

StateListener = Callable[[NDArray[np.uint32] | None], None]


class IterationLimiter:
    """Counts down from an optional cap; ``None`` never exhausts."""

    def __init__(self, cap: int | None) -> None:
        self._remaining = cap

    @property
    def remaining(self) -> int | None:
        return self._remaining

    @property
    def exhausted(self) -> bool:
        return self._remaining is not None and self._remaining <= 0

    def record(self) -> None:
        if self._remaining is not None:
            self._remaining -= 1


class StateEventEmitter:
    """Notify listeners with a state snapshot every *interval* productions."""

    def __init__(
        self,
        interval: int,
        snapshot: Callable[[], NDArray[np.uint32] | None],
    ) -> None:
        self._interval = interval
        self._snapshot = snapshot
        self._count = 0
        self._emitted = 0
        self._listeners: list[StateListener] = []

    @property
    def emitted(self) -> int:
        """Number of notifications sent so far."""
        return self._emitted

    @property
    def pending(self) -> int:
        """Productions counted towards the next notification."""
        return self._count

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def record(self) -> None:
        self._count += 1
        if self._count < self._interval:
            return
        self._count = 0
        self._emitted += 1
        state = self._snapshot()
        logger.debug("state notification %d", self._emitted)
        for listener in list(self._listeners):
            listener(state if state is None else state.copy())

    def discard(self) -> None:
        """Drop the partially filled interval."""
        self._count = 0
