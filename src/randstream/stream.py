# src/randstream/stream.py
"""
randstream.stream
=================
Backpressure-aware streams of pseudorandom numbers with resumable state.

Design overview
---------------
1. **Demand-driven production** - a single producer task per stream fills an
   ``asyncio.Queue`` whose ``maxsize`` is the high-water mark.  Production
   suspends while the queue is full and resumes as the consumer drains it.
   There are no threads.
2. **Snapshot fidelity** - the generator state can be read, replaced, and
   shared between streams (``copy=False``); see :mod:`randstream.state`.
3. **Production-time notifications** - ``state`` listeners fire every
   ``siter`` *produced* values.  Up to ``highWaterMark`` values may already
   be buffered ahead of the consumer when a listener runs, so the snapshot
   can be ahead of what has been read.  This is intended behaviour.

Typical usage
-------------
Example::

    from scipy import stats

    from randstream import inverse_cdf, random_stream

    stream = random_stream(
        inverse_cdf(stats.norm(0.0, 1.0)),
        {"objectMode": True, "iter": 10, "siter": 3, "seed": 1234},
    )
    snapshots = []
    stream.on_state(snapshots.append)

    async with stream:
        values = [value async for value in stream]
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Final

import numpy as np
from numpy.typing import NDArray

from randstream.config import StreamOptions, StreamSettings, validate_options
from randstream.errors.config import InvalidOption, InvalidOptions
from randstream.errors.state import InvalidState, StateUnavailable
from randstream.errors.stream import (
    GenerationError,
    GenerationFailed,
    OptionTypeError,
    StateReplacementError,
    StreamConfigError,
    StreamError,
    UnknownEncoding,
)
from randstream.limits import IterationLimiter, StateEventEmitter, StateListener
from randstream.producer import Chunk, ChunkProducer
from randstream.result import Failure, Result, Success
from randstream.samplers import Sampler
from randstream.state import GeneratorStateManager, SeedContext, UniformSource


__all__: list[str] = [
    "RandomStream",
    "object_stream",
    "random_stream",
    "stream_factory",
]

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# Channel markers                                                             #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class _End:
    """Queued after the last value."""


@dataclass(frozen=True)
class _Terminated:
    """Queued in place of further values when production failed or was aborted."""

    error: BaseException


_END: Final[_End] = _End()

_Item = Chunk | _End | _Terminated


# --------------------------------------------------------------------------- #
# Stream                                                                      #
# --------------------------------------------------------------------------- #


class RandomStream:
    """Asynchronous stream of sampled values backed by a resumable MT19937."""

    # ------------------------------------------------------------------ #
    # Construction                                                       #
    # ------------------------------------------------------------------ #

    def __init__(
        self,
        *,
        manager: GeneratorStateManager,
        producer: ChunkProducer,
        options: StreamOptions,
        settings: StreamSettings,
    ) -> None:
        self._manager = manager
        self._producer = producer
        self._options = options
        self._settings = settings

        self._limiter = IterationLimiter(settings.iterations)
        self._emitter = StateEventEmitter(settings.snapshot_interval, lambda: manager.state)
        self._queue: asyncio.Queue[_Item] = asyncio.Queue(maxsize=settings.channel_size)

        self._task: asyncio.Task[None] | None = None
        self._produced = 0
        self._ended = False
        self._destroyed = False

    @classmethod
    def create(
        cls,
        sampler: Sampler,
        options: Mapping[str, object] | None = None,
        *,
        context: SeedContext | None = None,
    ) -> Result[RandomStream, StreamError]:
        """Validate *options* and assemble a stream.

        ``context`` supplies the seed when none of ``prng``, ``state`` or
        ``seed`` is given; a fresh OS-seeded context is used when omitted.
        """
        match validate_options({} if options is None else options):
            case Failure(error):
                return Failure(error)
            case Success(validated):
                pass

        settings = validated.resolve()
        if settings.encoding is not None:
            # bytes.decode refuses binary codecs such as base64 or zlib.
            try:
                b"".decode(settings.encoding)
            except LookupError:
                return Failure(UnknownEncoding(encoding=settings.encoding))

        match _build_manager(validated, context):
            case Failure(error):
                return Failure(error)
            case Success(manager):
                pass

        producer = ChunkProducer(
            manager.prng,
            sampler,
            object_mode=settings.object_mode,
            sep=settings.sep,
            encoding=settings.encoding,
        )
        logger.debug(
            "created stream (object_mode=%s, high_water_mark=%s, iter=%s, siter=%s)",
            settings.object_mode,
            settings.high_water_mark,
            settings.iterations,
            settings.snapshot_interval,
        )
        return Success(
            cls(manager=manager, producer=producer, options=validated, settings=settings)
        )

    # ------------------------------------------------------------------ #
    # Production                                                         #
    # ------------------------------------------------------------------ #

    def _start(self) -> None:
        if self._task is None and not self._destroyed:
            self._task = asyncio.get_running_loop().create_task(self._produce())

    async def _produce(self) -> None:
        while not self._destroyed and not self._limiter.exhausted:
            chunk: Chunk | None = None
            try:
                chunk = self._producer.produce()
                self._produced += 1
                self._limiter.record()
                self._emitter.record()
            except Exception as exc:
                # A listener failed after the value was produced; it still counts.
                if chunk is not None and not self._destroyed:
                    await self._queue.put(chunk)
                await self._fail(exc)
                return
            # A state listener may have destroyed the stream.
            if self._destroyed:
                return
            await self._queue.put(chunk)
            # put() only suspends when the queue is full; yield so an unbounded
            # channel cannot starve the consumer.
            await asyncio.sleep(0)

        if not self._destroyed:
            logger.debug("stream ended after %d values", self._produced)
            await self._queue.put(_END)

    async def _fail(self, exc: Exception) -> None:
        if self._destroyed:
            return
        logger.error("generation failed after %d values", self._produced, exc_info=exc)
        error = GenerationError(
            GenerationFailed(message=f"{type(exc).__name__}: {exc}", produced=self._produced)
        )
        error.__cause__ = exc
        # Values produced before the failure are still delivered first.
        await self._queue.put(_Terminated(error))

    # ------------------------------------------------------------------ #
    # Consumption                                                        #
    # ------------------------------------------------------------------ #

    async def read(self) -> Chunk | None:
        """Next chunk, or ``None`` once the stream has ended."""
        if self._ended:
            return None
        self._start()
        item = await self._queue.get()
        match item:
            case _End():
                self._ended = True
                return None
            case _Terminated(error):
                self._ended = True
                raise error
            case _:
                return item

    def __aiter__(self) -> RandomStream:
        return self

    async def __anext__(self) -> Chunk:
        chunk = await self.read()
        if chunk is None:
            raise StopAsyncIteration
        return chunk

    # ------------------------------------------------------------------ #
    # Cancellation                                                       #
    # ------------------------------------------------------------------ #

    def destroy(self, error: BaseException | None = None) -> None:
        """Stop production immediately.

        Buffered values and any partially filled snapshot interval are
        discarded.  The consumer then sees end of stream, or *error* raised
        from its next read.  Calling ``destroy`` again has no effect.
        """
        if self._destroyed:
            return
        self._destroyed = True
        if self._task is not None:
            self._task.cancel()
        self._emitter.discard()
        while not self._queue.empty():
            self._queue.get_nowait()
        if not self._ended:
            self._queue.put_nowait(_END if error is None else _Terminated(error))
        logger.debug("stream destroyed after %d values", self._produced)

    async def aclose(self) -> None:
        """Destroy the stream and wait for the producer task to unwind."""
        self.destroy()
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def __aenter__(self) -> RandomStream:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------ #
    # State                                                              #
    # ------------------------------------------------------------------ #

    def on_state(self, listener: StateListener) -> None:
        """Call *listener* with a state snapshot every ``siter`` productions."""
        self._emitter.add_listener(listener)

    def off_state(self, listener: StateListener) -> None:
        self._emitter.remove_listener(listener)

    def set_state(self, state: object) -> Result[None, InvalidState | StateUnavailable]:
        """Replace the generator state (same sharing rules as the manager)."""
        return self._manager.set_state(state)

    @property
    def state(self) -> NDArray[np.uint32] | None:
        """Copy of the current generator state; ``None`` with an external prng."""
        return self._manager.state

    @state.setter
    def state(self, value: NDArray[np.uint32]) -> None:
        match self._manager.set_state(value):
            case Failure(error):
                raise StateReplacementError(error)
            case Success(_):
                pass

    # ---------------- read-only props --------------------------------- #

    @property
    def prng(self) -> UniformSource:
        return self._manager.prng

    @property
    def seed(self) -> NDArray[np.uint32] | None:
        return self._manager.seed

    @property
    def seed_length(self) -> int | None:
        return self._manager.seed_length

    @property
    def state_length(self) -> int | None:
        return self._manager.state_length

    @property
    def byte_length(self) -> int | None:
        return self._manager.byte_length

    @property
    def produced(self) -> int:
        """Values produced so far (buffered values included)."""
        return self._produced

    @property
    def options(self) -> StreamOptions:
        """Options as validated, before defaults were applied."""
        return self._options

    @property
    def settings(self) -> StreamSettings:
        return self._settings

    @property
    def destroyed(self) -> bool:
        return self._destroyed


# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #


def _build_manager(
    options: StreamOptions, context: SeedContext | None
) -> Result[GeneratorStateManager, StreamError]:
    copy = True if options.copy_state is None else options.copy_state
    result: Result[GeneratorStateManager, StreamError] = GeneratorStateManager.create(
        prng=options.prng,
        seed=options.seed,
        state=options.state,
        copy=copy,
        context=context,
    )
    return result


def _raise(error: StreamError) -> RandomStream:
    match error:
        case InvalidOptions() | InvalidOption():
            raise OptionTypeError(error)
        case _:
            raise StreamConfigError(error)


# --------------------------------------------------------------------------- #
# Public constructors                                                         #
# --------------------------------------------------------------------------- #


def random_stream(
    sampler: Sampler,
    options: Mapping[str, object] | None = None,
    *,
    context: SeedContext | None = None,
) -> RandomStream:
    """Raising form of :meth:`RandomStream.create`.

    Raises
    ------
    OptionTypeError
        An option has the wrong type or range.
    StreamConfigError
        Seed, state, prng, copy or encoding cannot be used.
    """
    match RandomStream.create(sampler, options, context=context):
        case Success(stream):
            return stream
        case Failure(error):
            return _raise(error)


def object_stream(
    sampler: Sampler,
    options: Mapping[str, object] | None = None,
    *,
    context: SeedContext | None = None,
) -> RandomStream:
    """:func:`random_stream` with ``objectMode`` forced on."""
    merged: dict[str, object] = dict(options or {})
    merged["objectMode"] = True
    return random_stream(sampler, merged, context=context)


def stream_factory(
    sampler: Sampler,
    options: Mapping[str, object] | None = None,
    *,
    context: SeedContext | None = None,
) -> Callable[[], RandomStream]:
    """Validate once, then build any number of identically configured streams.

    Streams built without ``seed``/``state``/``prng`` draw successive seeds
    from the shared *context*.
    """
    match validate_options({} if options is None else options):
        case Failure(error):
            raise OptionTypeError(error)
        case Success(_):
            pass
    shared_context = context or SeedContext()
    frozen = dict(options or {})

    def _make() -> RandomStream:
        return random_stream(sampler, frozen, context=shared_context)

    return _make
