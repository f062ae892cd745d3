# src/randstream/__main__.py
"""CLI for streaming pseudorandom numbers from a scipy.stats distribution.

Usage:
    python -m randstream DISTRIBUTION [PARAM ...] [--sep SEP] [-n ITER] [--seed SEED]
                         [--state FILE] [--snapshot FILE] [-v]

Examples:
    # Five standard normal values
    python -m randstream norm 0 1 -n 5 --seed 1234

    # Comma-separated Poisson(3) draws, saving the generator state on exit
    python -m randstream poisson 3 -n 10 --sep , --snapshot state.bin

    # Continue exactly where the previous run stopped
    python -m randstream poisson 3 -n 10 --sep , --state state.bin

Parameters are passed positionally to the scipy.stats distribution: shape
parameters first, then loc and scale.  State files hold the raw
little-endian uint32 state buffer.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import NoReturn

import numpy as np

from randstream.errors.stream import GenerationError
from randstream.result import Failure, Success
from randstream.samplers import Sampler, SamplerSpec, scipy_sampler
from randstream.stream import RandomStream
from randstream.validation import validate_model


logger = logging.getLogger("randstream")

_EXIT_OK = 0
_EXIT_RUNTIME = 1
_EXIT_USAGE = 2


def _parse_seed(text: str) -> int | list[int]:
    """Integer seed, or comma-separated integers for an array seed."""
    try:
        words = [int(part) for part in text.split(",")]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid seed: {text!r}") from exc
    return words[0] if len(words) == 1 else words


def _load_state(path: Path) -> np.ndarray:
    return np.fromfile(path, dtype="<u4").astype(np.uint32)


async def cmd_stream(
    sampler: Sampler,
    options: dict[str, object],
    snapshot: Path | None,
) -> int:
    """
    Write the stream to stdout and optionally persist the final state.

    Returns:
        Exit code:
            0: all values written
            1: generation or I/O failure
            2: invalid options, seed or state
    """
    match RandomStream.create(sampler, options):
        case Failure(error):
            print(f"Error: {error}", file=sys.stderr)
            return _EXIT_USAGE
        case Success(stream):
            pass

    async with stream:
        try:
            async for chunk in stream:
                sys.stdout.write(str(chunk))
        except GenerationError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return _EXIT_RUNTIME
        sys.stdout.write("\n")
        sys.stdout.flush()

        if snapshot is not None:
            state = stream.state
            if state is None:  # pragma: no cover - the CLI never supplies a prng
                return _EXIT_RUNTIME
            try:
                state.astype("<u4").tofile(snapshot)
            except OSError as exc:
                print(f"Error: cannot write snapshot: {exc}", file=sys.stderr)
                return _EXIT_RUNTIME
            logger.info("saved %d-word state to %s", state.size, snapshot)
    return _EXIT_OK


def main(argv: list[str] | None = None) -> NoReturn:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="randstream",
        description="Stream pseudorandom numbers from a scipy.stats distribution",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("distribution", help="scipy.stats distribution name (e.g. norm)")
    parser.add_argument("params", nargs="*", type=float, help="Distribution parameters")
    parser.add_argument("--sep", default="\n", help="Separator between values (default: newline)")
    parser.add_argument("-n", "--iter", type=int, dest="iterations", help="Number of values")
    parser.add_argument("--seed", type=_parse_seed, help="Integer or comma-separated integers")
    parser.add_argument("--state", type=Path, help="Load generator state from FILE")
    parser.add_argument("--snapshot", type=Path, help="Save generator state to FILE on exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        stream=sys.stderr,
    )

    match validate_model(SamplerSpec, name=args.distribution, params=tuple(args.params)):
        case Failure(error):
            print(f"Error: {error}", file=sys.stderr)
            sys.exit(_EXIT_USAGE)
        case Success(spec):
            pass

    match scipy_sampler(spec):
        case Failure(sampler_error):
            print(f"Error: {sampler_error}", file=sys.stderr)
            sys.exit(_EXIT_USAGE)
        case Success(sampler):
            pass

    options: dict[str, object] = {"sep": args.sep, "encoding": "utf-8"}
    if args.iterations is not None:
        options["iter"] = args.iterations
    if args.seed is not None:
        options["seed"] = args.seed
    if args.state is not None:
        try:
            options["state"] = _load_state(args.state)
        except OSError as exc:
            print(f"Error: cannot read state: {exc}", file=sys.stderr)
            sys.exit(_EXIT_RUNTIME)

    try:
        exit_code = asyncio.run(cmd_stream(sampler, options, args.snapshot))
    except BrokenPipeError:
        # Downstream closed early (e.g. `| head`); silence the final flush.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        exit_code = _EXIT_OK
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
