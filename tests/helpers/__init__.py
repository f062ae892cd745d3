"""Shared test utilities for the randstream test suite.

Usage:
    >>> from tests.helpers import expect_success, make_stream, drain
    >>>
    >>> stream = make_stream({"iter": 5})
    >>> values = await drain(stream)
"""

from __future__ import annotations

from tests.helpers.constants import (
    DEFAULT_SEED,
    MT19937_REFERENCE_FIRST_OUTPUT,
    MT19937_REFERENCE_SEED,
    SINGLE_WORD_STATE_LENGTH,
)
from tests.helpers.factories import drain, make_state, make_stream, normal_sampler
from tests.helpers.result_utils import E, T, expect_failure, expect_success

__all__ = [
    # Result unwrapping
    "expect_success",
    "expect_failure",
    "T",
    "E",
    # Factories
    "drain",
    "make_state",
    "make_stream",
    "normal_sampler",
    # Constants
    "DEFAULT_SEED",
    "MT19937_REFERENCE_FIRST_OUTPUT",
    "MT19937_REFERENCE_SEED",
    "SINGLE_WORD_STATE_LENGTH",
]
