# tests/test_config.py
"""
Tests for :func:`randstream.config.validate_options`.

Focus areas:

1. **Per-field type checks** - each typed option rejects bad values and
   names the offending field and value.
2. **Fixed check order** - the first failing field in declaration order
   wins, regardless of mapping order.
3. **Pass-through** - ``prng``/``seed``/``state``/``copy`` are never checked.
4. **No defaulting** - absent options stay unset until ``resolve``.
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from randstream.config import (
    DEFAULT_HIGH_WATER_MARK,
    DEFAULT_SEP,
    DEFAULT_SNAPSHOT_INTERVAL,
    validate_options,
)
from randstream.errors.config import InvalidOption, InvalidOptions
from tests.helpers import expect_failure, expect_success


# --------------------------------------------------------------------------- #
# Constants                                                                   #
# --------------------------------------------------------------------------- #

_BAD_VALUES: tuple[tuple[str, object], ...] = (
    ("sep", 1),
    ("sep", None),
    ("sep", b","),
    ("objectMode", "true"),
    ("objectMode", 1),
    ("encoding", 8),
    ("encoding", True),
    ("highWaterMark", -1),
    ("highWaterMark", "16"),
    ("highWaterMark", math.nan),
    ("highWaterMark", True),
    ("iter", -1),
    ("iter", 1.5),
    ("iter", True),
    ("iter", None),
    ("siter", 0),
    ("siter", -3),
    ("siter", 2.0),
    ("siter", False),
)


# --------------------------------------------------------------------------- #
# Tests                                                                       #
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize("field, value", _BAD_VALUES)
def test_rejects_bad_value(field: str, value: object) -> None:
    """Each typed option fails with an error naming the field and value."""
    error = expect_failure(validate_options({field: value}))
    assert isinstance(error, InvalidOption)
    assert error.field == field
    assert error.value is value
    assert field in str(error)


def test_non_mapping_rejected() -> None:
    error = expect_failure(validate_options(["sep", ","]))  # type: ignore[arg-type]
    assert isinstance(error, InvalidOptions)


def test_first_failure_in_fixed_order() -> None:
    """``sep`` is checked before ``siter`` even when it comes later in the mapping."""
    error = expect_failure(validate_options({"siter": 0, "objectMode": "x", "sep": 3}))
    assert isinstance(error, InvalidOption)
    assert error.field == "sep"

    error = expect_failure(validate_options({"siter": 0, "iter": -1}))
    assert isinstance(error, InvalidOption)
    assert error.field == "iter"


def test_valid_options_populate_record() -> None:
    options = expect_success(
        validate_options(
            {
                "sep": ",",
                "objectMode": True,
                "encoding": "utf-8",
                "highWaterMark": 4,
                "iter": 0,
                "siter": 3,
            }
        )
    )
    assert options.sep == ","
    assert options.object_mode is True
    assert options.encoding == "utf-8"
    assert options.high_water_mark == 4
    assert options.iterations == 0
    assert options.snapshot_interval == 3


def test_encoding_none_and_infinite_high_water_mark_allowed() -> None:
    options = expect_success(validate_options({"encoding": None, "highWaterMark": math.inf}))
    assert options.encoding is None
    assert "encoding" in options.model_fields_set
    assert math.isinf(options.resolve().high_water_mark)


def test_numpy_integers_accepted() -> None:
    options = expect_success(validate_options({"iter": np.int64(7), "siter": np.uint32(2)}))
    assert options.iterations == 7
    assert options.snapshot_interval == 2


def test_pass_through_fields_are_not_validated() -> None:
    """Validity of prng/seed/state/copy is decided by the state manager."""
    buffer = np.zeros(3, dtype=np.uint32)
    options = expect_success(
        validate_options({"prng": "not callable", "seed": -5, "state": buffer, "copy": "no"})
    )
    assert options.prng == "not callable"
    assert options.seed == -5
    assert options.state is buffer
    assert options.copy_state == "no"


def test_unknown_keys_ignored() -> None:
    options = expect_success(validate_options({"objectMode": True, "futureOption": object()}))
    assert options.object_mode is True
    assert options.model_fields_set == {"object_mode"}


def test_python_attribute_names_are_not_recognised() -> None:
    """Only the public key names are read; ``object_mode`` is an unknown key."""
    options = expect_success(validate_options({"object_mode": "not a bool"}))
    assert options.object_mode is None


def test_absent_fields_stay_unset() -> None:
    options = expect_success(validate_options({}))
    assert options.model_fields_set == set()
    assert options.sep is None
    assert options.iterations is None


def test_resolve_applies_defaults() -> None:
    settings = expect_success(validate_options({})).resolve()
    assert settings.sep == DEFAULT_SEP == "\n"
    assert settings.object_mode is False
    assert settings.encoding is None
    assert settings.high_water_mark == DEFAULT_HIGH_WATER_MARK
    assert settings.iterations is None
    assert settings.snapshot_interval == DEFAULT_SNAPSHOT_INTERVAL


@pytest.mark.parametrize(
    "high_water_mark, expected",
    ((0, 1), (1, 1), (2.5, 3), (16, 16), (math.inf, 0)),
)
def test_channel_size(high_water_mark: float, expected: int) -> None:
    settings = expect_success(validate_options({"highWaterMark": high_water_mark})).resolve()
    assert settings.channel_size == expected


def test_huge_integer_high_water_mark_saturates_to_infinity() -> None:
    """Integers beyond the float range are valid and mean an unbounded channel."""
    options = expect_success(validate_options({"highWaterMark": 10**400}))
    assert math.isinf(options.high_water_mark)
    assert options.resolve().channel_size == 0


def test_huge_negative_integer_high_water_mark_rejected() -> None:
    error = expect_failure(validate_options({"highWaterMark": -(10**400)}))
    assert isinstance(error, InvalidOption)
    assert error.field == "highWaterMark"
