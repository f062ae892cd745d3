# tests/test_result.py
"""Tests for the ``Success``/``Failure`` result type."""

from __future__ import annotations

import pytest

from randstream.config import validate_options
from randstream.result import Failure, Result, Success


def test_success_unwrap() -> None:
    assert Success(3).unwrap() == 3


def test_failure_unwrap_raises() -> None:
    with pytest.raises(RuntimeError, match="boom"):
        Failure("boom").unwrap()


def test_pattern_matching() -> None:
    result: Result[int, str] = Failure("bad")
    match result:
        case Success(value):
            pytest.fail(f"unexpected success: {value}")
        case Failure(error):
            assert error == "bad"


def test_validate_options_unwrap() -> None:
    assert validate_options({"objectMode": True, "iter": 10}).unwrap().iterations == 10
    with pytest.raises(RuntimeError, match="sep"):
        validate_options({"sep": 1}).unwrap()
