"""Error ADTs for stream option validation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class InvalidOptions:
    """Options argument is not a mapping."""

    value: object
    kind: Literal["InvalidOptions"] = "InvalidOptions"

    def __str__(self) -> str:
        return f"invalid argument. Options argument must be a mapping. Value: `{self.value!r}`."


@dataclass(frozen=True)
class InvalidOption:
    """A recognised option has the wrong type or range."""

    field: str
    value: object
    expected: str
    kind: Literal["InvalidOption"] = "InvalidOption"

    def __str__(self) -> str:
        return (
            f"invalid option. `{self.field}` option must be {self.expected}. "
            f"Option: `{self.value!r}`."
        )


OptionError = InvalidOptions | InvalidOption
