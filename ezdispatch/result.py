"""Success/error result shape shared by interface methods and generated code.

Interface methods declare ``-> Result[S, E]`` and return ``Ok(value)`` or
``Err(error)``. The dispatcher and proxies forward these values unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying ``value``."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed outcome carrying ``error``."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        raise UnwrapError(self)


Result = Union[Ok[T], Err[E]]


class UnwrapError(Exception):
    """Raised by ``Err.unwrap``; the original ``Err`` is kept on ``result``."""

    def __init__(self, result: Err[Any]):
        super().__init__(f"called unwrap on {result!r}")
        self.result = result


__all__ = ["Ok", "Err", "Result", "UnwrapError"]
