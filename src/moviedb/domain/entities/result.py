"""Result values returned across the core boundary.

Remote failures never escape as exceptions; they travel through the same
channel as successful data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

from moviedb.domain.exceptions import MovieDbError

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Success(Generic[T]):
    data: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    error: MovieDbError

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def retryable(self) -> bool:
        return self.error.retryable

    @property
    def kind(self) -> str:
        """Short error name, e.g. ``"NotFoundError"``."""
        return type(self.error).__name__


AppResult = Union[Success[T], Failure]


def map_result(result: AppResult[T], transform: Callable[[T], R]) -> AppResult[R]:
    """Apply *transform* to the data of a ``Success``; pass ``Failure`` through."""
    if isinstance(result, Success):
        return Success(transform(result.data))
    return result


def get_or_none(result: AppResult[T]) -> T | None:
    if isinstance(result, Success):
        return result.data
    return None
