"""Tagged results returned by every ``DigimonStore`` operation.

A store call yields exactly one of:

* ``Found(value)``: the query succeeded; ``value`` is the row(s) or count.
* ``Absent()``: a single-row lookup matched nothing.
* ``Failed(cause)``: the backend raised; ``cause`` is the original exception.

Callers dispatch on the type and never inspect backend error codes.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class Absent:
    pass


@dataclass(frozen=True)
class Failed:
    cause: BaseException


QueryResult = Union[Found[Any], Absent, Failed]
