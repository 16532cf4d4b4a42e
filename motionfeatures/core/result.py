# motionfeatures/core/result.py
"""
Error-as-data plumbing shared by every processing stage.

A stage returns either ``Ok(value)`` or ``Failure(reason)``. Once a value is a
Failure, every later stage forwards it untouched; ``bind`` and ``chain`` do the
tag check so stage functions only ever see usable data.
"""
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Failure:
    reason: str

    def __post_init__(self) -> None:
        if not isinstance(self.reason, str) or not self.reason.strip():
            raise ValueError("Failure.reason must be a non-empty string.")


Result = Union[Ok[T], Failure]


def is_failure(result: Result[Any]) -> bool:
    return isinstance(result, Failure)


def bind(result: Result[T], stage: Callable[[T], Result[U]]) -> Result[U]:
    """Apply `stage` to an Ok value; forward a Failure unchanged."""
    if isinstance(result, Failure):
        return result
    return stage(result.value)


def chain(result: Result[Any], *stages: Callable[[Any], Result[Any]]) -> Result[Any]:
    for stage in stages:
        result = bind(result, stage)
    return result


def guard(
    reason: str,
    *exc_types: type[BaseException],
) -> Callable[[Callable[..., T]], Callable[..., Result[T]]]:
    """
    Turn expected numerical exceptions raised inside a stage into Failure(reason).

    The wrapped function returns a plain value on success; anything outside
    `exc_types` still propagates.
    """
    caught = exc_types or (ValueError, ArithmeticError, IndexError)

    def decorate(fn: Callable[..., T]) -> Callable[..., Result[T]]:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Result[T]:
            try:
                out = fn(*args, **kwargs)
            except caught as e:
                logger.warning("%s failed: %s", fn.__name__, e)
                return Failure(reason)
            if isinstance(out, (Ok, Failure)):
                return out
            return Ok(out)

        return wrapper

    return decorate
