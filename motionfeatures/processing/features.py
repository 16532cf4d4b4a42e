"""
Apply user-supplied statistic functions to one axis series.

A feature function maps a 1D numeric array to a mapping of feature name to
scalar. Failures are scoped to the single function: they are recorded and
the remaining functions still run.
"""
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Protocol

import numpy as np

from motionfeatures.core import join_errors

logger = logging.getLogger(__name__)


class FeatureFunction(Protocol):
    def __call__(self, values: np.ndarray) -> Mapping[str, float]: ...


@dataclass(frozen=True, slots=True)
class FeatureOutcome:
    values: dict[str, float]
    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def error(self) -> str | None:
        return join_errors(*self.errors)


def function_name(fn: FeatureFunction) -> str:
    if isinstance(fn, functools.partial):
        return function_name(fn.func)
    return getattr(fn, "__name__", None) or type(fn).__name__


def _run(fn: FeatureFunction, series: np.ndarray) -> dict[str, float]:
    with np.errstate(all="ignore"):
        raw = fn(series)
    if not isinstance(raw, Mapping):
        raise TypeError(f"expected a mapping, got {type(raw).__name__}")
    out = {}
    for key, value in raw.items():
        value = float(value)
        if not np.isfinite(value):
            raise ValueError(f"'{key}' is undefined for this input")
        out[str(key)] = value
    return out


def _distinct_key(taken: Mapping[str, float], name: str, key: str) -> str:
    if key not in taken:
        return key
    candidate = f"{name}.{key}"
    n = 2
    while candidate in taken:
        candidate = f"{name}#{n}.{key}"
        n += 1
    return candidate


def apply_features(
    series: Iterable[float],
    functions: Iterable[FeatureFunction],
) -> FeatureOutcome:
    """
    Union of every function's outputs for `series`.

    A key already produced by an earlier function is stored as
    `<function>.<key>` instead, then `<function>#2.<key>`, `<function>#3.<key>`
    and so on until it is unused.
    """
    series = np.asarray(series, dtype=float)
    values: dict[str, float] = {}
    errors: list[str] = []

    for fn in functions:
        name = function_name(fn)
        if series.size == 0:
            errors.append(f"{name}: empty series")
            continue
        try:
            out = _run(fn, series)
        except Exception as e:
            reason = str(e) or type(e).__name__
            logger.warning("Feature function %s failed: %s", name, reason)
            errors.append(f"{name}: {reason}")
            continue
        for key, value in out.items():
            values[_distinct_key(values, name, key)] = value

    return FeatureOutcome(values=values, errors=tuple(errors))
