# motionfeatures/core/config.py
from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Iterable

from .exceptions import InvalidConfiguration, WindowMismatch
from .windowing import window_step


def _pair(name: str, value: Iterable[float]) -> tuple[float, float]:
    try:
        low, high = (float(v) for v in value)
    except (TypeError, ValueError) as e:
        raise InvalidConfiguration(f"{name} must be a pair of numbers.") from e
    return low, high


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """
    Windowing and filtering parameters shared by every sensor branch.

    - window_length: samples per window
    - overlap: fraction of a window shared with the next one, in [0, 1)
    - time_range: inclusive bounds (seconds from the first sample) kept before processing
    - frequency_range: bandpass cutoffs in Hz
    - filter_order: Butterworth order
    - measures: kinematic measures to extract on; None keeps the sensor defaults
    """
    window_length: int = 256
    overlap: float = 0.5
    time_range: tuple[float, float] = (1.0, 9.0)
    frequency_range: tuple[float, float] = (1.0, 25.0)
    filter_order: int = 4
    measures: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if isinstance(self.window_length, bool) or not isinstance(self.window_length, numbers.Integral):
            raise InvalidConfiguration("window_length must be an integer.")
        if self.window_length < 1:
            raise InvalidConfiguration("window_length must be >= 1.")
        object.__setattr__(self, "window_length", int(self.window_length))

        try:
            overlap = float(self.overlap)
        except (TypeError, ValueError) as e:
            raise InvalidConfiguration("overlap must be a number.") from e
        if not 0.0 <= overlap < 1.0:
            raise InvalidConfiguration("overlap must be in [0, 1).")
        object.__setattr__(self, "overlap", overlap)

        t_min, t_max = _pair("time_range", self.time_range)
        if t_min > t_max:
            raise InvalidConfiguration("time_range lower bound exceeds upper bound.")
        object.__setattr__(self, "time_range", (t_min, t_max))

        low, high = _pair("frequency_range", self.frequency_range)
        if not 0.0 < low < high:
            raise InvalidConfiguration("frequency_range must satisfy 0 < low < high.")
        object.__setattr__(self, "frequency_range", (low, high))

        if isinstance(self.filter_order, bool) or not isinstance(self.filter_order, numbers.Integral):
            raise InvalidConfiguration("filter_order must be an integer.")
        if self.filter_order < 1:
            raise InvalidConfiguration("filter_order must be >= 1.")

        if self.measures is not None:
            if isinstance(self.measures, str):
                measures = (self.measures,)
            else:
                measures = tuple(self.measures)
            if not measures or not all(isinstance(m, str) and m.strip() for m in measures):
                raise InvalidConfiguration("measures must be non-empty strings.")
            object.__setattr__(self, "measures", measures)

    @property
    def step(self) -> int:
        return window_step(self.window_length, self.overlap)


def ensure_aligned(a: PipelineConfig, b: PipelineConfig) -> None:
    """Raise WindowMismatch unless both configs produce the same window index space."""
    if (a.window_length, a.overlap, a.time_range) != (b.window_length, b.overlap, b.time_range):
        raise WindowMismatch(
            "Window parameters differ: "
            f"({a.window_length}, {a.overlap}, {a.time_range}) vs "
            f"({b.window_length}, {b.overlap}, {b.time_range})"
        )


@dataclass(frozen=True, slots=True)
class GravityPolicy:
    """
    Rule for flagging windows recorded while the device was being reoriented.

    - rotation: flag a window when any gravity axis changes sign inside it
    - magnitude_tolerance: also flag when the mean |g| differs from
      reference_g by more than this; None disables the check
    """
    rotation: bool = True
    magnitude_tolerance: float | None = None
    reference_g: float = 9.81

    def __post_init__(self) -> None:
        if self.magnitude_tolerance is not None and float(self.magnitude_tolerance) < 0:
            raise InvalidConfiguration("magnitude_tolerance must be >= 0.")
        if float(self.reference_g) <= 0:
            raise InvalidConfiguration("reference_g must be > 0.")
