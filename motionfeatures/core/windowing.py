# motionfeatures/core/windowing.py
from __future__ import annotations

import math
from dataclasses import dataclass, field

from .exceptions import InvalidConfiguration, InvalidWindow
from .readings import ReadingStream


@dataclass(frozen=True, slots=True, eq=False)
class Window:
    """
    A fixed-length contiguous slice of a ReadingStream.

    Indices are assigned in traversal order starting at 0; neighbouring
    windows share samples when overlap > 0.
    """
    index: int
    samples: ReadingStream = field(repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.index, bool) or not isinstance(self.index, int) or self.index < 0:
            raise InvalidWindow("Window.index must be an integer >= 0.")
        if not isinstance(self.samples, ReadingStream):
            raise InvalidWindow("Window.samples must be a ReadingStream instance.")

    @property
    def n(self) -> int:
        return self.samples.n

    @property
    def t_start(self) -> float | None:
        return self.samples.t_start

    @property
    def t_end(self) -> float | None:
        return self.samples.t_end

    def with_samples(self, samples: ReadingStream) -> "Window":
        return Window(index=self.index, samples=samples)


def validate_window_params(window_length: int, overlap: float) -> None:
    if isinstance(window_length, bool) or not isinstance(window_length, int) or window_length < 1:
        raise InvalidConfiguration("window_length must be an integer >= 1.")
    if not 0.0 <= overlap < 1.0:
        raise InvalidConfiguration("overlap must be in [0, 1).")


def window_step(window_length: int, overlap: float) -> int:
    """Samples between consecutive window starts, never less than 1."""
    validate_window_params(window_length, overlap)
    return max(1, math.floor(window_length * (1.0 - overlap)))


def window_count(n_samples: int, window_length: int, overlap: float) -> int:
    """Number of complete windows (0 if insufficient data)."""
    step = window_step(window_length, overlap)
    if n_samples < window_length:
        return 0
    return (n_samples - window_length) // step + 1


def segment(stream: ReadingStream, window_length: int, overlap: float) -> list[Window]:
    """
    Split `stream` into overlapping windows of `window_length` samples.

    The trailing partial window is discarded; a stream shorter than one
    window yields an empty list.
    """
    step = window_step(window_length, overlap)
    starts = range(0, stream.n - window_length + 1, step)
    return [
        Window(index=i, samples=stream.slice_index(start, start + window_length))
        for i, start in enumerate(starts)
    ]
