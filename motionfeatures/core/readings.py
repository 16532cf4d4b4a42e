# core/readings.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import numpy as np

from .exceptions import InvalidReadingStream

AXES: tuple[str, ...] = ("x", "y", "z")
COLUMNS: tuple[str, ...] = ("t",) + AXES


def _as_1d(name: str, values: Any) -> np.ndarray:
    try:
        arr = np.asarray(values, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidReadingStream(f"`{name}` must be numeric: {e}") from e
    if arr.ndim != 1:
        raise InvalidReadingStream(f"`{name}` must be 1D, got shape {arr.shape}")
    return arr


@dataclass(frozen=True, slots=True, eq=False)
class ReadingStream:
    """
    Immutable 3-axis sensor recording: timestamps plus x/y/z readings.

    `measures` holds derived per-axis quantities (jerk, velocity, ...) keyed
    by measure name, then axis. Every derived array has the stream's length.
    NaN readings are allowed here; callers decide whether they are fatal
    (see `has_missing`).
    """

    t: np.ndarray = field(repr=False)
    x: np.ndarray = field(repr=False)
    y: np.ndarray = field(repr=False)
    z: np.ndarray = field(repr=False)
    measures: Mapping[str, Mapping[str, np.ndarray]] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        arrays = {name: _as_1d(name, getattr(self, name)) for name in COLUMNS}
        n = arrays["t"].size
        for name, arr in arrays.items():
            if arr.size != n:
                raise InvalidReadingStream(
                    f"`t` and `{name}` must have same length, got {n} vs {arr.size}"
                )
            object.__setattr__(self, name, arr)

        if self.measures is None:
            object.__setattr__(self, "measures", {})
        elif not isinstance(self.measures, Mapping):
            raise InvalidReadingStream("`measures` must be a mapping.")

        normalized: dict[str, dict[str, np.ndarray]] = {}
        for measure, by_axis in self.measures.items():
            if not isinstance(measure, str) or not measure.strip():
                raise InvalidReadingStream("Measure names must be non-empty strings.")
            if set(by_axis) != set(AXES):
                raise InvalidReadingStream(
                    f"Measure '{measure}' must provide axes {AXES}, got {tuple(by_axis)}"
                )
            normalized[measure] = {}
            for axis in AXES:
                arr = _as_1d(f"{measure}.{axis}", by_axis[axis])
                if arr.size != n:
                    raise InvalidReadingStream(
                        f"Measure '{measure}' axis {axis} has length {arr.size}, expected {n}"
                    )
                normalized[measure][axis] = arr
        object.__setattr__(self, "measures", normalized)

    @classmethod
    def from_columns(cls, data: Any) -> "ReadingStream":
        """
        Build a stream from any column mapping with keys t, x, y, z.

        Works with a dict of sequences or a pandas DataFrame.
        """
        if isinstance(data, ReadingStream):
            return data
        missing = []
        columns = {}
        for name in COLUMNS:
            try:
                columns[name] = data[name]
            except (KeyError, IndexError, TypeError):
                missing.append(name)
        if missing:
            raise InvalidReadingStream(f"Missing column(s): {', '.join(missing)}")
        return cls(t=columns["t"], x=columns["x"], y=columns["y"], z=columns["z"])

    @property
    def n(self) -> int:
        return int(self.t.size)

    @property
    def t_start(self) -> float | None:
        return None if self.n == 0 else float(self.t[0])

    @property
    def t_end(self) -> float | None:
        return None if self.n == 0 else float(self.t[-1])

    def axis(self, name: str) -> np.ndarray:
        if name not in AXES:
            raise KeyError(name)
        return getattr(self, name)

    def measure(self, name: str) -> dict[str, np.ndarray]:
        return dict(self.measures[name])

    def has_missing(self) -> bool:
        """True if any timestamp or axis reading is NaN or infinite."""
        return not all(np.isfinite(getattr(self, name)).all() for name in COLUMNS)

    def with_axes(self, x: Any, y: Any, z: Any) -> "ReadingStream":
        return ReadingStream(t=self.t, x=x, y=y, z=z, measures=self._copy_measures())

    def with_measure(self, name: str, by_axis: Mapping[str, Any]) -> "ReadingStream":
        measures = self._copy_measures()
        measures[name] = dict(by_axis)
        return ReadingStream(t=self.t, x=self.x, y=self.y, z=self.z, measures=measures)

    def relative(self) -> "ReadingStream":
        """Re-base timestamps so the first sample is at t=0."""
        if self.n == 0:
            return self
        return ReadingStream(
            t=self.t - self.t[0], x=self.x, y=self.y, z=self.z, measures=self._copy_measures()
        )

    def slice_index(self, start: int, stop: int) -> "ReadingStream":
        return self._take(slice(start, stop))

    def slice_time(self, t_min: float, t_max: float) -> "ReadingStream":
        """Samples with t_min <= t <= t_max."""
        return self._take((self.t >= t_min) & (self.t <= t_max))

    def _take(self, index: Any) -> "ReadingStream":
        return ReadingStream(
            t=self.t[index],
            x=self.x[index],
            y=self.y[index],
            z=self.z[index],
            measures={
                m: {axis: arr[index] for axis, arr in by_axis.items()}
                for m, by_axis in self.measures.items()
            },
        )

    def _copy_measures(self) -> dict[str, dict[str, np.ndarray]]:
        return {m: dict(by_axis) for m, by_axis in self.measures.items()}
