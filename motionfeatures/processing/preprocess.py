"""
Cleaning transforms applied to a raw sensor stream before windowing.

Each stage takes usable data and returns a Result; `preprocess` chains them
so that the first failure is forwarded untouched to the caller.
"""
from __future__ import annotations

import functools
import logging

import numpy as np
from scipy import signal
from scipy.integrate import cumulative_trapezoid

from motionfeatures.core import AXES, Failure, Ok, ReadingStream, Result, chain, guard

logger = logging.getLogger(__name__)

# Quantity measured directly by each sensor
PRIMARY_MEASURE = {
    "accelerometer": "acceleration",
    "gyroscope": "velocity",
}

# Quantities derived from the primary one, in extraction order
DERIVED_MEASURES = {
    "accelerometer": ("jerk", "velocity", "displacement"),
    "gyroscope": ("acceleration", "displacement"),
}

ACF = "acf"


def default_measures(sensor: str) -> tuple[str, ...]:
    return (PRIMARY_MEASURE[sensor],) + DERIVED_MEASURES[sensor] + (ACF,)


def tidy(stream: ReadingStream) -> Result[ReadingStream]:
    """Reject empty streams and streams with missing readings."""
    if stream.n == 0:
        return Failure("Empty data")
    if stream.has_missing():
        return Failure("Malformed data")
    return Ok(stream)


def trim(stream: ReadingStream, time_range: tuple[float, float]) -> Result[ReadingStream]:
    """Keep samples whose time since the first sample lies in `time_range` (inclusive)."""
    t_min, t_max = time_range
    out = stream.relative().slice_time(t_min, t_max)
    if out.n == 0:
        return Failure("Time range selects no samples")
    logger.debug("Trimmed %d -> %d samples to %s", stream.n, out.n, time_range)
    return Ok(out)


@guard("Detrend Error")
def detrend(stream: ReadingStream) -> ReadingStream:
    """Remove the least-squares line from each axis. Constant axes are rejected."""
    if stream.n < 2:
        raise ValueError(f"need at least 2 samples to fit a trend, got {stream.n}")
    for a in AXES:
        if np.ptp(stream.axis(a)) == 0:
            raise ValueError(f"axis {a} is constant")
    axes = [signal.detrend(stream.axis(a), type="linear") for a in AXES]
    if not all(np.isfinite(v).all() for v in axes):
        raise ValueError("detrended values are not finite")
    return stream.with_axes(*axes)


def _derivative(values: np.ndarray, t: np.ndarray) -> np.ndarray:
    return np.gradient(values, t)


def _integral(values: np.ndarray, t: np.ndarray) -> np.ndarray:
    return cumulative_trapezoid(values, t, initial=0.0)


@guard("Derivative Error")
def derive_kinematics(stream: ReadingStream, sensor: str) -> ReadingStream:
    """
    Attach the sensor's primary measure and its kinematic derivatives.

    accelerometer: acceleration (raw), jerk, velocity, displacement
    gyroscope:     velocity (raw), acceleration, displacement
    """
    primary = PRIMARY_MEASURE[sensor]
    t = stream.t
    if stream.n < 2:
        raise ValueError(f"need at least 2 samples to differentiate, got {stream.n}")
    if np.any(np.diff(t) <= 0):
        raise ValueError("timestamps must be strictly increasing")

    base = {a: stream.axis(a) for a in AXES}
    measures = {primary: base}
    if sensor == "accelerometer":
        measures["jerk"] = {a: _derivative(v, t) for a, v in base.items()}
        measures["velocity"] = {a: _integral(v, t) for a, v in base.items()}
        measures["displacement"] = {a: _integral(v, t) for a, v in measures["velocity"].items()}
    else:
        measures["acceleration"] = {a: _derivative(v, t) for a, v in base.items()}
        measures["displacement"] = {a: _integral(v, t) for a, v in base.items()}

    out = stream
    for name, by_axis in measures.items():
        if not all(np.isfinite(v).all() for v in by_axis.values()):
            raise ValueError(f"{name} is not finite")
        out = out.with_measure(name, by_axis)
    return out


def autocorrelation(values: np.ndarray) -> np.ndarray:
    """
    Normalised autocorrelation for lags 0..n-1.

    A constant series has no defined autocorrelation and yields all NaN.
    """
    v = np.asarray(values, dtype=float)
    v = v - v.mean() if v.size else v
    denom = float(np.dot(v, v))
    if v.size == 0 or denom == 0.0:
        return np.full(v.size, np.nan)
    return np.correlate(v, v, mode="full")[v.size - 1:] / denom


def preprocess(
    stream: ReadingStream,
    sensor: str,
    time_range: tuple[float, float],
) -> Result[ReadingStream]:
    """tidy -> trim -> detrend -> derive kinematics."""
    return chain(
        tidy(stream),
        functools.partial(trim, time_range=time_range),
        detrend,
        functools.partial(derive_kinematics, sensor=sensor),
    )
