"""
Bandpass filtering of windowed measures.

Butterworth bandpass in second-order sections, the same construction used
for tremor isolation on the MPU6050 accelerometer/gyroscope streams.
"""
from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
from scipy import signal

from motionfeatures.core import Failure, Ok, Result, Window, bind, guard

logger = logging.getLogger(__name__)


def estimate_sampling_rate(t: Sequence[float]) -> Result[float]:
    """Mean sampling rate in Hz from timestamps in seconds."""
    t = np.asarray(t, dtype=float)
    if t.size < 2:
        logger.warning("Cannot estimate sampling rate from %d sample(s)", t.size)
        return Failure("Sampling Rate Error")
    if np.any(np.diff(t) <= 0):
        logger.warning("Cannot estimate sampling rate: timestamps are not increasing")
        return Failure("Sampling Rate Error")
    return Ok(float((t.size - 1) / (t[-1] - t[0])))


@guard("Bandpass Error")
def _butter_bandpass(
    values: np.ndarray,
    sampling_rate: float,
    low: float,
    high: float,
    order: int,
) -> np.ndarray:
    nyquist = sampling_rate / 2.0
    if high >= nyquist:
        raise ValueError(f"upper cutoff {high} Hz is not below Nyquist ({nyquist:.2f} Hz)")
    if values.size == 0:
        raise ValueError("empty series")

    sos = signal.butter(order, [low, high], "bandpass", fs=sampling_rate, output="sos")
    filtered = signal.sosfilt(sos, values)
    if not np.isfinite(filtered).all():
        raise ValueError("filter output is not finite")
    return filtered


def bandpass(
    series: np.ndarray | Result[np.ndarray],
    sampling_rate: float,
    frequency_range: tuple[float, float],
    order: int = 4,
) -> Result[np.ndarray]:
    """
    Restrict `series` to `frequency_range`.

    A Failure passed in is returned unchanged.
    """
    if isinstance(series, Failure):
        return series
    if isinstance(series, Ok):
        series = series.value
    low, high = frequency_range
    return _butter_bandpass(
        np.asarray(series, dtype=float), float(sampling_rate), float(low), float(high), int(order)
    )


def _filter_measures(
    window: Window,
    sampling_rate: float,
    frequency_range: tuple[float, float],
    order: int,
) -> Result[Window]:
    samples = window.samples
    for measure, by_axis in window.samples.measures.items():
        filtered = {}
        for axis, values in by_axis.items():
            out = bandpass(values, sampling_rate, frequency_range, order)
            if isinstance(out, Failure):
                logger.warning("Window %d: bandpass failed on %s.%s", window.index, measure, axis)
                return out
            filtered[axis] = out.value
        samples = samples.with_measure(measure, filtered)
    return Ok(window.with_samples(samples))


def bandpass_window(
    window: Window,
    frequency_range: tuple[float, float],
    order: int = 4,
) -> Result[Window]:
    """Filter every derived measure of `window`, estimating the rate from its timestamps."""
    return bind(
        estimate_sampling_rate(window.samples.t),
        lambda fs: _filter_measures(window, fs, frequency_range, order),
    )
