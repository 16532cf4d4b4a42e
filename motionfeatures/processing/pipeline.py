"""
Per-sensor feature pipeline: preprocess -> window -> bandpass -> extract.

`sensor_features` never raises for data problems. Any stage failure
collapses the branch into a single error row tagged with the sensor, so
branches can always be concatenated.
"""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from motionfeatures.core import (
    AXES,
    SENSORS,
    FeatureRecord,
    FeatureTable,
    Failure,
    InvalidConfiguration,
    Ok,
    PipelineConfig,
    ReadingStream,
    Result,
    Window,
    bind,
    chain,
    ensure_aligned,
    join_errors,
    segment,
)

from .features import FeatureFunction, apply_features
from .filtering import bandpass_window
from .preprocess import ACF, PRIMARY_MEASURE, autocorrelation, default_measures, preprocess

logger = logging.getLogger(__name__)


def sensor_measures(sensor: str, requested: Sequence[str] | None) -> tuple[str, ...]:
    """
    Measures to extract on for `sensor`.

    Requested names that only exist for the other sensor are skipped; names
    unknown to every sensor are a configuration error.
    """
    available = default_measures(sensor)
    if requested is None:
        return available
    known = {m for s in SENSORS for m in default_measures(s)}
    unknown = [m for m in requested if m not in known]
    if unknown:
        raise InvalidConfiguration(f"Unknown measure(s): {', '.join(unknown)}")
    return tuple(m for m in requested if m in available)


def filter_windows(windows: list[Window], config: PipelineConfig) -> Result[list[Window]]:
    filtered = []
    for w in windows:
        out = bandpass_window(w, config.frequency_range, config.filter_order)
        if isinstance(out, Failure):
            return out
        filtered.append(out.value)
    return Ok(filtered)


def extract_windows(
    windows: Iterable[Window],
    sensor: str,
    measures: Sequence[str],
    functions: Sequence[FeatureFunction],
) -> FeatureTable:
    """One record per (window, axis); features are keyed `<measure>.<feature>`."""
    primary = PRIMARY_MEASURE[sensor]
    records = []
    for w in windows:
        series = {}
        for m in measures:
            if m == ACF:
                series[m] = {a: autocorrelation(w.samples.measures[primary][a]) for a in AXES}
            else:
                series[m] = w.samples.measures[m]

        for axis in AXES:
            features: dict[str, float] = {}
            errors: list[str] = []
            for m, by_axis in series.items():
                outcome = apply_features(by_axis[axis], functions)
                features.update({f"{m}.{k}": v for k, v in outcome.values.items()})
                errors.extend(f"{m}.{e}" for e in outcome.errors)
            records.append(
                FeatureRecord(
                    sensor=sensor,
                    axis=axis,
                    window=w.index,
                    features=features,
                    error=join_errors(*errors),
                )
            )
        logger.debug("%s window %d: extracted %d measure(s)", sensor, w.index, len(series))
    return FeatureTable(records=tuple(records))


def sensor_features(
    stream: ReadingStream | Result[ReadingStream],
    sensor: str,
    functions: Sequence[FeatureFunction],
    config: PipelineConfig,
) -> FeatureTable:
    """
    Feature table for one sensor stream, or a single error row.

    A Failure passed in as `stream` is turned into the error row without
    running any stage.
    """
    if sensor not in SENSORS:
        raise InvalidConfiguration(f"Unknown sensor '{sensor}'.")
    measures = sensor_measures(sensor, config.measures)
    functions = tuple(functions)

    incoming = stream if isinstance(stream, (Ok, Failure)) else Ok(stream)
    result = chain(
        bind(incoming, lambda s: preprocess(s, sensor, config.time_range)),
        lambda s: Ok(segment(s, config.window_length, config.overlap)),
        lambda ws: filter_windows(ws, config),
        lambda ws: Ok(extract_windows(ws, sensor, measures, functions)),
    )

    if isinstance(result, Failure):
        logger.warning("%s pipeline failed: %s", sensor, result.reason)
        return FeatureTable.error_table(result.reason, sensor=sensor)

    table = result.value
    logger.info("%s pipeline: %d window(s), %d row(s)", sensor, len(table.windows), len(table))
    return table


def accelerometer_features(
    stream: ReadingStream | Result[ReadingStream],
    functions: Sequence[FeatureFunction],
    config: PipelineConfig,
) -> FeatureTable:
    return sensor_features(stream, "accelerometer", functions, config)


def gyroscope_features(
    stream: ReadingStream | Result[ReadingStream],
    functions: Sequence[FeatureFunction],
    config: PipelineConfig,
) -> FeatureTable:
    return sensor_features(stream, "gyroscope", functions, config)


def merge_sensor_tables(
    branches: Sequence[tuple[FeatureTable, PipelineConfig]],
) -> FeatureTable:
    """
    Concatenate per-sensor tables in the given order.

    All branches must share one window index space; mismatched windowing
    raises WindowMismatch.
    """
    if not branches:
        return FeatureTable()
    _, reference = branches[0]
    for _, config in branches[1:]:
        ensure_aligned(reference, config)
    return FeatureTable.concat(table for table, _ in branches)
