# motionfeatures/assays/tremor.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Sequence

from motionfeatures.core import (
    Failure,
    FeatureTable,
    GravityPolicy,
    InvalidConfiguration,
    InvalidReadingStream,
    Ok,
    SENSORS,
    PipelineConfig,
    ReadingStream,
    Result,
    bind,
)
from motionfeatures.processing import (
    FeatureFunction,
    merge_sensor_tables,
    sensor_features,
    sensor_measures,
    tag_outlier_windows,
)

logger = logging.getLogger(__name__)


def coerce_stream(data: Any, name: str) -> Result[ReadingStream]:
    """ReadingStream from `data`, or Failure("Malformed <name> data")."""
    reason = f"Malformed {name} data"
    try:
        stream = ReadingStream.from_columns(data)
    except InvalidReadingStream as e:
        logger.warning("%s: %s", reason, e)
        return Failure(reason)
    if stream.n == 0 or stream.has_missing():
        logger.warning("%s: empty or contains missing values", reason)
        return Failure(reason)
    return Ok(stream)


def _run_branches(
    streams: Sequence[tuple[str, ReadingStream]],
    functions: Sequence[FeatureFunction],
    config: PipelineConfig,
    parallel: bool,
) -> list[FeatureTable]:
    if not parallel:
        return [sensor_features(s, sensor, functions, config) for sensor, s in streams]
    with ThreadPoolExecutor(max_workers=len(streams)) as pool:
        futures = [
            pool.submit(sensor_features, s, sensor, functions, config) for sensor, s in streams
        ]
        return [f.result() for f in futures]


def get_tremor_features(
    accelerometer_data: Any,
    gyroscope_data: Any,
    gravity_data: Any = None,
    funs: Iterable[FeatureFunction] = (),
    window_length: int = 256,
    time_range: tuple[float, float] = (1, 9),
    frequency_range: tuple[float, float] = (1, 25),
    overlap: float = 0.5,
    *,
    measures: Sequence[str] | None = None,
    filter_order: int = 4,
    policy: GravityPolicy | None = None,
    parallel: bool = False,
) -> FeatureTable:
    """
    Extract tremor features from accelerometer and gyroscope recordings.

    Each stream is a ReadingStream or any column mapping with t, x, y, z
    (a dict of sequences, a pandas DataFrame, ...). `funs` are feature
    functions mapping one axis series to named scalars.

    Returns one row per sensor, axis and window with columns
    sensor/axis/window/<measure>.<feature>/error. When an input is malformed
    the result is a single error row; when a sensor pipeline fails, both
    sensors' tables are returned side by side without outlier tagging.

    Raises InvalidConfiguration for invalid window or filter settings.
    """
    config = PipelineConfig(
        window_length=window_length,
        overlap=overlap,
        time_range=time_range,
        frequency_range=frequency_range,
        filter_order=filter_order,
        measures=measures,
    )
    functions = tuple(funs)
    if not functions:
        raise InvalidConfiguration("At least one feature function is required.")
    if not all(callable(f) for f in functions):
        raise InvalidConfiguration("Feature functions must be callable.")
    for sensor in SENSORS:
        sensor_measures(sensor, config.measures)

    # check input integrity before running either pipeline
    accel = coerce_stream(accelerometer_data, "accelerometer")
    if isinstance(accel, Failure):
        return FeatureTable.error_table(accel.reason)
    gyro = coerce_stream(gyroscope_data, "gyroscope")
    if isinstance(gyro, Failure):
        return FeatureTable.error_table(gyro.reason)

    accel_table, gyro_table = _run_branches(
        [("accelerometer", accel.value), ("gyroscope", gyro.value)],
        functions,
        config,
        parallel,
    )
    features = merge_sensor_tables([(accel_table, config), (gyro_table, config)])

    # return if processing is errored
    if accel_table.is_error or gyro_table.is_error:
        logger.warning("Tremor features errored: %s", "; ".join(features.errors))
        return features

    if gravity_data is None:
        return features.mark_ok()

    tags = bind(
        coerce_stream(gravity_data, "gravity"),
        lambda g: tag_outlier_windows(g, config, policy),
    )
    if isinstance(tags, Failure):
        logger.warning("Outlier tagging failed: %s", tags.reason)
        return features.annotate({w: tags.reason for w in features.windows})
    return features.annotate(tags.value)
