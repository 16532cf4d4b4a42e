# test/test_pipeline.py
import numpy as np
import pytest

from motionfeatures.core import (
    Failure,
    FeatureTable,
    InvalidConfiguration,
    PipelineConfig,
    ReadingStream,
    WindowMismatch,
)
from motionfeatures.processing import (
    accelerometer_features,
    gyroscope_features,
    merge_sensor_tables,
    sensor_features,
    sensor_measures,
)


def summary(values):
    return {"mean": float(np.mean(values)), "sd": float(np.std(values))}


def _stream(n=1000, fs=100.0, seed=0):
    rng = np.random.default_rng(seed)
    t = np.arange(n) / fs
    tremor = np.sin(2 * np.pi * 5 * t)
    return ReadingStream(
        t=t,
        x=tremor + 0.1 * rng.normal(size=n),
        y=0.5 * tremor + 0.1 * rng.normal(size=n),
        z=9.81 + 0.1 * rng.normal(size=n),
    )


CONFIG = PipelineConfig(time_range=(0, 10))


def test_accelerometer_table_shape_and_keys():
    table = accelerometer_features(_stream(), [summary], CONFIG)
    assert not table.is_error
    assert len(table) == 6 * 3
    assert table.windows == list(range(6))
    assert table.sensors == ["accelerometer"]
    assert [r.axis for r in table][:3] == ["x", "y", "z"]
    assert table.feature_names == [
        "acceleration.mean", "acceleration.sd",
        "jerk.mean", "jerk.sd",
        "velocity.mean", "velocity.sd",
        "displacement.mean", "displacement.sd",
        "acf.mean", "acf.sd",
    ]
    assert all(r.error is None for r in table)


def test_gyroscope_uses_angular_measures():
    table = gyroscope_features(_stream(seed=1), [summary], CONFIG)
    assert len(table) == 18
    assert table.feature_names[:2] == ["velocity.mean", "velocity.sd"]
    assert "jerk.mean" not in table.feature_names


def test_measure_selection():
    config = PipelineConfig(time_range=(0, 10), measures=("acceleration", "jerk"))
    accel = accelerometer_features(_stream(), [summary], config)
    gyro = gyroscope_features(_stream(), [summary], config)
    assert accel.feature_names == ["acceleration.mean", "acceleration.sd", "jerk.mean", "jerk.sd"]
    assert gyro.feature_names == ["acceleration.mean", "acceleration.sd"]

    with pytest.raises(InvalidConfiguration):
        sensor_measures("gyroscope", ("snap",))


def test_default_time_range_trims_before_windowing():
    table = accelerometer_features(_stream(), [summary], PipelineConfig())
    assert table.windows == list(range(5))


def test_short_stream_gives_empty_table():
    table = accelerometer_features(_stream(n=100), [summary], CONFIG)
    assert len(table) == 0
    assert not table.is_error


def test_malformed_stream_collapses_to_error_row():
    s = _stream()
    x = s.x.copy()
    x[10] = np.nan
    table = gyroscope_features(s.with_axes(x, s.y, s.z), [summary], CONFIG)
    assert len(table) == 1
    assert table.is_error
    assert table[0].sensor == "gyroscope"
    assert table[0].features == {}
    assert table.errors == ["Malformed data"]


def test_bandpass_failure_collapses_whole_branch():
    table = accelerometer_features(_stream(fs=40.0), [summary], CONFIG)
    assert len(table) == 1
    assert table.errors == ["Bandpass Error"]


def test_incoming_failure_is_forwarded_unchanged():
    table = sensor_features(Failure("Upstream Error"), "accelerometer", [summary], CONFIG)
    assert table.errors == ["Upstream Error"]
    assert table[0].sensor == "accelerometer"


def test_feature_function_failure_stays_in_its_rows():
    def fragile(values):
        if values.mean() > 0:
            raise ZeroDivisionError("division by zero")
        return {"neg": 1.0}

    table = accelerometer_features(_stream(), [fragile, summary], CONFIG)
    assert not table.is_error
    assert len(table) == 18
    assert all("acceleration.mean" in r.features for r in table)
    assert any(r.error and "fragile: division by zero" in r.error for r in table)


def test_unknown_sensor_is_a_contract_error():
    with pytest.raises(InvalidConfiguration):
        sensor_features(_stream(), "magnetometer", [summary], CONFIG)


def test_merge_requires_aligned_windows():
    a = accelerometer_features(_stream(), [summary], CONFIG)
    g = gyroscope_features(_stream(), [summary], CONFIG)
    merged = merge_sensor_tables([(a, CONFIG), (g, CONFIG)])
    assert len(merged) == 36
    assert merged.sensors == ["accelerometer", "gyroscope"]
    assert merge_sensor_tables([]) == FeatureTable()

    with pytest.raises(WindowMismatch):
        merge_sensor_tables([(a, CONFIG), (g, PipelineConfig(time_range=(0, 10), window_length=128))])
