# test/test_tremor.py
import numpy as np
import pytest

import motionfeatures.assays.tremor as tremor
from motionfeatures import get_tremor_features
from motionfeatures.core import InvalidConfiguration, OK_MARKER, PipelineConfig
from motionfeatures.processing import ROTATION_REASON, accelerometer_features


def summary(values):
    return {"mean": float(np.mean(values)), "sd": float(np.std(values))}


def _columns(n=1000, fs=100.0, seed=0, offset=0.0):
    rng = np.random.default_rng(seed)
    t = np.arange(n) / fs
    tremor_signal = np.sin(2 * np.pi * 5 * t)
    return {
        "t": t + offset,
        "x": tremor_signal + 0.1 * rng.normal(size=n),
        "y": 0.3 * tremor_signal + 0.1 * rng.normal(size=n),
        "z": 9.81 + 0.1 * rng.normal(size=n),
    }


def _gravity(n=1000, fs=100.0):
    t = np.arange(n) / fs
    return {"t": t, "x": np.full(n, 1.0), "y": np.full(n, 0.5), "z": np.full(n, 9.7)}


def _extract(accel=None, gyro=None, **kwargs):
    kwargs.setdefault("funs", [summary])
    kwargs.setdefault("time_range", (0, 10))
    return get_tremor_features(
        _columns(seed=0) if accel is None else accel,
        _columns(seed=1) if gyro is None else gyro,
        **kwargs,
    )


def test_end_to_end_without_gravity():
    table = _extract()
    assert len(table) == 6 * 3 * 2
    assert table.sensors == ["accelerometer", "gyroscope"]
    assert table.windows == list(range(6))
    rows = table.to_rows()
    assert all(row["error"] == OK_MARKER for row in rows)
    assert table.columns[:3] == ["sensor", "axis", "window"]
    assert table.columns[-1] == "error"


def test_default_time_range_uses_one_to_nine_seconds():
    table = get_tremor_features(_columns(seed=0, offset=1000.0), _columns(seed=1), funs=[summary])
    assert table.windows == list(range(5))
    assert len(table) == 30


def test_malformed_accelerometer_short_circuits(monkeypatch):
    calls = []
    monkeypatch.setattr(tremor, "sensor_features", lambda *a, **k: calls.append(a))

    accel = _columns()
    accel["x"][10] = np.nan
    table = _extract(accel=accel)

    assert calls == []
    assert len(table) == 1
    assert table.to_rows() == [
        {"sensor": None, "axis": None, "window": None, "error": "Malformed accelerometer data"}
    ]


def test_malformed_gyroscope_and_missing_columns():
    gyro = _columns()
    gyro["z"][0] = np.nan
    assert _extract(gyro=gyro).errors == ["Malformed gyroscope data"]

    gyro = _columns()
    del gyro["y"]
    assert _extract(gyro=gyro).errors == ["Malformed gyroscope data"]

    assert _extract(accel={"t": [], "x": [], "y": [], "z": []}).errors == [
        "Malformed accelerometer data"
    ]


def test_stage_failure_is_local_to_its_sensor():
    gyro = _columns(seed=1)
    gyro["t"][500] = gyro["t"][499]
    table = _extract(gyro=gyro, gravity_data=_gravity())

    accel_only = accelerometer_features(
        tremor.coerce_stream(_columns(seed=0), "accelerometer").value,
        [summary],
        PipelineConfig(time_range=(0, 10)),
    )
    assert table.select("accelerometer") == accel_only
    gyro_rows = table.select("gyroscope")
    assert len(gyro_rows) == 1
    assert gyro_rows.errors == ["Derivative Error"]
    assert len(table) == 19


def test_both_sensor_failures_are_reported_side_by_side():
    table = _extract(accel=_columns(fs=40.0), gyro=_columns(fs=40.0))
    assert len(table) == 2
    assert [r.sensor for r in table] == ["accelerometer", "gyroscope"]
    assert table.errors == ["Bandpass Error", "Bandpass Error"]


def test_gravity_annotation_joins_by_window():
    gravity = _gravity()
    gravity["x"][300:310] = -1.0
    table = _extract(gravity_data=gravity, overlap=0.0)

    assert table.windows == [0, 1, 2]
    for row in table.to_rows():
        if row["window"] == 1:
            assert row["error"] == ROTATION_REASON
        else:
            assert row["error"] == OK_MARKER
    assert sum(1 for r in table if r.error) == 6


def test_malformed_gravity_marks_every_row():
    gravity = _gravity()
    gravity["y"][0] = np.nan
    table = _extract(gravity_data=gravity)
    assert len(table) == 36
    assert set(table.errors) == {"Malformed gravity data"}
    assert len(table.errors) == 36


def test_feature_errors_survive_the_outlier_join():
    def failing(values):
        raise ValueError("not enough peaks")

    table = _extract(funs=[summary, failing], gravity_data=_gravity(), measures=["acceleration"])
    assert len(table) == 36
    assert all(r.error == "acceleration.failing: not enough peaks" for r in table)
    assert all("acceleration.mean" in r.features for r in table)


def test_repeated_calls_are_identical():
    first = _extract(gravity_data=_gravity()).to_rows()
    second = _extract(gravity_data=_gravity()).to_rows()
    assert first == second


def test_parallel_matches_sequential():
    assert _extract(parallel=True) == _extract()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"window_length": 0},
        {"overlap": 1.0},
        {"frequency_range": (25, 1)},
        {"funs": []},
        {"funs": ["mean"]},
        {"measures": ["snap"]},
    ],
)
def test_configuration_errors_raise_before_processing(kwargs):
    with pytest.raises(InvalidConfiguration):
        _extract(**kwargs)
