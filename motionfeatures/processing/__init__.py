"""
Signal-processing stages for motionfeatures.

- preprocess: tidy, trim, detrend and kinematic derivation of a raw stream
- filtering: sampling-rate estimation and Butterworth bandpass per window
- features: application of user-supplied feature functions to one series
- pipeline: per-sensor composition of the stages into a FeatureTable
- outliers: gravity-based per-window validity annotations
"""

from .preprocess import (
    ACF,
    PRIMARY_MEASURE,
    DERIVED_MEASURES,
    autocorrelation,
    default_measures,
    derive_kinematics,
    detrend,
    preprocess,
    tidy,
    trim,
)
from .filtering import bandpass, bandpass_window, estimate_sampling_rate
from .features import FeatureFunction, FeatureOutcome, apply_features, function_name
from .pipeline import (
    accelerometer_features,
    extract_windows,
    filter_windows,
    gyroscope_features,
    merge_sensor_tables,
    sensor_features,
    sensor_measures,
)
from .outliers import MAGNITUDE_REASON, ROTATION_REASON, tag_outlier_windows, window_tag


__all__ = [
    # preprocess
    "ACF",
    "PRIMARY_MEASURE",
    "DERIVED_MEASURES",
    "autocorrelation",
    "default_measures",
    "derive_kinematics",
    "detrend",
    "preprocess",
    "tidy",
    "trim",

    # filtering
    "bandpass",
    "bandpass_window",
    "estimate_sampling_rate",

    # features
    "FeatureFunction",
    "FeatureOutcome",
    "apply_features",
    "function_name",

    # pipeline
    "accelerometer_features",
    "extract_windows",
    "filter_windows",
    "gyroscope_features",
    "merge_sensor_tables",
    "sensor_features",
    "sensor_measures",

    # outliers
    "MAGNITUDE_REASON",
    "ROTATION_REASON",
    "tag_outlier_windows",
    "window_tag",
]
