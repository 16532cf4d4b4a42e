"""
Core domain objects for motionfeatures.

This module defines the immutable data model shared by every stage:
- ReadingStream: validated 3-axis recording (t, x, y, z) plus derived measures
- Window: fixed-length slice of a ReadingStream
- FeatureRecord / FeatureTable: per-axis, per-window feature rows
- Ok / Failure: error-as-data result threaded through the pipeline
- PipelineConfig / GravityPolicy: windowing, filtering and outlier settings

The core layer has no signal-processing dependencies.
"""

from .readings import ReadingStream, AXES, COLUMNS
from .windowing import Window, segment, window_step, window_count, validate_window_params
from .table import FeatureRecord, FeatureTable, OK_MARKER, SENSORS, join_errors
from .result import Ok, Failure, Result, bind, chain, guard, is_failure
from .config import PipelineConfig, GravityPolicy, ensure_aligned
from .exceptions import (
    CoreError,
    InvalidReadingStream,
    InvalidWindow,
    InvalidFeatureTable,
    InvalidConfiguration,
    WindowMismatch,
)


__all__ = [
    # readings
    "ReadingStream",
    "AXES",
    "COLUMNS",

    # windowing
    "Window",
    "segment",
    "window_step",
    "window_count",
    "validate_window_params",

    # feature tables
    "FeatureRecord",
    "FeatureTable",
    "OK_MARKER",
    "SENSORS",
    "join_errors",

    # results
    "Ok",
    "Failure",
    "Result",
    "bind",
    "chain",
    "guard",
    "is_failure",

    # configuration
    "PipelineConfig",
    "GravityPolicy",
    "ensure_aligned",

    # exceptions
    "CoreError",
    "InvalidReadingStream",
    "InvalidWindow",
    "InvalidFeatureTable",
    "InvalidConfiguration",
    "WindowMismatch",
]
