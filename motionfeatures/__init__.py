"""
motionfeatures: windowed movement features from accelerometer and gyroscope recordings.
"""

import logging

from .assays import get_tremor_features
from .core import FeatureRecord, FeatureTable, GravityPolicy, PipelineConfig, ReadingStream

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "get_tremor_features",
    "FeatureRecord",
    "FeatureTable",
    "GravityPolicy",
    "PipelineConfig",
    "ReadingStream",
]

__version__ = "0.1.0"
