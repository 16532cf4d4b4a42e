"""Task-specific entry points that coordinate several sensor pipelines."""

from .tremor import get_tremor_features

__all__ = ["get_tremor_features"]
